"""
Error Logging Service

Logging setup for the whole process, plus an error logger used by the
endpoints and the error middleware.

- Console output always; rotating files only when LOG_DIR is writable
- Each logged error carries request line, client ip, context and traceback
- Context is sanitized first: passwords, bcrypt hashes and session tokens
  never reach a log file

Usage:
    from app.services.error_logging import error_logger

    try:
        user_service.delete_user(db, user_id)
    except SQLAlchemyError as e:
        db.rollback()
        error_logger.log_error(e, request=request, context={"user_id": user_id})
"""

import json
import logging
import re
import traceback
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional


logger = logging.getLogger("error_logging")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DETAILED_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_HANDLER_NAME = "console"

MAX_LOG_BYTES = 10 * 1024 * 1024
MAX_BUFFER_CHARS = 50000

# Keys whose values are always redacted (substring match, case-insensitive)
SENSITIVE_KEYS = ("password", "token", "secret", "authorization", "cookie", "api_key", "credential")

# header.payload.signature, base64url segments
_JWT_RE = re.compile(r"^eyJ[\w-]+\.[\w-]+\.[\w-]*$")
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def _rotating_handler(path: Path, level: int, fmt: str, backups: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=backups, encoding="utf-8")
    handler.setLevel(level)
    handler.set_name(f"file:{path.name}")
    handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
    return handler


def configure_logging(level: str = "INFO", log_dir: str = "") -> bool:
    """
    Configure the root logger.

    Files written when log_dir is usable:
    - errors.log: ERROR and above
    - app_detailed.log: everything, with function and line

    Calling it again does not duplicate any handler.

    Returns:
        True if file logging is enabled
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    if all(h.get_name() != CONSOLE_HANDLER_NAME for h in root_logger.handlers):
        console = logging.StreamHandler()
        console.set_name(CONSOLE_HANDLER_NAME)
        console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console)

    if not log_dir:
        return False

    logs_path = Path(log_dir)
    try:
        logs_path.mkdir(parents=True, exist_ok=True)
        probe = logs_path / ".write_test"
        probe.touch()
        probe.unlink()
    except OSError as e:
        logger.warning(f"LOG_DIR {logs_path} is not writable ({e}); logging to console only")
        return False

    attached = {h.get_name() for h in root_logger.handlers}
    for filename, file_level, fmt, backups in (
        ("errors.log", logging.ERROR, LOG_FORMAT, 10),
        ("app_detailed.log", logging.DEBUG, DETAILED_LOG_FORMAT, 5),
    ):
        if f"file:{filename}" not in attached:
            root_logger.addHandler(_rotating_handler(logs_path / filename, file_level, fmt, backups))
    return True


def sanitize_data(data: Any, depth: int = 0) -> Any:
    """
    Copy of data with secrets replaced.

    - Values under a sensitive key become "[REDACTED]"
    - Strings shaped like a session token become "[REDACTED_TOKEN]"
    - bcrypt hashes become "[REDACTED_HASH]"
    """
    if depth > 10:
        return "[MAX_DEPTH]"

    if isinstance(data, dict):
        return {
            key: "[REDACTED]" if any(s in str(key).lower() for s in SENSITIVE_KEYS)
            else sanitize_data(value, depth + 1)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [sanitize_data(item, depth + 1) for item in data]
    if isinstance(data, str):
        if _JWT_RE.match(data):
            return "[REDACTED_TOKEN]"
        if data.startswith(_BCRYPT_PREFIXES):
            return "[REDACTED_HASH]"
    return data


def truncate_string(s: str, max_length: int = 10000) -> str:
    if len(s) <= max_length:
        return s
    return s[:max_length] + f"... [TRUNCATED, total {len(s)} chars]"


def _request_lines(request: Any) -> List[str]:
    try:
        client_ip = request.client.host if request.client else None
        return [
            "",
            "=== REQUEST ===",
            f"{request.method} {request.url.path}",
            f"Query: {request.url.query or None}",
            f"Client IP: {client_ip}",
        ]
    except AttributeError as e:
        return ["", f"[request info unavailable: {e}]"]


def _stack_trace(error: Exception) -> str:
    if error.__traceback__ is None:
        return "(no traceback)"
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


class ErrorLogger:
    """
    Writes full error details to the server log.

    The client only ever gets a generic message; this is where the
    details go instead.
    """

    def log_error(
        self,
        error: Exception,
        request: Optional[Any] = None,
        severity: str = "error",
        context: Optional[Dict] = None,
    ) -> str:
        """
        Log an error with its request, context and traceback.

        Args:
            error: The exception that occurred
            request: FastAPI Request object (optional)
            severity: info, warning, error or critical
            context: Extra data, sanitized before logging

        Returns:
            The formatted error buffer
        """
        lines = [
            "=== ERROR LOG ===",
            f"Timestamp: {datetime.now(timezone.utc).isoformat()}",
            f"Type: {type(error).__name__}",
            f"Message: {error}",
        ]
        if request is not None:
            lines.extend(_request_lines(request))
        if context:
            lines.extend(["", "=== CONTEXT ===", json.dumps(sanitize_data(context), indent=2, default=str)])
        lines.extend(["", "=== STACK TRACE ===", _stack_trace(error)])

        buffer = truncate_string("\n".join(lines), MAX_BUFFER_CHARS)

        path = getattr(getattr(request, "url", None), "path", None)
        level = getattr(logging, severity.upper(), logging.ERROR)
        logger.log(level, f"{type(error).__name__}: {error} | Path: {path or 'N/A'}\n{buffer}")
        return buffer


# Singleton instance
error_logger = ErrorLogger()
