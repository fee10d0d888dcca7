"""
Mail Service
Relays plain text messages through the configured SMTP server.

Transport:
- Port 465: implicit TLS (SMTP_SSL)
- Other ports: plain connection upgraded with STARTTLS when the server offers it
- Login only when SMTP_USER is set

There is no retry: any transport failure is raised as MailTransportError.
"""

import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Any, Dict

from app.core.config import settings


logger = logging.getLogger("mail")

IMPLICIT_TLS_PORT = 465


class MailTransportError(RuntimeError):
    """Connection refused, authentication rejected, timeout or any SMTP error."""
    pass


def build_message(to: str, subject: str, text: str) -> EmailMessage:
    sender = settings.mail_sender
    domain = sender.rsplit("@", 1)[-1] if "@" in sender else None

    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = subject
    msg["Message-ID"] = make_msgid(domain=domain)
    msg.set_content(text)
    return msg


def _open_connection() -> smtplib.SMTP:
    if settings.SMTP_PORT == IMPLICIT_TLS_PORT:
        return smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT)
    return smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT)


def send_mail(to: str, subject: str, text: str) -> Dict[str, Any]:
    """
    Send one message.

    Args:
        to: Recipient address
        subject: Subject line
        text: Plain text body

    Returns:
        Acceptance metadata: messageId, accepted, rejected, envelope

    Raises:
        MailTransportError: the message could not be handed to the server
    """
    if not settings.SMTP_HOST:
        raise MailTransportError("SMTP_HOST is not configured.")

    msg = build_message(to, subject, text)
    recipients = [to]

    try:
        with _open_connection() as server:
            if settings.SMTP_PORT != IMPLICIT_TLS_PORT:
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls()
                    server.ehlo()
            if settings.SMTP_USER:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            refused = server.send_message(msg, from_addr=settings.mail_sender, to_addrs=recipients)
    except (smtplib.SMTPException, OSError) as exc:
        # OSError covers refused connections and socket timeouts
        raise MailTransportError(f"{type(exc).__name__}: {exc}") from exc

    refused = refused or {}
    accepted = [address for address in recipients if address not in refused]

    logger.info(
        f"MAIL_SENT | message_id={msg['Message-ID']} | accepted={len(accepted)} | rejected={len(refused)}"
    )
    return {
        "message_id": msg["Message-ID"],
        "accepted": accepted,
        "rejected": list(refused),
        "envelope": {"from": settings.mail_sender, "to": recipients},
    }
