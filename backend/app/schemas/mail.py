"""
Mail Relay Schemas
"""

from typing import List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import Field

from app.schemas.base import CamelModel


class MailRequest(CamelModel):
    """
    Outgoing message.

    Fields are optional at the schema level; the endpoint rejects any
    missing or blank field with a single message.
    """
    to: Optional[str] = Field(None, description="Recipient address", examples=["alice@mail.com"])
    subject: Optional[str] = Field(None, examples=["Your request was updated"])
    text: Optional[str] = Field(None, description="Plain text body")

    def is_complete(self) -> bool:
        return all(value and value.strip() for value in (self.to, self.subject, self.text))

    def has_valid_headers(self) -> bool:
        """True when to is a single valid address and subject has no CR/LF."""
        if "\r" in self.subject or "\n" in self.subject:
            return False
        try:
            validate_email(self.to, check_deliverability=False)
        except EmailNotValidError:
            return False
        return True


class MailEnvelope(CamelModel):
    from_: str = Field(..., alias="from")
    to: List[str]


class MailInfo(CamelModel):
    """Transport acceptance metadata."""
    message_id: str
    accepted: List[str]
    rejected: List[str]
    envelope: MailEnvelope


class MailResponse(CamelModel):
    message: str
    info: MailInfo
