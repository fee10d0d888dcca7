"""
Mail Relay Endpoint
Sends a plain text message through the configured SMTP server.
"""

from fastapi import APIRouter, HTTPException, Request, status

from app.schemas.mail import MailRequest, MailResponse
from app.services import mail_service
from app.services.error_logging import error_logger
from app.services.mail_service import MailTransportError


router = APIRouter(prefix="/mail", tags=["Mail"])


@router.post(
    "",
    response_model=MailResponse,
    summary="Send email",
    responses={
        200: {
            "description": "Message accepted by the SMTP server",
            "content": {
                "application/json": {
                    "example": {
                        "message": "Email sent successfully",
                        "info": {
                            "messageId": "<170512345.1234.1@servicedesk>",
                            "accepted": ["alice@mail.com"],
                            "rejected": [],
                            "envelope": {"from": "desk@mail.com", "to": ["alice@mail.com"]}
                        }
                    }
                }
            }
        },
        400: {"description": "to, subject or text missing, or to is not a valid address"},
        500: {"description": "SMTP transport failure"}
    }
)
def send_email(payload: MailRequest, request: Request):
    """
    Send an email.

    All of to, subject and text are required and must not be blank;
    to must be one valid address and subject a single line.
    Transport failures are logged and reported as a generic 500; the
    message is not retried.
    """
    if not payload.is_complete():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing email, subject, or text"
        )
    if not payload.has_valid_headers():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid email address or subject"
        )

    try:
        info = mail_service.send_mail(payload.to, payload.subject, payload.text)
    except MailTransportError as exc:
        error_logger.log_error(exc, request=request, context={"subject_length": len(payload.subject)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error sending email"
        )

    return {"message": "Email sent successfully", "info": info}
