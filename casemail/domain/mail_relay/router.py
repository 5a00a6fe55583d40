"""Mail relay router - FastAPI endpoint for sending email"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import SendEmailRequest, SendEmailResponse
from .service import MailRelayService

router = APIRouter(prefix="/api", tags=["Mail Relay"])


def get_mail_relay_service(db: Session = Depends(get_db)) -> MailRelayService:
    """Dependency injection for MailRelayService"""
    return MailRelayService(db)


@router.post("/send-email", response_model=SendEmailResponse)
def send_email(
    request: SendEmailRequest,
    service: MailRelayService = Depends(get_mail_relay_service),
):
    """Send one email using the user's stored SMTP settings"""
    service.send_email(request)
    return SendEmailResponse(message="Email sent")
