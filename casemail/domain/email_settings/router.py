"""Email settings router - FastAPI endpoints for stored SMTP credentials"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from .schemas import EmailSettingsResponse, EmailSettingsSave, MessageResponse
from .service import EmailSettingsService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/email-settings",
    tags=["Email Settings"],
    dependencies=[Depends(require_admin)],
)


def get_email_settings_service(db: Session = Depends(get_db)) -> EmailSettingsService:
    """Dependency injection for EmailSettingsService"""
    return EmailSettingsService(db)


@router.post("", response_model=MessageResponse)
def save_email_settings(
    data: EmailSettingsSave,
    service: EmailSettingsService = Depends(get_email_settings_service),
):
    """Save or update a user's SMTP settings (admin only)"""
    service.save_settings(data)
    logger.info(f"SMTP settings saved for user {data.userId}")
    return MessageResponse(message="Settings saved")


@router.get("/{user_id}", response_model=EmailSettingsResponse)
def get_email_settings(
    user_id: str,
    service: EmailSettingsService = Depends(get_email_settings_service),
):
    """Get a user's SMTP settings without the password"""
    return service.get_settings(user_id)
