"""Email settings service - Business logic for SMTP credential storage"""

import logging

from sqlalchemy.orm import Session

from ...encryption import EncryptionKeyError, encrypt
from ...errors import CaseMailError, SettingsNotFoundError
from ...models import UserEmailSettings
from .repository import EmailSettingsRepository
from .schemas import EmailSettingsResponse, EmailSettingsSave

logger = logging.getLogger(__name__)


class EmailSettingsService:
    """Service layer for SMTP credential storage"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EmailSettingsRepository()

    def save_settings(self, data: EmailSettingsSave) -> None:
        """Encrypt the password and upsert the user's settings"""
        logger.info(f"Saving SMTP settings for user {data.userId}: {data.smtpServer}:{data.port}")

        try:
            password_encrypted = encrypt(data.password)
        except EncryptionKeyError as e:
            logger.error(f"Cannot encrypt SMTP password: {e}")
            raise CaseMailError(f"Encryption is not configured: {e}") from e

        self.repo.upsert(
            self.db,
            data.userId,
            smtp_server=data.smtpServer,
            port=data.port,
            email=str(data.email),
            username=data.username,
            password_encrypted=password_encrypted,
            use_ssl=data.useSSL,
        )

    def get_record(self, user_id: str) -> UserEmailSettings:
        record = self.repo.get_by_user_id(self.db, user_id)
        if not record:
            raise SettingsNotFoundError("Not found")
        return record

    def get_settings(self, user_id: str) -> EmailSettingsResponse:
        """Get the non-secret settings for a user"""
        record = self.get_record(user_id)
        return EmailSettingsResponse(
            smtpServer=record.smtp_server,
            port=record.port,
            email=record.email,
            username=record.username,
            useSSL=bool(record.use_ssl),
        )
