"""Mail relay service - send one message with a user's stored SMTP credentials"""

import logging

from sqlalchemy.orm import Session

from ...encryption import DecryptionError, EncryptionKeyError, decrypt
from ...errors import CaseMailError, SettingsNotFoundError
from ..email_settings.repository import EmailSettingsRepository
from . import smtp_client
from .schemas import SendEmailRequest

logger = logging.getLogger(__name__)


class MailRelayService:
    """Service layer for relaying email on behalf of a user"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EmailSettingsRepository()

    def send_email(self, request: SendEmailRequest) -> None:
        """
        Look up the user's settings, decrypt the password and send.
        No SMTP connection is attempted unless both of those succeed.
        """
        settings = self.repo.get_by_user_id(self.db, request.userId)
        if not settings:
            logger.warning(f"Send requested for user {request.userId} with no SMTP settings")
            raise SettingsNotFoundError("No SMTP settings")

        try:
            password = decrypt(settings.password_encrypted)
        except (DecryptionError, EncryptionKeyError) as e:
            logger.error(f"Cannot decrypt SMTP password for user {request.userId}: {e}")
            raise CaseMailError(f"Could not decrypt stored SMTP password: {e}") from e

        recipients = [str(address) for address in request.to]
        logger.info(
            f"Relaying email for user {request.userId} via {settings.smtp_server}:{settings.port} "
            f"to {len(recipients)} recipient(s)"
        )

        smtp_client.send_message(
            host=settings.smtp_server,
            port=settings.port,
            username=settings.username,
            password=password,
            from_email=settings.email,
            recipients=recipients,
            subject=request.subject,
            body=request.body,
            use_ssl=bool(settings.use_ssl),
        )
