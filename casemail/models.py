from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from .database import Base


class UserEmailSettings(Base):
    """SMTP credentials for one user. Exactly one row per user_id."""

    __tablename__ = "user_email_settings"

    id = Column(Integer, primary_key=True, index=True)
    # Identity provider user id (UUID string from the front-end)
    user_id = Column(String(255), unique=True, index=True, nullable=False)
    smtp_server = Column(String(255), nullable=False)
    port = Column(Integer, nullable=False)
    email = Column(String(255), nullable=False)  # Sender address (From header)
    username = Column(String(255), nullable=False)
    password_encrypted = Column(Text, nullable=False)  # iv_hex:ciphertext_hex, see encryption.py
    use_ssl = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
