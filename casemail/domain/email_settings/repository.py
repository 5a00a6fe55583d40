"""Email settings repository - Database operations for SMTP credential records"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import UserEmailSettings

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("smtp_server", "port", "email", "username", "password_encrypted", "use_ssl")


def _dialect_insert(db: Session):
    """Return the dialect-specific insert() that supports ON CONFLICT, or None"""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert

        return insert
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert

        return insert
    return None


class EmailSettingsRepository:
    """Repository for SMTP credential database operations"""

    @staticmethod
    def get_by_user_id(db: Session, user_id: str) -> Optional[UserEmailSettings]:
        """Get the settings record for a user"""
        return db.query(UserEmailSettings).filter(UserEmailSettings.user_id == user_id).first()

    @staticmethod
    def upsert(db: Session, user_id: str, **values) -> None:
        """
        Insert or update the settings record for a user.
        Keyed on user_id; a second save replaces every field and bumps updated_at.
        """
        insert = _dialect_insert(db)

        if insert is None:
            # Get or create for dialects without ON CONFLICT
            record = EmailSettingsRepository.get_by_user_id(db, user_id)
            if not record:
                record = UserEmailSettings(user_id=user_id)
                db.add(record)
            for key, value in values.items():
                setattr(record, key, value)
            db.commit()
            return

        stmt = insert(UserEmailSettings).values(user_id=user_id, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={
                **{field: getattr(stmt.excluded, field) for field in UPDATABLE_FIELDS},
                "updated_at": func.now(),
            },
        )
        db.execute(stmt)
        db.commit()
