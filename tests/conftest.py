"""
Pytest configuration and shared fixtures.
Environment is set before any casemail import so config.py picks it up.
"""
import os

TEST_ENCRYPTION_KEY = "0123456789abcdef0123456789abcdef"

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENCRYPTION_KEY"] = TEST_ENCRYPTION_KEY
os.environ["ADMIN_API_TOKEN"] = ""
os.environ["ALLOWED_ORIGINS"] = "http://localhost:5173"
os.environ["SMTP_TIMEOUT"] = "30"

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from casemail.database import Base, get_db
from casemail.main import app


@pytest.fixture
def db_engine():
    """In-memory SQLite shared by the test session and the app"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """TestClient for the app with get_db pointed at the test database"""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def settings_payload():
    return {
        "userId": "0b6f5c1e-4a2d-4f7b-9c1e-2d3a4b5c6d7e",
        "smtpServer": "smtp.example.com",
        "port": 587,
        "email": "caseworker@example.com",
        "username": "caseworker@example.com",
        "password": "s3cret-pa55",
        "useSSL": False,
    }


@pytest.fixture
def smtp_mock():
    """
    Patch smtplib.SMTP and smtplib.SMTP_SSL. Each returns a server mock that
    is its own context manager and advertises STARTTLS.
    """
    with patch("casemail.domain.mail_relay.smtp_client.smtplib.SMTP") as smtp_cls, patch(
        "casemail.domain.mail_relay.smtp_client.smtplib.SMTP_SSL"
    ) as smtp_ssl_cls:
        for cls in (smtp_cls, smtp_ssl_cls):
            server = cls.return_value
            server.__enter__.return_value = server
            server.__exit__.return_value = False
            server.has_extn.return_value = True
        yield smtp_cls, smtp_ssl_cls
