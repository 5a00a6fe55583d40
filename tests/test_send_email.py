"""
Send-email endpoint: relays one message with the user's stored SMTP settings.
"""
import smtplib

from fastapi.testclient import TestClient

from casemail.models import UserEmailSettings


def _send_payload(user_id, to=None):
    return {
        "userId": user_id,
        "to": to if to is not None else ["worker@example.com", "employer@example.com"],
        "subject": "Case update",
        "body": "The hearing has been rescheduled.",
    }


def test_send_without_settings_returns_404_and_never_connects(client: TestClient, smtp_mock):
    smtp_cls, smtp_ssl_cls = smtp_mock

    resp = client.post("/api/send-email", json=_send_payload("no-settings-user"))

    assert resp.status_code == 404
    assert resp.json() == {"error": "No SMTP settings"}
    smtp_cls.assert_not_called()
    smtp_ssl_cls.assert_not_called()


def test_send_uses_stored_credentials_with_starttls(client: TestClient, smtp_mock, settings_payload):
    smtp_cls, smtp_ssl_cls = smtp_mock
    client.post("/api/email-settings", json=settings_payload)

    resp = client.post("/api/send-email", json=_send_payload(settings_payload["userId"]))

    assert resp.status_code == 200
    assert resp.json() == {"message": "Email sent"}

    smtp_ssl_cls.assert_not_called()
    args, kwargs = smtp_cls.call_args
    assert args == ("smtp.example.com", 587)
    assert kwargs["timeout"] == 30

    server = smtp_cls.return_value
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("caseworker@example.com", "s3cret-pa55")

    from_addr, recipients, raw = server.sendmail.call_args[0]
    assert from_addr == "caseworker@example.com"
    assert recipients == ["worker@example.com", "employer@example.com"]
    assert "Subject: Case update" in raw
    assert "To: worker@example.com, employer@example.com" in raw


def test_send_with_ssl_uses_smtp_ssl(client: TestClient, smtp_mock, settings_payload):
    smtp_cls, smtp_ssl_cls = smtp_mock
    client.post("/api/email-settings", json={**settings_payload, "port": 465, "useSSL": True})

    resp = client.post("/api/send-email", json=_send_payload(settings_payload["userId"]))

    assert resp.status_code == 200
    smtp_cls.assert_not_called()
    assert smtp_ssl_cls.call_args[0] == ("smtp.example.com", 465)
    smtp_ssl_cls.return_value.login.assert_called_once_with("caseworker@example.com", "s3cret-pa55")


def test_single_recipient_string_is_accepted(client: TestClient, smtp_mock, settings_payload):
    smtp_cls, _ = smtp_mock
    client.post("/api/email-settings", json=settings_payload)

    resp = client.post(
        "/api/send-email",
        json=_send_payload(settings_payload["userId"], to="stakeholder@example.com"),
    )

    assert resp.status_code == 200
    recipients = smtp_cls.return_value.sendmail.call_args[0][1]
    assert recipients == ["stakeholder@example.com"]


def test_empty_recipient_list_is_rejected(client: TestClient, smtp_mock, settings_payload):
    smtp_cls, _ = smtp_mock
    client.post("/api/email-settings", json=settings_payload)

    resp = client.post("/api/send-email", json=_send_payload(settings_payload["userId"], to=[]))

    assert resp.status_code == 422
    smtp_cls.assert_not_called()


def test_auth_failure_is_reported_as_500(client: TestClient, smtp_mock, settings_payload):
    smtp_cls, _ = smtp_mock
    smtp_cls.return_value.login.side_effect = smtplib.SMTPAuthenticationError(
        535, b"5.7.8 Username and Password not accepted"
    )
    client.post("/api/email-settings", json=settings_payload)

    resp = client.post("/api/send-email", json=_send_payload(settings_payload["userId"]))

    assert resp.status_code == 500
    assert "Authentication failed" in resp.json()["error"]
    smtp_cls.return_value.sendmail.assert_not_called()


def test_connection_failure_is_reported_as_500(client: TestClient, smtp_mock, settings_payload):
    smtp_cls, _ = smtp_mock
    smtp_cls.side_effect = ConnectionRefusedError(111, "Connection refused")
    client.post("/api/email-settings", json=settings_payload)

    resp = client.post("/api/send-email", json=_send_payload(settings_payload["userId"]))

    assert resp.status_code == 500
    assert "smtp.example.com:587" in resp.json()["error"]


def test_corrupt_stored_password_is_reported_without_connecting(
    client: TestClient, db_session, smtp_mock
):
    smtp_cls, smtp_ssl_cls = smtp_mock
    db_session.add(
        UserEmailSettings(
            user_id="corrupt-user",
            smtp_server="smtp.example.com",
            port=587,
            email="caseworker@example.com",
            username="caseworker@example.com",
            password_encrypted="no-separator-here",
            use_ssl=False,
        )
    )
    db_session.commit()

    resp = client.post("/api/send-email", json=_send_payload("corrupt-user"))

    assert resp.status_code == 500
    assert "decrypt" in resp.json()["error"]
    smtp_cls.assert_not_called()
    smtp_ssl_cls.assert_not_called()


def test_subject_with_line_break_is_rejected(client: TestClient, smtp_mock, settings_payload):
    smtp_cls, smtp_ssl_cls = smtp_mock
    client.post("/api/email-settings", json=settings_payload)

    payload = {**_send_payload(settings_payload["userId"]), "subject": "Hi\r\nBcc: someone@example.org"}
    resp = client.post("/api/send-email", json=payload)

    assert resp.status_code == 422
    smtp_cls.assert_not_called()
    smtp_ssl_cls.assert_not_called()


def test_unencodable_recipient_is_reported_as_500(client: TestClient, smtp_mock, settings_payload):
    smtp_cls, _ = smtp_mock
    smtp_cls.return_value.sendmail.side_effect = UnicodeEncodeError(
        "ascii", "wörker@example.com", 1, 2, "ordinal not in range(128)"
    )
    client.post("/api/email-settings", json=settings_payload)

    resp = client.post("/api/send-email", json=_send_payload(settings_payload["userId"]))

    assert resp.status_code == 500
    assert "could not be encoded" in resp.json()["error"]
