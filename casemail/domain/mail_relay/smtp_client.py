"""
Transient SMTP sessions for relaying one message.

Each call opens its own connection, authenticates, sends and quits. Failures
are raised as RelayError with a readable reason; nothing is retried.
"""

import logging
import smtplib
import ssl
from email.errors import MessageError
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid

from ... import config
from ...errors import RelayError

logger = logging.getLogger(__name__)


def build_message(from_email: str, recipients: list[str], subject: str, body: str) -> MIMEText:
    """Plain-text message with From/To/Subject headers"""
    for value in (subject, from_email, *recipients):
        if "\r" in value or "\n" in value:
            raise MessageError(f"Header value contains a line break: {value!r}")

    msg = MIMEText(body, "plain", "utf-8")
    msg["Subject"] = subject
    msg["From"] = from_email
    msg["To"] = ", ".join(recipients)
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = make_msgid(domain=from_email.rsplit("@", 1)[-1])
    return msg


def _open_connection(host: str, port: int, use_ssl: bool, timeout: float) -> smtplib.SMTP:
    context = ssl.create_default_context()
    if use_ssl:
        return smtplib.SMTP_SSL(host, port, context=context, timeout=timeout)

    server = smtplib.SMTP(host, port, timeout=timeout)
    try:
        server.ehlo()
        if server.has_extn("starttls"):
            server.starttls(context=context)
            server.ehlo()
        else:
            logger.warning(f"SMTP server {host}:{port} does not offer STARTTLS, continuing unencrypted")
    except (smtplib.SMTPException, OSError):
        server.close()
        raise
    return server


def send_message(
    host: str,
    port: int,
    username: str,
    password: str,
    from_email: str,
    recipients: list[str],
    subject: str,
    body: str,
    use_ssl: bool = False,
    timeout: float | None = None,
) -> None:
    """Send one message through the given SMTP server. Raises RelayError on failure."""
    if timeout is None:
        timeout = config.SMTP_TIMEOUT

    # Header errors surface here, before any connection is opened
    try:
        raw_message = build_message(from_email, recipients, subject, body).as_string()
    except (MessageError, UnicodeError) as e:
        logger.error(f"Could not build message from {from_email}: {e}")
        raise RelayError(f"Invalid message: {e}") from e

    try:
        with _open_connection(host, port, use_ssl, timeout) as server:
            server.login(username, password)
            server.sendmail(from_email, recipients, raw_message)

    except smtplib.SMTPAuthenticationError as e:
        logger.error(f"SMTP auth error for {username}@{host}: {e}")
        raise RelayError(f"Authentication failed. Check username and password. ({e})") from e
    except smtplib.SMTPRecipientsRefused as e:
        logger.error(f"SMTP recipients refused by {host}: {list(e.recipients)}")
        raise RelayError(f"Recipients refused: {', '.join(e.recipients)}") from e
    except smtplib.SMTPSenderRefused as e:
        logger.error(f"SMTP sender refused by {host}: {e.sender}")
        raise RelayError(f"Sender address refused: {e.sender}") from e
    except smtplib.SMTPConnectError as e:
        logger.error(f"SMTP connect error: {e}")
        raise RelayError(f"Could not connect to {host}:{port}. Check host and port.") from e
    except smtplib.SMTPServerDisconnected as e:
        logger.error(f"SMTP disconnected: {e}")
        raise RelayError(f"Server disconnected unexpectedly. Try a different port. ({e})") from e
    except smtplib.SMTPException as e:
        logger.error(f"SMTP error: {e}")
        raise RelayError(f"SMTP error: {e}") from e
    except (MessageError, UnicodeError) as e:
        logger.error(f"Message rejected before delivery via {host}: {e}")
        raise RelayError(f"Message could not be encoded for {host}: {e}") from e
    except ssl.SSLError as e:
        logger.error(f"SSL error: {e}")
        raise RelayError(f"SSL/TLS error. Check the SSL setting and port. ({e})") from e
    except TimeoutError as e:
        logger.error(f"SMTP timeout connecting to {host}:{port}")
        raise RelayError(f"Connection to {host}:{port} timed out.") from e
    except OSError as e:
        logger.error(f"SMTP connection failed: {e}")
        raise RelayError(f"Connection to {host}:{port} failed: {e}") from e

    logger.info(f"Email sent via {host}:{port} to {len(recipients)} recipient(s)")
