import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException

from . import config

logger = logging.getLogger(__name__)


def require_admin(x_admin_token: Optional[str] = Header(None)) -> None:
    """
    Server-side admin check for the settings endpoints.
    User identity itself comes from the external identity provider; this only
    gates who may read or change stored SMTP credentials.
    """
    expected = config.ADMIN_API_TOKEN
    if not expected:
        return

    if not x_admin_token or not hmac.compare_digest(
        x_admin_token.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Rejected settings request with missing or invalid admin token")
        raise HTTPException(status_code=401, detail="Invalid admin token")
