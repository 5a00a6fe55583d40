import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL")

# Symmetric key for SMTP passwords at rest. Must be exactly 32 bytes (AES-256).
# No fallback: save/send fail loudly when this is missing.
ENCRYPTION_KEY = os.getenv("ENCRYPTION_KEY")

# Shared secret for the admin-only settings endpoints (X-Admin-Token header).
# Unset disables the check - only use in development.
ADMIN_API_TOKEN = os.getenv("ADMIN_API_TOKEN")

# Socket timeout (seconds) for SMTP connect and send
SMTP_TIMEOUT = float(os.getenv("SMTP_TIMEOUT", "30"))

# CORS origins for the case-management front-end
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000"
    ).split(",")
    if origin.strip()
]

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

PORT = int(os.getenv("PORT", "5001"))
