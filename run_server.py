"""
CaseMail relay API server
Run this as a separate process: python run_server.py
"""

import logging
import sys
from pathlib import Path

import uvicorn

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from casemail.config import LOG_LEVEL, PORT

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info(f"Starting CaseMail relay API on port {PORT}...")
    try:
        uvicorn.run("casemail.main:app", host="0.0.0.0", port=PORT)
    except KeyboardInterrupt:
        logger.info("CaseMail relay API stopped by user")
