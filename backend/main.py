"""
Local entrypoint: run the Lajme API with uvicorn.
"""

import os
import re

import uvicorn
from loguru import logger

from lajme.core.config import settings
from lajme.main import app  # noqa: F401


def _masked(url: str) -> str:
    return re.sub(r"://([^:]+):([^@]+)@", r"://\1:***@", url)


if __name__ == "__main__":
    port_str = os.environ.get("PORT") or "8000"
    try:
        port = int(port_str)
    except ValueError:
        logger.warning(f"Invalid PORT value '{port_str}'. Using default port 8000.")
        port = 8000

    logger.info(f"Starting server on port {port}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database URL: {_masked(settings.DATABASE_URL)}")

    uvicorn.run(
        "lajme.main:app",
        host="0.0.0.0",
        port=port,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
