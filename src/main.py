"""Main application entry point.

Serves the NiceGUI query page (port 8080 by default) that streams answers
from the analysis backend at API_BASE_URL.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Application entry point."""
    from nicegui import ui

    from src.client.config import get_client_config
    from src.ui.query_page import query_page  # noqa: F401 - Registers the page

    config = get_client_config()
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))

    logger.info(f"Query page available at http://localhost:{port}/")
    logger.info(f"Streaming from {config.stream_url}")

    ui.run(
        title="Match Insight",
        host=host,
        port=port,
        reload=False,
    )


if __name__ == "__main__":
    main()
