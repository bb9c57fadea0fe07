"""Runtime settings read from the environment (.env supported).

Usage:
    from crm_config import default_page_size, log_level
    size = default_page_size()
"""
import logging
import os

from dotenv import load_dotenv

load_dotenv()

PAGE_SIZE_MIN = 10
PAGE_SIZE_MAX = 200
UPLOAD_ERROR_CAP = 5


def default_page_size() -> int:
    """Preview page size (AUDIENCE_PAGE_SIZE, default 20)."""
    return int(os.environ.get("AUDIENCE_PAGE_SIZE", "20"))


def log_level() -> int:
    """Root log level from LOG_LEVEL (default INFO)."""
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


def configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
