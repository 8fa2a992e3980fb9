"""Runtime configuration defaults for the API client, session storage, logging and printing."""

from __future__ import annotations

import logging
import os
from pathlib import Path


def _env(name: str, default: str) -> str:
    value = os.environ.get(name, "").strip()
    return value or default


API_BASE_URL = _env("ORDERDESK_API_URL", "http://localhost:5000/api")
API_TIMEOUT_SECONDS = 10.0

SESSION_DB_PATH = _env("ORDERDESK_SESSION_DB", "data/session.db")

LOG_PATH = _env("ORDERDESK_LOG_PATH", "/tmp/orderdesk-debug.log")
DEBUG = _env("ORDERDESK_DEBUG", "0") in {"1", "true", "yes"}

MIN_PASSWORD_LENGTH = 6
UNAVAILABLE_TOAST_SECONDS = 5.0

# Kitchen ticket printer.
PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 40
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 16


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Send application logs to the debug file; the terminal belongs to the UI."""
    if DEBUG:
        level = logging.DEBUG

    log_file = Path(LOG_PATH)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)-22s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.FileHandler(log_file, encoding="utf-8")],
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger("orderdesk")
