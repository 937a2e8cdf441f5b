# surveyforge/logging_utils.py
from __future__ import annotations

import logging
import sys

from surveyforge.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(level: str = LOG_LEVEL) -> None:
    """
    Configure the root logger once per process.

    Streamlit re-executes page scripts on every interaction, so this must be
    idempotent. If something else (e.g. pytest, streamlit itself) already
    attached handlers to the root logger we only adjust the level.
    """
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    _configured = True
