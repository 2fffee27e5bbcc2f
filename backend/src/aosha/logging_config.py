"""Logging setup shared by the API process and scripts."""

import logging
import sys
from typing import Optional

from aosha.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging once and return the application logger."""
    global _configured
    if not _configured:
        logging.basicConfig(
            level=(level or settings.log_level),
            format=LOG_FORMAT,
            stream=sys.stdout,
        )
        # socket.io internals are far too chatty at INFO
        logging.getLogger("socketio").setLevel(logging.WARNING)
        logging.getLogger("engineio").setLevel(logging.WARNING)
        logging.getLogger("aiosqlite").setLevel(logging.WARNING)
        _configured = True
    return logging.getLogger("aosha")
