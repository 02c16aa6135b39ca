"""
Log setup for the ERP UI.

Every module declares `LOG = logs.logger(__file__)`; the logger is named
after the module file ("config", "session", "backend_impl", ...) and writes
to stderr at the level given by LOG_LEVEL.

Supabase keys and tokens must only reach the logs through `mask()`.
"""

import logging
import os
from pathlib import Path

_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Leading characters of a secret that may be logged
_MASK_PREFIX = 20


def logger(name: str) -> logging.Logger:
    """
    Return the logger for a module of the application.

    Args:
        name: Module __file__ or a plain logger name.

    Returns:
        logging.Logger with a stderr handler attached once.
    """
    if "/" in name or "\\" in name:
        name = Path(name).stem

    log = logging.getLogger(name)
    if not log.handlers:
        log.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        log.addHandler(handler)
    return log


def mask(secret: str | None) -> str:
    """
    Return a log-safe rendition of a secret.

    Args:
        secret: API key or token, possibly empty.

    Returns:
        The first characters followed by an ellipsis, or "<unset>".
    """
    if not secret:
        return "<unset>"
    return f"{secret[:_MASK_PREFIX]}..."
