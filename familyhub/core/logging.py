"""
Logging setup - one stdout handler shared by every familyhub.* logger.

Modules log through logging.getLogger("familyhub.<area>"); this module only
installs the handler and format, once, when the app starts.
"""

import logging
import sys
from typing import Optional

from familyhub.core.config import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(debug: Optional[bool] = None) -> logging.Logger:
    """Configure the root familyhub logger. Safe to call more than once."""
    if debug is None:
        debug = settings.DEBUG
    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger("familyhub")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
