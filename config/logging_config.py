"""
Console logging setup for hosts embedding the adaptive engine.

Modules log through ``logging.getLogger(__name__)``; nothing is configured
on import. Hosts call ``configure_logging`` once at startup.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a single stream handler to the ``a11y`` logger tree.

    Args:
        level: Level name; defaults to ``settings.log_level``

    Returns:
        The configured ``a11y`` logger
    """
    if level is None:
        from config.settings import settings
        level = settings.log_level

    logger = logging.getLogger("a11y")
    logger.setLevel(level.upper())

    if not any(getattr(h, "_a11y_console", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handler._a11y_console = True
        logger.addHandler(handler)

    return logger
