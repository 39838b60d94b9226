"""
Logging configuration.

Modules log through ``logging.getLogger(__name__)``; this only decides
where records go and how loud third-party libraries are.
"""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Send clarity logs to stderr at ``level``. Safe to call more than once."""
    global _configured

    root_level = logging.getLevelName(level.upper())
    if not isinstance(root_level, int):
        root_level = logging.INFO

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logging.getLogger("clarity").addHandler(handler)
        _configured = True

    logging.getLogger("clarity").setLevel(root_level)
    # SQL echo is controlled by DEBUG, keep the rest of sqlalchemy quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
