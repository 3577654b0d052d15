import logging
import sys
from typing import Optional

from .config import get_settings

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Attach a single stdout handler to the root logger.

    Safe to call more than once; later calls only update the level.
    """
    global _handler
    level_name = (level or get_settings().log_level).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    if _handler is not None and _handler in root.handlers:
        return

    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(_handler)
