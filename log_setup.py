import logging
import os
from logging.handlers import RotatingFileHandler

import config_paths

LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"
MAX_BYTES = 1024 * 1024
BACKUP_COUNT = 3


class ViewerLogHandler(RotatingFileHandler):
    """Marker subclass so repeated setup can find the handler it installed."""


def resolve_level(name) -> int:
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level="WARNING", path=None) -> logging.Handler:
    """Send log records to a rotating file; curses owns the terminal."""
    path = path or config_paths.LOG_PATH
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, ViewerLogHandler):
            root_logger.removeHandler(handler)
            handler.close()

    handler = ViewerLogHandler(path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(resolve_level(level))
    logging.captureWarnings(True)
    return handler
