import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ..config.config import settings

LOG_FORMAT = "%(asctime)s - [%(name)s] - %(levelname)s - %(message)s"
LOG_FILE_NAME = "edulog.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Third-party loggers that flood INFO with per-request or per-connection lines.
NOISY_LOGGERS = ("uvicorn.access", "asyncpg")


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configures the root logger for the API process and returns it.

    Records go to stdout and, unless the log directory is empty, to a
    rotating ``edulog.log`` file. Level and directory default to
    ``LOG_LEVEL`` and ``LOG_DIR``. Calling it again replaces the handlers
    instead of stacking duplicates; uvicorn's own handlers are dropped the
    same way so every line shares one format.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    directory = settings.LOG_DIR if log_dir is None else log_dir
    formatter = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(level_name)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if directory:
        path = Path(directory)
        path.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path / LOG_FILE_NAME, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        rotating.setFormatter(formatter)
        root.addHandler(rotating)

    if not settings.is_development:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return root
