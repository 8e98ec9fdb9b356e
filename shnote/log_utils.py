import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "shnote"
LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging(level: Optional[str] = None, path: Optional[Path] = None,
                  max_bytes: int = 1_000_000, backups: int = 2) -> logging.Logger:
    """
    Configure the package logger once per process.

    Diagnostics go to stderr only: stdout belongs to the WHAT/WHY preamble
    and to the child process.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    level = level or os.environ.get("SHNOTE_LOG", "warning")
    logger.setLevel(LEVELS.get(level.lower(), logging.WARNING))
    logger.propagate = False

    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(logging.Formatter("shnote: %(levelname)s %(message)s"))
    logger.addHandler(sh)

    path = path or (Path(os.environ["SHNOTE_LOG_FILE"]) if os.environ.get("SHNOTE_LOG_FILE") else None)
    if path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(path, encoding="utf-8", maxBytes=max_bytes, backupCount=backups)
        except OSError as e:
            logger.warning("cannot open log file %s: %s", path, e)
        else:
            fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
            logger.addHandler(fh)
    return logger


def reset_logging() -> None:
    """Drop handlers installed by setup_logging (used by tests)."""
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
