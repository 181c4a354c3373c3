"""Logging configuration for LyricSync."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, TextIO

from .utils import ensure_dir_exists

LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Dependencies that log every HTTP request or model download at INFO.
NOISY_LOGGERS = ("urllib3", "requests", "spotipy", "transformers", "httpx", "httpcore")

def _rotating_file_handler(log_dir: str, log_file: str) -> RotatingFileHandler:
    ensure_dir_exists(log_dir)
    return RotatingFileHandler(
        os.path.join(log_dir, log_file),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )

def setup_logging(
    log_level: int = logging.INFO,
    log_dir: Optional[str] = "logs",
    log_file: str = "lyricsync.log",
    stream: Optional[TextIO] = None,
) -> None:
    """
    Points the root logger at the console and, when log_dir is set, at a
    rotating file inside it.

    The console defaults to stderr; the `translate` command writes its
    result to stdout. Handlers from a previous call are dropped, so the CLI
    can log to the console before the config says where the file lives.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler(stream or sys.stderr)
    console.setLevel(log_level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_dir:
        try:
            file_handler = _rotating_file_handler(log_dir, log_file)
        except Exception as e:
            root.error(f"File logging disabled, could not open {log_dir}/{log_file}: {e}")
        else:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
