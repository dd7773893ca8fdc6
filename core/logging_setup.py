"""Logging configuration for the result scraper.

Sets up a dual-handler logging pipeline:

1. **Console** -- rich's :class:`~rich.logging.RichHandler` (coloured
   levels, errors in red) when colour is enabled and stdout is a
   terminal; otherwise :class:`SafeStreamHandler`, which gracefully
   handles Unicode on Windows consoles.
2. **File** -- :class:`CompressedRotatingFileHandler` writing to
   ``logs/result_scraper.log`` with automatic gzip rotation (10 MiB per
   file, 5 backups).

Usage::

    from core.logging_setup import setup_logging
    setup_logging("DEBUG")
"""

import gzip
import logging
import os
import shutil
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from core.config import LOGS_DIR

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s - %(message)s'


class CompressedRotatingFileHandler(RotatingFileHandler):
    """RotatingFileHandler that gzip-compresses rotated log files."""

    def rotation_filename(self, default_name: str) -> str:
        """Append ``.gz`` to the rotated file name."""
        return f"{default_name}.gz"

    def rotate(self, source: str, dest: str) -> None:
        """Compress *source* into *dest* using gzip, then remove *source*."""
        with open(source, 'rb') as f_in:
            with gzip.open(dest, 'wb') as f_out:
                shutil.copyfileobj(f_in, f_out)
        os.remove(source)


class SafeStreamHandler(logging.StreamHandler):
    """StreamHandler that never crashes on unencodable characters.

    Student names and subject titles may contain Bengali text, which a
    narrow Windows code page cannot represent.  On
    :exc:`UnicodeEncodeError` the message is re-encoded with replacement
    characters.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            stream = self.stream
            try:
                stream.write(msg + self.terminator)
            except UnicodeEncodeError:
                encoding = getattr(stream, "encoding", None) or "ascii"
                safe_msg = msg.encode(
                    encoding, errors='replace',
                ).decode(encoding)
                stream.write(safe_msg + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def _console_handler(color: bool) -> logging.Handler:
    if color and sys.stdout.isatty():
        return RichHandler(
            console=Console(),
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        )
    handler = SafeStreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    color: bool = True,
) -> None:
    """Configure the root logger with console and file handlers.

    Args:
        log_level: Logging level name (e.g. ``"DEBUG"``,
            ``"INFO"``).  Unknown names fall back to ``INFO``.
        log_file: Path of the rotating log file.  Defaults to
            ``logs/result_scraper.log`` under the project root.
        color: Use rich's coloured console output when stdout is a
            terminal.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    log_path = log_file or str(LOGS_DIR / "result_scraper.log")
    log_dir = os.path.dirname(log_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    file_handler = CompressedRotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8',
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logging.basicConfig(
        level=level,
        handlers=[file_handler, _console_handler(color)],
        force=True,
    )
