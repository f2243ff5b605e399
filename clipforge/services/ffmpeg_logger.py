"""Utility for logging FFmpeg output to a file."""

import logging
from pathlib import Path

from clipforge.utils.config import APP_DATA_DIR


def get_ffmpeg_log_path() -> Path:
    """Return the path to the FFmpeg log file."""
    log_dir = APP_DATA_DIR / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "ffmpeg.log"


# Dedicated logger for FFmpeg command lines and stderr
_logger = logging.getLogger("ffmpeg_output")
_logger.setLevel(logging.DEBUG)
_logger.propagate = False

if not _logger.handlers:
    _fh = logging.FileHandler(get_ffmpeg_log_path(), encoding="utf-8", delay=True)
    _formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    _fh.setFormatter(_formatter)
    _logger.addHandler(_fh)


def log_ffmpeg_command(args: list[str]) -> None:
    """Log the FFmpeg command being executed."""
    _logger.info(f"Executing: {' '.join(args)}")


def log_ffmpeg_line(line: str) -> None:
    """Log a single line of FFmpeg output."""
    _logger.debug(line.rstrip())
