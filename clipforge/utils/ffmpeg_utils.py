"""Locate the ffmpeg and ffprobe executables."""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def find_ffmpeg() -> str | None:
    """Find the ffmpeg executable.

    Search order:
    1. User-configured path (settings, then config.FFMPEG_PATH)
    2. System PATH
    3. Bundled FFmpeg (imageio-ffmpeg)

    Returns:
        Path to ffmpeg or None if not found
    """
    from .config import FFMPEG_PATH
    from clipforge.services.settings_manager import SettingsManager

    custom = SettingsManager().get_ffmpeg_path()
    for candidate in (custom, FFMPEG_PATH):
        if candidate and Path(candidate).is_file():
            return candidate

    system_ffmpeg = shutil.which("ffmpeg")
    if system_ffmpeg:
        return system_ffmpeg

    try:
        from .ffmpeg_bundled import get_bundled_ffmpeg
        return get_bundled_ffmpeg()
    except (ImportError, RuntimeError) as e:
        logger.warning("Bundled FFmpeg unavailable: %s", e)

    return None


def find_ffprobe() -> str | None:
    """Find ffprobe (PATH first, then next to ffmpeg, then bundled)."""
    ffprobe = shutil.which("ffprobe")
    if ffprobe:
        return ffprobe

    ffmpeg_path = find_ffmpeg()
    if ffmpeg_path:
        ffprobe_path = Path(ffmpeg_path).parent / ("ffprobe.exe" if sys.platform == "win32" else "ffprobe")
        if ffprobe_path.is_file():
            return str(ffprobe_path)

    from .ffmpeg_bundled import get_bundled_ffprobe
    return get_bundled_ffprobe()
