"""
Bundled FFmpeg using imageio-ffmpeg.
Downloads FFmpeg binaries on first use when none are installed.
"""
from __future__ import annotations

import shutil
import sys
from pathlib import Path


def get_bundled_ffmpeg() -> str:
    """
    Get the imageio-ffmpeg executable path.

    Raises:
        ImportError: If imageio-ffmpeg is not installed
        RuntimeError: If FFmpeg cannot be obtained
    """
    try:
        import imageio_ffmpeg
    except ImportError:
        raise ImportError(
            "imageio-ffmpeg is not installed.\n"
            "Install with: pip install imageio-ffmpeg"
        )
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except Exception as e:
        raise RuntimeError(f"Failed to get bundled FFmpeg: {e}")


def get_bundled_ffprobe() -> str | None:
    """Return ffprobe next to the bundled FFmpeg, else the system one."""
    try:
        ffmpeg_dir = Path(get_bundled_ffmpeg()).parent
    except (ImportError, RuntimeError):
        return shutil.which("ffprobe")

    ffprobe_path = ffmpeg_dir / ("ffprobe.exe" if sys.platform == "win32" else "ffprobe")
    if ffprobe_path.exists():
        return str(ffprobe_path)
    return shutil.which("ffprobe")
