"""FFmpeg process launching. Every FFmpeg subprocess goes through this class."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Any

from clipforge.utils.ffmpeg_utils import find_ffmpeg, find_ffprobe


class FFmpegRunner:
    """Runs ffmpeg / ffprobe with platform-specific process flags."""

    def __init__(self, ffmpeg_path: str | None = None, ffprobe_path: str | None = None):
        """Paths default to auto-discovery (settings → config → PATH → bundled)."""
        self._ffmpeg = ffmpeg_path or find_ffmpeg()
        self._ffprobe = ffprobe_path or find_ffprobe()

    @property
    def ffmpeg_path(self) -> str | None:
        return self._ffmpeg

    @property
    def ffprobe_path(self) -> str | None:
        return self._ffprobe

    def is_available(self) -> bool:
        return self._ffmpeg is not None and Path(self._ffmpeg).is_file()

    def run_async(
        self,
        args: list[str],
        **kwargs: Any,
    ) -> subprocess.Popen:
        """Start FFmpeg without waiting (Popen), for progress streaming."""
        if not self._ffmpeg:
            raise FileNotFoundError("FFmpeg not found. Please install FFmpeg.")
        cmd = [self._ffmpeg] + args
        if sys.platform == "win32":
            kwargs.setdefault("creationflags", subprocess.CREATE_NO_WINDOW)
        return subprocess.Popen(cmd, **kwargs)

    def run_ffprobe(
        self,
        args: list[str],
        *,
        check: bool = False,
        capture_output: bool = True,
        text: bool = True,
        timeout: int | None = None,
        **kwargs: Any,
    ) -> subprocess.CompletedProcess:
        """Run FFprobe synchronously."""
        if not self._ffprobe:
            raise FileNotFoundError("FFprobe not found. Please install FFmpeg.")
        cmd = [self._ffprobe] + args
        run_kwargs = dict(capture_output=capture_output, text=text, **kwargs)
        if timeout is not None:
            run_kwargs["timeout"] = timeout
        if sys.platform == "win32":
            run_kwargs.setdefault("creationflags", subprocess.CREATE_NO_WINDOW)
        return subprocess.run(cmd, check=check, **run_kwargs)


# Shared default instance for services that don't inject their own
_default_runner: FFmpegRunner | None = None


def get_ffmpeg_runner() -> FFmpegRunner:
    """Return the shared FFmpegRunner, creating it on first use."""
    global _default_runner
    if _default_runner is None:
        _default_runner = FFmpegRunner()
    return _default_runner
