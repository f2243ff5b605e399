"""Probe video metadata using ffprobe."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from clipforge.infrastructure.ffmpeg_runner import FFmpegRunner, get_ffmpeg_runner

logger = logging.getLogger(__name__)


@dataclass
class VideoInfo:
    """Metadata extracted from a video file."""

    width: int = 0
    height: int = 0
    duration_ms: int = 0
    has_audio: bool = False


def probe_video(video_path: Path | str, runner: FFmpegRunner | None = None) -> VideoInfo:
    """Probe a video file for dimensions, duration, and audio presence.

    Returns *VideoInfo* with defaults (0 / False) when ffprobe is missing
    or the output cannot be parsed.
    """
    runner = runner or get_ffmpeg_runner()
    try:
        result = runner.run_ffprobe(
            [
                "-v", "error",
                "-show_entries", "stream=codec_type,width,height",
                "-show_entries", "format=duration",
                "-of", "json",
                str(video_path),
            ],
            timeout=15,
        )
        data = json.loads(result.stdout or "{}")
    except (FileNotFoundError, subprocess.TimeoutExpired, json.JSONDecodeError) as e:
        logger.warning("ffprobe failed for %s: %s", video_path, e)
        return VideoInfo()

    width = height = 0
    has_audio = False
    for stream in data.get("streams", []):
        codec_type = stream.get("codec_type", "")
        if codec_type == "video" and width == 0:
            width = int(stream.get("width", 0))
            height = int(stream.get("height", 0))
        elif codec_type == "audio":
            has_audio = True

    duration_ms = 0
    dur_str = data.get("format", {}).get("duration")
    if dur_str:
        duration_ms = int(float(dur_str) * 1000)

    return VideoInfo(
        width=width,
        height=height,
        duration_ms=duration_ms,
        has_audio=has_audio,
    )


def probe_duration_ms(video_path: Path | str, runner: FFmpegRunner | None = None) -> int:
    """Source duration in ms, or 0 if unknown."""
    return probe_video(video_path, runner).duration_ms
