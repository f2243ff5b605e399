"""Time conversion utilities."""

from functools import lru_cache


@lru_cache(maxsize=4096)
def ms_to_display(ms: int) -> str:
    """Convert milliseconds to display string 'M:SS'."""
    if ms < 0:
        ms = 0
    total_seconds = ms // 1000
    return f"{total_seconds // 60}:{total_seconds % 60:02d}"


def seconds_to_ms(seconds: float) -> int:
    """Convert seconds (float) to integer milliseconds."""
    return int(round(seconds * 1000))


def ms_to_seconds(ms: int) -> float:
    """Convert integer milliseconds to seconds."""
    return ms / 1000.0


def ms_to_ffmpeg_time(ms: int) -> str:
    """Format milliseconds as an FFmpeg seconds argument ('12.345')."""
    return f"{max(0, ms) / 1000.0:.3f}"
