"""Timeline ↔ source time mapping (pure functions, no state)."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from clipforge.models.clip import Clip


def source_time_of(timeline_ms: int, clip: Clip) -> int:
    """Convert a timeline position to a position in *clip*'s source video.

    Only meaningful when *clip* owns *timeline_ms*; locate it with
    :func:`clip_at` first.
    """
    return clip.source_start_ms + (timeline_ms - clip.timeline_start_ms)


def timeline_time_of(source_ms: int, clip: Clip) -> int:
    """Inverse of :func:`source_time_of` for a known clip."""
    return clip.timeline_start_ms + (source_ms - clip.source_start_ms)


def clip_at(timeline_ms: int, clips: Iterable[Clip]) -> Clip | None:
    """Return the clip whose ``[timeline_start, timeline_end)`` contains *timeline_ms*."""
    for clip in clips:
        if clip.contains(timeline_ms):
            return clip
    return None


def total_duration_ms(clips: Iterable[Clip]) -> int:
    """Timeline length: the furthest clip end, or 0 when empty."""
    return max((c.timeline_end_ms for c in clips), default=0)


def sorted_by_timeline(clips: Iterable[Clip]) -> list[Clip]:
    return sorted(clips, key=lambda c: c.timeline_start_ms)


def contiguous_next(clip: Clip, clips: Sequence[Clip]) -> Clip | None:
    """Return the clip starting exactly where *clip* ends, if any."""
    end = clip.timeline_end_ms
    for other in clips:
        if other.id != clip.id and other.timeline_start_ms == end:
            return other
    return None
