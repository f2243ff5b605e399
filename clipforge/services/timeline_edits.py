"""Pure edit transforms over a clip list.

Every function returns a new list and leaves its input untouched, so the
caller can swap the result in atomically.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from clipforge.models.clip import Clip
from clipforge.models.video import Video
from clipforge.services.time_mapper import clip_at, sorted_by_timeline, total_duration_ms


def clip_belongs_to(clip: Clip, video: Video) -> bool:
    """Match by ``video_id``; fall back to source path for migrated orphans."""
    if clip.video_id is not None:
        return clip.video_id == video.id
    return clip.source_path is not None and clip.source_path == video.path


def create_initial_clip(
    clips: Sequence[Clip],
    video: Video,
    source_duration_ms: int,
    new_id: Callable[[], str],
) -> tuple[list[Clip], Clip] | None:
    """Append a clip spanning all of *video* at the end of the timeline.

    Returns None when a clip already references the video (re-selecting a
    video for preview must not add it twice) or the duration is unknown.
    """
    if source_duration_ms <= 0:
        return None
    if any(clip_belongs_to(c, video) for c in clips):
        return None
    clip = Clip(
        id=new_id(),
        video_id=video.id,
        source_start_ms=0,
        source_end_ms=source_duration_ms,
        timeline_start_ms=total_duration_ms(clips),
    )
    return [*clips, clip], clip


def split_at(
    clips: Sequence[Clip],
    timeline_ms: int,
    new_id: Callable[[], str],
) -> tuple[list[Clip], Clip, Clip] | None:
    """Split the clip under *timeline_ms* into two adjacent clips.

    Returns ``(new_clips, left, right)`` or None when no clip owns the
    position or the position is exactly on the clip's start (a split there
    would produce a zero-length clip).
    """
    clip = clip_at(timeline_ms, clips)
    if clip is None:
        return None

    relative = timeline_ms - clip.timeline_start_ms
    if relative <= 0 or relative >= clip.duration_ms:
        return None

    source_cut = clip.source_start_ms + relative
    left = Clip(
        id=new_id(),
        video_id=clip.video_id,
        source_start_ms=clip.source_start_ms,
        source_end_ms=source_cut,
        timeline_start_ms=clip.timeline_start_ms,
        source_path=clip.source_path,
    )
    right = Clip(
        id=new_id(),
        video_id=clip.video_id,
        source_start_ms=source_cut,
        source_end_ms=clip.source_end_ms,
        timeline_start_ms=clip.timeline_start_ms + relative,
        source_path=clip.source_path,
    )

    result: list[Clip] = []
    for c in clips:
        if c.id == clip.id:
            result.extend((left, right))
        else:
            result.append(c)
    return result, left, right


def ripple_delete(clips: Sequence[Clip], clip_id: str) -> list[Clip] | None:
    """Remove a clip and pull every later clip left by its duration.

    Clips starting before the deleted clip's end are not moved. Returns
    None if *clip_id* is unknown.
    """
    deleted = next((c for c in clips if c.id == clip_id), None)
    if deleted is None:
        return None

    gap_end = deleted.timeline_end_ms
    shift = deleted.duration_ms
    result: list[Clip] = []
    for c in clips:
        if c.id == clip_id:
            continue
        if c.timeline_start_ms >= gap_end:
            c = c.moved_to(c.timeline_start_ms - shift)
        result.append(c)
    return result


def glue(clips: Sequence[Clip]) -> list[Clip]:
    """Repack clips back-to-back in timeline order starting at 0.

    Removes every gap and overlap in one pass; applying it twice is a no-op.
    """
    result: list[Clip] = []
    position = 0
    for c in sorted_by_timeline(clips):
        result.append(c if c.timeline_start_ms == position else c.moved_to(position))
        position += c.duration_ms
    return result


def remove_video_clips(clips: Sequence[Clip], video: Video) -> tuple[list[Clip], list[Clip]]:
    """Drop all clips of *video* and glue the survivors.

    Returns ``(new_clips, removed_clips)``.
    """
    removed = [c for c in clips if clip_belongs_to(c, video)]
    kept = [c for c in clips if not clip_belongs_to(c, video)]
    return glue(kept), removed
