"""Normalise records written by older versions into the canonical model."""

from __future__ import annotations

import logging
from pathlib import Path

from clipforge.models.clip import Clip, LegacyClip
from clipforge.models.id_allocator import IdAllocator
from clipforge.models.video import Video

logger = logging.getLogger(__name__)


def migrate_video(data: dict, allocator: IdAllocator) -> Video:
    """Build a :class:`Video`, assigning an id when the record has none."""
    path = data["path"]
    return Video(
        id=data.get("id") or allocator.next_video_id(),
        name=data.get("name") or Path(path).name,
        path=path,
        size=int(data.get("size", 0)),
    )


def migrate_clip(data: dict, videos: list[Video], allocator: IdAllocator) -> Clip | None:
    """Build a :class:`Clip` from a current or legacy record.

    Legacy clips get a fresh id when missing and have ``video_id``
    backfilled by matching their source path against *videos*. A clip
    matching no video is kept as an orphan. Returns None for records with
    unusable bounds.
    """
    if not LegacyClip.is_legacy(data):
        clip = Clip.from_dict(data)
        if not clip.id:
            clip = Clip(
                id=allocator.next_clip_id(),
                video_id=clip.video_id,
                source_start_ms=clip.source_start_ms,
                source_end_ms=clip.source_end_ms,
                timeline_start_ms=clip.timeline_start_ms,
                source_path=clip.source_path,
            )
    else:
        legacy = LegacyClip.from_dict(data)
        video_id = legacy.video_id
        if video_id is None and legacy.source_path:
            match = next((v for v in videos if v.path == legacy.source_path), None)
            video_id = match.id if match else None
        clip = legacy.normalized(legacy.id or allocator.next_clip_id(), video_id)

    if not clip.is_valid():
        logger.warning(
            "Skipping clip %s with invalid bounds [%d, %d) @ %d",
            clip.id, clip.source_start_ms, clip.source_end_ms, clip.timeline_start_ms,
        )
        return None
    if clip.video_id is None or not any(v.id == clip.video_id for v in videos):
        logger.warning("Clip %s references no known video (source_path=%s)", clip.id, clip.source_path)
    return clip


def migrate_legacy_record(data: dict, videos: list[Video], allocator: IdAllocator) -> Video | Clip | None:
    """Dispatch a raw record to the video or clip migration."""
    if "path" in data and "sourceStart" not in data and "source_start_ms" not in data:
        return migrate_video(data, allocator)
    return migrate_clip(data, videos, allocator)
