"""Project aggregate model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from clipforge.models.clip import Clip
from clipforge.models.video import Video


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True)
class Project:
    """Holds the persisted state of the editing session."""

    id: str = "default"
    name: str = "Untitled Project"
    videos: list[Video] = field(default_factory=list)
    clips: list[Clip] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    def video_by_id(self, video_id: str | None) -> Video | None:
        if video_id is None:
            return None
        for video in self.videos:
            if video.id == video_id:
                return video
        return None

    def clip_by_id(self, clip_id: str | None) -> Clip | None:
        if clip_id is None:
            return None
        for clip in self.clips:
            if clip.id == clip_id:
                return clip
        return None

    def orphaned_clips(self) -> list[Clip]:
        """Clips whose ``video_id`` references no known video."""
        known = {v.id for v in self.videos}
        return [c for c in self.clips if c.video_id not in known]
