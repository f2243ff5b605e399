"""Timeline clip data models (pure Python, no Qt dependency)."""

from __future__ import annotations

from dataclasses import dataclass, replace

from clipforge.utils.time_utils import seconds_to_ms


@dataclass(frozen=True, slots=True)
class Clip:
    """A reference to ``[source_start_ms, source_end_ms)`` of one video,
    placed at ``timeline_start_ms`` on the output timeline.

    Playback is always 1:1, so the timeline length of a clip is its
    source length.
    """

    id: str
    video_id: str | None
    source_start_ms: int   # Start position in source video
    source_end_ms: int     # End position in source video
    timeline_start_ms: int = 0
    source_path: str | None = None  # Only kept for clips migrated without a video

    @property
    def duration_ms(self) -> int:
        return self.source_end_ms - self.source_start_ms

    @property
    def timeline_end_ms(self) -> int:
        return self.timeline_start_ms + self.duration_ms

    def contains(self, timeline_ms: int) -> bool:
        """True if *timeline_ms* lies in the half-open timeline interval."""
        return self.timeline_start_ms <= timeline_ms < self.timeline_end_ms

    def moved_to(self, timeline_start_ms: int) -> Clip:
        return replace(self, timeline_start_ms=timeline_start_ms)

    def is_valid(self) -> bool:
        return 0 <= self.source_start_ms < self.source_end_ms and self.timeline_start_ms >= 0

    def to_dict(self) -> dict:
        d: dict = {
            "id": self.id,
            "video_id": self.video_id,
            "source_start_ms": self.source_start_ms,
            "source_end_ms": self.source_end_ms,
            "timeline_start_ms": self.timeline_start_ms,
        }
        if self.source_path is not None:
            d["source_path"] = self.source_path
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Clip:
        return cls(
            id=data.get("id", ""),
            video_id=data.get("video_id"),
            source_start_ms=data["source_start_ms"],
            source_end_ms=data["source_end_ms"],
            timeline_start_ms=data.get("timeline_start_ms", 0),
            source_path=data.get("source_path"),
        )


@dataclass(frozen=True, slots=True)
class LegacyClip:
    """Clip record written by older versions.

    Times are float seconds under camelCase keys, identity and
    ``videoId`` may be missing, and the source is referenced by path
    (``sourceVideo.path`` or ``sourcePath``).
    """

    id: str | None
    video_id: str | None
    source_path: str | None
    source_start: float
    source_end: float
    timeline_start: float = 0.0

    @staticmethod
    def is_legacy(data: dict) -> bool:
        return "source_start_ms" not in data

    @classmethod
    def from_dict(cls, data: dict) -> LegacyClip:
        source_video = data.get("sourceVideo") or {}
        return cls(
            id=data.get("id"),
            video_id=data.get("videoId"),
            source_path=source_video.get("path") or data.get("sourcePath"),
            source_start=float(data.get("sourceStart", 0.0)),
            source_end=float(data.get("sourceEnd", 0.0)),
            timeline_start=float(data.get("timelineStart", 0.0)),
        )

    def normalized(self, clip_id: str, video_id: str | None) -> Clip:
        """Convert to the canonical millisecond :class:`Clip`."""
        return Clip(
            id=clip_id,
            video_id=video_id,
            source_start_ms=seconds_to_ms(self.source_start),
            source_end_ms=seconds_to_ms(self.source_end),
            timeline_start_ms=seconds_to_ms(self.timeline_start),
            source_path=None if video_id else self.source_path,
        )
