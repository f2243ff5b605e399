"""Per-project identity generation for videos and clips."""

from __future__ import annotations

import re
from collections.abc import Iterable

_SUFFIX_RE = re.compile(r"_(\d+)$")


def _numeric_suffix(identity: str | None) -> int:
    if not identity:
        return 0
    m = _SUFFIX_RE.search(identity)
    return int(m.group(1)) if m else 0


class IdAllocator:
    """Monotonic ``video_<n>`` / ``clip_<n>`` counters.

    Seeded from the highest numeric suffix among loaded records so newly
    issued identities never collide with ones already in the project.
    Identities are only unique within one project.
    """

    def __init__(self) -> None:
        self._video_counter = 0
        self._clip_counter = 0

    def seed(self, video_ids: Iterable[str | None], clip_ids: Iterable[str | None]) -> None:
        self._video_counter = max([self._video_counter, *(_numeric_suffix(i) for i in video_ids)])
        self._clip_counter = max([self._clip_counter, *(_numeric_suffix(i) for i in clip_ids)])

    def next_video_id(self) -> str:
        self._video_counter += 1
        return f"video_{self._video_counter}"

    def next_clip_id(self) -> str:
        self._clip_counter += 1
        return f"clip_{self._clip_counter}"
