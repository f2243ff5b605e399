"""Stat-based file info for dialog and drag-and-drop imports."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from clipforge.utils.config import VIDEO_EXTENSIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VideoFileInfo:
    """Name, path and size of a file about to be imported."""

    name: str
    path: str
    size: int


def is_video_file(path: str | Path) -> bool:
    return Path(path).suffix.lower() in VIDEO_EXTENSIONS


def get_video_data(paths: list[str | Path]) -> list[VideoFileInfo]:
    """Return ``VideoFileInfo`` for each video path, skipping other extensions.

    Raises OSError if a video file cannot be stat'ed.
    """
    result: list[VideoFileInfo] = []
    for raw in paths:
        path = Path(raw)
        if not is_video_file(path):
            logger.info("Ignoring non-video file %s", path)
            continue
        stats = os.stat(path)
        result.append(VideoFileInfo(name=path.name, path=str(path), size=stats.st_size))
    return result
