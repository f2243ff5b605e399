"""JSON-based project save / load (project.json)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from clipforge.models.id_allocator import IdAllocator
from clipforge.models.project import Project, utc_now_iso
from clipforge.services.project_migration import migrate_clip, migrate_video

logger = logging.getLogger(__name__)

PROJECT_VERSION = 2


def project_to_dict(project: Project) -> dict:
    return {
        "version": PROJECT_VERSION,
        "id": project.id,
        "name": project.name,
        "videos": [v.to_dict() for v in project.videos],
        "clips": [c.to_dict() for c in project.clips],
        "created_at": project.created_at,
        "updated_at": project.updated_at,
    }


def project_from_dict(data: dict) -> Project:
    """Build a project from v1 (camelCase, seconds) or v2 data."""
    raw_videos = data.get("videos", [])
    raw_clips = data.get("clips", [])

    allocator = IdAllocator()
    allocator.seed(
        (v.get("id") for v in raw_videos),
        (c.get("id") for c in raw_clips),
    )

    videos = [migrate_video(v, allocator) for v in raw_videos]
    clips = []
    for clip_data in raw_clips:
        clip = migrate_clip(clip_data, videos, allocator)
        if clip is not None:
            clips.append(clip)

    now = utc_now_iso()
    return Project(
        id=data.get("id", "default"),
        name=data.get("name", "Untitled Project"),
        videos=videos,
        clips=clips,
        created_at=data.get("created_at") or data.get("createdAt") or now,
        updated_at=data.get("updated_at") or data.get("updatedAt") or now,
    )


def save_project(project: Project, path: Path) -> None:
    """Serialize *project* to *path*, refreshing ``updated_at``."""
    project.updated_at = utc_now_iso()
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(project_to_dict(project), ensure_ascii=False, indent=2), encoding="utf-8")
    tmp.replace(path)
    logger.debug("Saved project %s (%d videos, %d clips) to %s",
                 project.id, len(project.videos), len(project.clips), path)


def load_project(path: Path) -> Project:
    """Deserialize a project from a JSON file (any version)."""
    data = json.loads(path.read_text(encoding="utf-8-sig"))
    version = data.get("version", 1)
    if version < PROJECT_VERSION:
        logger.info("Migrating project %s from v%d", path, version)
    return project_from_dict(data)
