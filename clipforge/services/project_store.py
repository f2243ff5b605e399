"""On-disk project directory: project file plus copied media."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from clipforge.models.project import Project
from clipforge.services.project_io import load_project, save_project
from clipforge.utils.config import MEDIA_DIR_NAME, PROJECT_FILE_NAME

logger = logging.getLogger(__name__)


class ProjectStore:
    """Owns a project directory laid out as::

        <project_dir>/project.json
        <project_dir>/media/<imported files>
    """

    def __init__(self, project_dir: Path):
        self._project_dir = Path(project_dir)

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    @property
    def project_file(self) -> Path:
        return self._project_dir / PROJECT_FILE_NAME

    @property
    def media_dir(self) -> Path:
        return self._project_dir / MEDIA_DIR_NAME

    def init(self) -> Project:
        """Load the project, creating a default empty one if absent."""
        self.media_dir.mkdir(parents=True, exist_ok=True)
        if self.project_file.exists():
            project = load_project(self.project_file)
            logger.info("Loaded project from %s", self.project_file)
            return project
        project = Project()
        save_project(project, self.project_file)
        logger.info("Created new project at %s", self.project_file)
        return project

    def save(self, project: Project) -> Path:
        save_project(project, self.project_file)
        return self.project_file

    def import_video(self, source: Path | str) -> str:
        """Copy *source* into the media folder; return its project-relative path.

        A numeric suffix is appended when the name is already taken.
        """
        source = Path(source)
        self.media_dir.mkdir(parents=True, exist_ok=True)
        target = self.media_dir / source.name
        counter = 1
        while target.exists():
            target = self.media_dir / f"{source.stem}_{counter}{source.suffix}"
            counter += 1
        shutil.copy2(source, target)
        logger.info("Imported %s -> %s", source, target)
        return target.relative_to(self._project_dir).as_posix()

    def resolve_media_path(self, path: str | Path) -> Path:
        """Resolve a stored media path (project-relative or absolute)."""
        p = Path(path)
        if p.is_absolute():
            return p
        return self._project_dir / p
