"""Owner of the in-memory project: applies edit operations and tracks selection."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from PySide6.QtCore import QObject, Signal

from clipforge.models.clip import Clip
from clipforge.models.id_allocator import IdAllocator
from clipforge.models.project import Project
from clipforge.models.video import Video
from clipforge.services import timeline_edits
from clipforge.services.media_import import VideoFileInfo
from clipforge.services.time_mapper import sorted_by_timeline, total_duration_ms

logger = logging.getLogger(__name__)


class TimelineModel(QObject):
    """Single owner of the Project aggregate.

    Edits are applied by swapping in the clip list returned by the pure
    transforms in :mod:`clipforge.services.timeline_edits`, so a listener
    never observes a half-applied edit.

    Signals:
        project_changed(): after every mutation of videos or clips.
        selection_changed(object): selected clip id (str) or None.
        selected_video_changed(object): selected Video or None.
    """

    project_changed = Signal()
    selection_changed = Signal(object)
    selected_video_changed = Signal(object)

    def __init__(self, project: Project | None = None, parent: QObject | None = None):
        super().__init__(parent)
        self._project = Project()
        self._ids = IdAllocator()
        self._selected_clip_id: str | None = None
        self._selected_video: Video | None = None
        self._loading = False
        if project is not None:
            self.load_project(project)

    # ------------------------------------------------------------------ Queries

    @property
    def project(self) -> Project:
        return self._project

    @property
    def clips(self) -> list[Clip]:
        """Clips in timeline order."""
        return sorted_by_timeline(self._project.clips)

    @property
    def videos(self) -> list[Video]:
        return list(self._project.videos)

    @property
    def total_duration_ms(self) -> int:
        return total_duration_ms(self._project.clips)

    @property
    def selected_clip_id(self) -> str | None:
        return self._selected_clip_id

    @property
    def selected_clip(self) -> Clip | None:
        return self._project.clip_by_id(self._selected_clip_id)

    @property
    def selected_video(self) -> Video | None:
        return self._selected_video

    @property
    def is_loading(self) -> bool:
        return self._loading

    def video_for(self, clip: Clip) -> Video | None:
        return self._project.video_by_id(clip.video_id)

    def has_clips_for(self, video: Video) -> bool:
        return any(timeline_edits.clip_belongs_to(c, video) for c in self._project.clips)

    def snapshot(self) -> tuple[tuple[Clip, ...], tuple[Video, ...]]:
        """Frozen copy of clips (timeline order) and videos for export."""
        return tuple(self.clips), tuple(self._project.videos)

    # ------------------------------------------------------------------ Loading

    def load_project(self, project: Project) -> None:
        """Replace the whole project (startup / recovery)."""
        self._loading = True
        try:
            self._project = project
            self._ids = IdAllocator()
            self._ids.seed((v.id for v in project.videos), (c.id for c in project.clips))
            for clip in project.orphaned_clips():
                logger.warning("Clip %s has no matching video", clip.id)
            self._selected_clip_id = None
            self._selected_video = project.videos[0] if project.videos else None
            self.project_changed.emit()
            self.selection_changed.emit(None)
            self.selected_video_changed.emit(self._selected_video)
        finally:
            self._loading = False

    # ------------------------------------------------------------------ Videos

    def add_videos(self, infos: Iterable[VideoFileInfo]) -> list[Video]:
        """Register imported files as videos; selects the first when nothing is selected."""
        added = [
            Video(id=self._ids.next_video_id(), name=info.name, path=info.path, size=info.size)
            for info in infos
        ]
        if not added:
            return []
        self._project.videos = [*self._project.videos, *added]
        self.project_changed.emit()
        if self._selected_video is None:
            self.select_video(added[0])
        return added

    def select_video(self, video: Video | None) -> None:
        if video is self._selected_video:
            return
        self._selected_video = video
        self.selected_video_changed.emit(video)

    def remove_video(self, video_id: str) -> None:
        """Remove a video and every clip cut from it, then close the gaps."""
        videos = self._project.videos
        index = next((i for i, v in enumerate(videos) if v.id == video_id), None)
        if index is None:
            return
        video = videos[index]

        clips, removed = timeline_edits.remove_video_clips(self._project.clips, video)
        remaining_videos = videos[:index] + videos[index + 1:]
        self._project.clips = clips
        self._project.videos = remaining_videos
        logger.info("Removed video %s and %d clip(s)", video.id, len(removed))
        self.project_changed.emit()

        if any(c.id == self._selected_clip_id for c in removed):
            self._set_selected_clip(None)

        if self._selected_video is not None and self._selected_video.id == video.id:
            if remaining_videos:
                self.select_video(remaining_videos[min(index, len(remaining_videos) - 1)])
            else:
                self.select_video(None)

    def clear_videos(self) -> None:
        """Remove all videos and clips."""
        if not self._project.videos and not self._project.clips:
            return
        self._project.videos = []
        self._project.clips = []
        self.project_changed.emit()
        self._set_selected_clip(None)
        self.select_video(None)

    # ------------------------------------------------------------------ Clips

    def create_initial_clip(self, video: Video, source_duration_ms: int) -> Clip | None:
        """Append a whole-file clip for *video* unless it already has one."""
        result = timeline_edits.create_initial_clip(
            self._project.clips, video, source_duration_ms, self._ids.next_clip_id
        )
        if result is None:
            return None
        self._project.clips, clip = result
        self.project_changed.emit()
        self._set_selected_clip(clip.id)
        return clip

    def split_at(self, timeline_ms: int) -> Clip | None:
        """Split the clip under *timeline_ms*; selects and returns the right half."""
        result = timeline_edits.split_at(self._project.clips, timeline_ms, self._ids.next_clip_id)
        if result is None:
            return None
        self._project.clips, _left, right = result
        self.project_changed.emit()
        self._set_selected_clip(right.id)
        return right

    def delete_clip(self, clip_id: str | None = None) -> Clip | None:
        """Ripple-delete *clip_id* (default: the selected clip).

        Selection moves to the next clip in timeline order, else the
        previous one, else none.
        """
        clip_id = clip_id or self._selected_clip_id
        if clip_id is None:
            return None
        ordered = self.clips
        index = next((i for i, c in enumerate(ordered) if c.id == clip_id), None)
        if index is None:
            return None
        deleted = ordered[index]

        self._project.clips = timeline_edits.ripple_delete(self._project.clips, clip_id)
        self.project_changed.emit()

        if clip_id == self._selected_clip_id:
            if index + 1 < len(ordered):
                self._set_selected_clip(ordered[index + 1].id)
            elif index > 0:
                self._set_selected_clip(ordered[index - 1].id)
            else:
                self._set_selected_clip(None)
        return deleted

    def glue_clips(self) -> None:
        """Close every gap and overlap by repacking clips in timeline order."""
        glued = timeline_edits.glue(self._project.clips)
        if glued == self._project.clips:
            return
        self._project.clips = glued
        self.project_changed.emit()

    # ------------------------------------------------------------------ Selection

    def select_clip(self, clip_id: str | None) -> None:
        if clip_id is not None and self._project.clip_by_id(clip_id) is None:
            return
        self._set_selected_clip(clip_id)

    def select_previous_clip(self) -> int | None:
        """Select the clip before the current one; returns its start for seeking."""
        return self._step_selection(-1)

    def select_next_clip(self) -> int | None:
        """Select the clip after the current one; returns its start for seeking."""
        return self._step_selection(1)

    def _step_selection(self, step: int) -> int | None:
        ordered = self.clips
        index = next((i for i, c in enumerate(ordered) if c.id == self._selected_clip_id), None)
        if index is None:
            return None
        target = index + step
        if not 0 <= target < len(ordered):
            return None
        self._set_selected_clip(ordered[target].id)
        return ordered[target].timeline_start_ms

    def _set_selected_clip(self, clip_id: str | None) -> None:
        if clip_id == self._selected_clip_id:
            return
        self._selected_clip_id = clip_id
        self.selection_changed.emit(clip_id)
