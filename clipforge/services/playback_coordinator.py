"""Keeps the preview player in step with the timeline."""

from __future__ import annotations

import logging
from typing import Protocol

from PySide6.QtCore import QObject, Signal, Slot

from clipforge.models.clip import Clip
from clipforge.services.time_mapper import (
    clip_at,
    contiguous_next,
    source_time_of,
    timeline_time_of,
)
from clipforge.services.timeline_model import TimelineModel
from clipforge.utils.config import SEEK_TOLERANCE_MS

logger = logging.getLogger(__name__)


class MediaPlayer(Protocol):
    """What the coordinator needs from a preview player (positions in source ms)."""

    def position_ms(self) -> int: ...

    def set_position_ms(self, ms: int) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...


class PlaybackCoordinator(QObject):
    """Maps timeline positions to the player's source position and back.

    The UI calls the ``on_*`` methods; the coordinator drives the injected
    player and reports back through signals.

    Signals:
        timeline_position_changed(int): playhead position in timeline ms.
        playing_changed(bool)
        active_clip_changed(object): the clip the player is positioned in, or None.
    """

    timeline_position_changed = Signal(int)
    playing_changed = Signal(bool)
    active_clip_changed = Signal(object)

    def __init__(self, model: TimelineModel, player: MediaPlayer, parent: QObject | None = None):
        super().__init__(parent)
        self._model = model
        self._player = player
        self._active_clip: Clip | None = None
        self._playing = False
        self._timeline_ms = 0

        model.project_changed.connect(self._on_project_changed)

    @property
    def active_clip(self) -> Clip | None:
        return self._active_clip

    @property
    def is_playing(self) -> bool:
        return self._playing

    # ---- Play control ----

    def play(self) -> None:
        if self._playing:
            return
        self._player.play()
        self._set_playing(True)

    def pause(self) -> None:
        if not self._playing:
            return
        self._player.pause()
        self._set_playing(False)

    def toggle_play(self) -> None:
        if self._playing:
            self.pause()
        else:
            self.play()

    # ---- Timeline → player ----

    def on_external_seek(self, timeline_ms: int) -> bool:
        """Position the player for a playhead moved by the user.

        Returns False when no clip covers *timeline_ms*. Drift within
        ``SEEK_TOLERANCE_MS`` is left alone so player-reported and
        model-driven positions don't chase each other.
        """
        clip = clip_at(timeline_ms, self._model.clips)
        if clip is None:
            return False
        expected = source_time_of(timeline_ms, clip)
        if abs(self._player.position_ms() - expected) > SEEK_TOLERANCE_MS:
            self._player.set_position_ms(expected)
        self._set_active_clip(clip)
        self._report_position(timeline_ms)
        return True

    # ---- Player → timeline ----

    def on_player_time_advance(self, source_ms: int) -> None:
        """Translate the player's source position into a timeline position.

        At the end of the active clip, playback continues into the clip
        that starts exactly where it ends if both come from the same video;
        otherwise the player pauses at the clip's end.
        """
        clips = self._model.clips
        clip = self._active_clip
        if clip is None:
            clip = clip_at(0, clips)
            if clip is None:
                return
            self._set_active_clip(clip)

        if source_ms >= clip.source_end_ms:
            following = contiguous_next(clip, clips)
            if following is not None and following.video_id == clip.video_id:
                self._player.set_position_ms(following.source_start_ms)
                self._set_active_clip(following)
                self._report_position(following.timeline_start_ms)
            else:
                self._player.pause()
                self._set_playing(False)
                self._report_position(clip.timeline_end_ms)
            return

        self._report_position(timeline_time_of(source_ms, clip))

    def on_duration_known(self, source_duration_ms: int) -> Clip | None:
        """Player reported the selected video's duration.

        Creates the video's initial clip once; ignored while a project is
        being loaded.
        """
        if self._model.is_loading:
            return None
        video = self._model.selected_video
        if video is None or source_duration_ms <= 0:
            return None
        if self._model.has_clips_for(video):
            return None
        logger.info("Creating initial clip for %s (%d ms)", video.name, source_duration_ms)
        return self._model.create_initial_clip(video, source_duration_ms)

    # ---- Internal ----

    def _set_active_clip(self, clip: Clip | None) -> None:
        if clip == self._active_clip:
            return
        self._active_clip = clip
        self.active_clip_changed.emit(clip)

    def _report_position(self, timeline_ms: int) -> None:
        self._timeline_ms = timeline_ms
        self.timeline_position_changed.emit(timeline_ms)

    def _set_playing(self, playing: bool) -> None:
        if playing == self._playing:
            return
        self._playing = playing
        self.playing_changed.emit(playing)

    @Slot()
    def _on_project_changed(self) -> None:
        # The active clip may have been split, moved or deleted
        if self._active_clip is None:
            return
        current = self._model.project.clip_by_id(self._active_clip.id)
        if current is None:
            current = self._relocate_active_clip()
        self._set_active_clip(current)

    def _relocate_active_clip(self) -> Clip | None:
        """Find the clip now holding the player's position after the active one was replaced."""
        video_id = self._active_clip.video_id
        source_ms = self._player.position_ms()
        clips = self._model.clips
        for clip in clips:
            if clip.video_id == video_id and clip.source_start_ms <= source_ms < clip.source_end_ms:
                return clip
        return clip_at(self._timeline_ms, clips)
