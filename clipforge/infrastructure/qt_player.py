"""Adapter from QMediaPlayer to the PlaybackCoordinator's player protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtMultimedia import QMediaPlayer

    from clipforge.services.playback_coordinator import PlaybackCoordinator


class QMediaPlayerAdapter:
    """Exposes a QMediaPlayer as a ``MediaPlayer`` (positions in source ms)."""

    def __init__(self, player: QMediaPlayer):
        self._player = player

    @property
    def player(self) -> QMediaPlayer:
        return self._player

    def position_ms(self) -> int:
        return int(self._player.position())

    def set_position_ms(self, ms: int) -> None:
        self._player.setPosition(int(ms))

    def play(self) -> None:
        self._player.play()

    def pause(self) -> None:
        self._player.pause()


def connect_player(player: QMediaPlayer, coordinator: PlaybackCoordinator) -> None:
    """Forward the player's position and duration updates to *coordinator*."""
    player.positionChanged.connect(coordinator.on_player_time_advance)
    player.durationChanged.connect(coordinator.on_duration_known)
