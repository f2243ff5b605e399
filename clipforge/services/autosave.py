"""Debounced project saving."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from clipforge.services.project_store import ProjectStore
from clipforge.services.settings_manager import SettingsManager
from clipforge.services.timeline_model import TimelineModel

logger = logging.getLogger(__name__)


class AutoSaveManager(QObject):
    """Writes the project a short while after the last edit.

    Every ``project_changed`` restarts a single-shot timer, so a burst of
    edits produces one write. Scheduling is suspended between
    :meth:`begin_load` and :meth:`end_load` so a startup load is never
    raced by a save of the half-loaded state.

    Signals:
        save_completed(Path): after each successful write.
        save_failed(str): error message when a write fails.
    """

    save_completed = Signal(Path)
    save_failed = Signal(str)

    def __init__(
        self,
        model: TimelineModel,
        store: ProjectStore,
        delay_ms: int | None = None,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._model = model
        self._store = store
        self._delay_ms = delay_ms if delay_ms is not None else SettingsManager().get_autosave_delay_ms()
        self._loading = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

        model.project_changed.connect(self.notify_edit)

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def begin_load(self) -> None:
        """Suspend scheduling and drop any pending write."""
        self._loading = True
        self._timer.stop()

    def end_load(self) -> None:
        self._loading = False

    @Slot()
    def notify_edit(self) -> None:
        """Restart the debounce window."""
        if self._loading or self._model.is_loading:
            return
        self._timer.start(self._delay_ms)

    def flush(self) -> None:
        """Write immediately if a save is pending (e.g. on shutdown)."""
        if self._timer.isActive():
            self._timer.stop()
            self._do_save()

    def save_now(self) -> None:
        self._timer.stop()
        self._do_save()

    def _do_save(self) -> None:
        try:
            path = self._store.save(self._model.project)
        except OSError as e:
            logger.error("Autosave failed: %s", e)
            self.save_failed.emit(str(e))
            return
        logger.debug("Autosaved project to %s", path)
        self.save_completed.emit(path)

    @Slot()
    def _on_timeout(self) -> None:
        self._do_save()
