"""Background worker for timeline export."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from PySide6.QtCore import QObject, Signal

from clipforge.infrastructure.transcoder import Transcoder
from clipforge.models.clip import Clip
from clipforge.models.video import Video
from clipforge.services.video_exporter import export_timeline


class ExportWorker(QObject):
    """Runs an export in a background thread.

    The clip list is copied on construction, so later edits to the live
    timeline never reach a running export.

    Signals:
        progress(int, str): (percent, stage label), never decreasing
        finished(str): output path on success
        error(str): error message on failure or cancellation
    """

    progress = Signal(int, str)
    finished = Signal(str)
    error = Signal(str)

    def __init__(
        self,
        clips: Sequence[Clip],
        videos: Sequence[Video],
        output_path: Path,
        quality: str = "medium",
        resolve_path: Callable[[str], Path] | None = None,
        transcoder: Transcoder | None = None,
        temp_dir: Path | None = None,
    ):
        super().__init__()
        self._clips = tuple(clips)
        self._videos = tuple(videos)
        self._output_path = Path(output_path)
        self._quality = quality
        self._resolve_path = resolve_path
        self._transcoder = transcoder
        self._temp_dir = temp_dir
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def run(self) -> None:
        result = export_timeline(
            self._clips,
            self._videos,
            self._output_path,
            self._quality,
            on_progress=lambda pct, stage: self.progress.emit(pct, stage),
            transcoder=self._transcoder,
            resolve_path=self._resolve_path,
            check_cancelled=lambda: self._cancelled,
            temp_dir=self._temp_dir,
        )
        if result.success:
            self.finished.emit(result.output_path)
        else:
            self.error.emit(result.error or "Export failed")
