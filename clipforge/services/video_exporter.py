"""Render a timeline to one file: per-clip re-encode, then stream-copy concat."""

from __future__ import annotations

import enum
import logging
import tempfile
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from clipforge.infrastructure.transcoder import FFmpegTranscoder, TranscodeCancelled, Transcoder
from clipforge.models.clip import Clip
from clipforge.models.export_preset import QualityPreset, get_quality_preset
from clipforge.models.video import Video
from clipforge.services.time_mapper import sorted_by_timeline
from clipforge.utils.config import EXPORT_AUDIO_CODEC, EXPORT_VIDEO_CODEC

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]  # (percent 0-100, stage label)
PathResolver = Callable[[str], Path]

TRIM_PHASE_END = 50


class ExportState(enum.Enum):
    IDLE = "idle"
    TRIMMING = "trimming"
    CONCATENATING = "concatenating"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ExportResult:
    """Outcome of one export: either an output path or an error, never both."""

    success: bool
    output_path: str | None = None
    error: str | None = None


def write_concat_manifest(segments: Sequence[Path], manifest_path: Path) -> None:
    """Write an FFmpeg concat-demuxer list, one quoted ``file`` line per segment."""
    lines = []
    for seg in segments:
        safe = seg.as_posix().replace("'", "'\\''")
        lines.append(f"file '{safe}'")
    manifest_path.write_text("\n".join(lines) + "\n", encoding="utf-8")


class TimelineExporter:
    """Two-phase export of a frozen clip list.

    ``IDLE → TRIMMING → CONCATENATING → COMPLETE | FAILED | CANCELLED``

    Trims run one after another in timeline order. The first failure stops
    the job; every temp file created so far is removed before the result
    is returned.
    """

    def __init__(
        self,
        clips: Sequence[Clip],
        videos: Sequence[Video],
        output_path: Path,
        quality: QualityPreset | str = "medium",
        *,
        transcoder: Transcoder | None = None,
        resolve_path: PathResolver | None = None,
        on_progress: ProgressCallback | None = None,
        check_cancelled: Callable[[], bool] | None = None,
        temp_dir: Path | None = None,
    ):
        self._clips = tuple(sorted_by_timeline(clips))
        self._videos = {v.id: v for v in videos}
        self._output_path = Path(output_path)
        self._quality_arg = quality
        self._quality: QualityPreset | None = None
        self._transcoder = transcoder or FFmpegTranscoder()
        self._resolve_path = resolve_path or Path
        self._on_progress = on_progress
        self._check_cancelled = check_cancelled
        self._temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())

        self._state = ExportState.IDLE
        self._last_percent = 0
        self._temp_files: list[Path] = []
        self._output_started = False

    @property
    def state(self) -> ExportState:
        return self._state

    def run(self) -> ExportResult:
        if not self._clips:
            self._state = ExportState.FAILED
            return ExportResult(success=False, error="No clips to export")

        job_id = uuid.uuid4().hex[:8]
        try:
            segments = self._trim_all(job_id)
            self._concatenate(segments, job_id)
        except TranscodeCancelled as e:
            self._state = ExportState.CANCELLED
            logger.info("Export to %s cancelled", self._output_path)
            self._unwind()
            return ExportResult(success=False, error=str(e))
        except Exception as e:
            self._state = ExportState.FAILED
            logger.error("Export to %s failed: %s", self._output_path, e)
            self._unwind()
            return ExportResult(success=False, error=str(e))

        self._cleanup_temp_files()
        self._state = ExportState.COMPLETE
        self._emit(100, "Export complete")
        logger.info("Exported %d clips to %s", len(self._clips), self._output_path)
        return ExportResult(success=True, output_path=str(self._output_path))

    # ------------------------------------------------------------------ Phases

    def _trim_all(self, job_id: str) -> list[Path]:
        self._state = ExportState.TRIMMING
        quality = self._quality_arg
        self._quality = get_quality_preset(quality) if isinstance(quality, str) else quality
        total = len(self._clips)
        segments: list[Path] = []
        for index, clip in enumerate(self._clips):
            self._raise_if_cancelled()
            stage = f"Processing clip {index + 1} of {total}"
            self._emit(self._trim_percent(index, 0.0, total), stage)

            source = self._source_path(clip)
            segment = self._temp_dir / f"clipforge_{job_id}_seg{index:03d}.mp4"
            self._temp_files.append(segment)
            self._transcoder.trim(
                source,
                clip.source_start_ms,
                clip.duration_ms,
                EXPORT_VIDEO_CODEC,
                EXPORT_AUDIO_CODEC,
                segment,
                self._quality,
                on_progress=lambda frac, i=index, s=stage: self._emit(self._trim_percent(i, frac, total), s),
                check_cancelled=self._check_cancelled,
            )
            segments.append(segment)
        return segments

    def _concatenate(self, segments: list[Path], job_id: str) -> None:
        self._raise_if_cancelled()
        self._state = ExportState.CONCATENATING
        stage = "Concatenating clips"
        self._emit(TRIM_PHASE_END, stage)

        manifest = self._temp_dir / f"clipforge_{job_id}_concat.txt"
        self._temp_files.append(manifest)
        write_concat_manifest(segments, manifest)

        total_ms = sum(c.duration_ms for c in self._clips)
        self._output_path.parent.mkdir(parents=True, exist_ok=True)
        self._output_started = True
        self._transcoder.concat(
            manifest,
            self._output_path,
            total_ms,
            on_progress=lambda frac: self._emit(
                TRIM_PHASE_END + round(frac * (100 - TRIM_PHASE_END)), stage
            ),
            check_cancelled=self._check_cancelled,
        )

    # ------------------------------------------------------------------ Helpers

    @staticmethod
    def _trim_percent(index: int, fraction: float, total: int) -> int:
        return round(((index + fraction) / total) * TRIM_PHASE_END)

    def _source_path(self, clip: Clip) -> Path:
        video = self._videos.get(clip.video_id) if clip.video_id else None
        if video is not None:
            return self._resolve_path(video.path)
        if clip.source_path:
            return self._resolve_path(clip.source_path)
        raise FileNotFoundError(f"Clip {clip.id} references missing video {clip.video_id}")

    def _emit(self, percent: int, stage: str) -> None:
        # Progress for one export never goes backwards
        percent = max(self._last_percent, min(100, percent))
        self._last_percent = percent
        if self._on_progress:
            self._on_progress(percent, stage)

    def _raise_if_cancelled(self) -> None:
        if self._check_cancelled and self._check_cancelled():
            raise TranscodeCancelled("Export cancelled")

    def _unwind(self) -> None:
        self._cleanup_temp_files()
        if not self._output_started:
            return
        try:
            self._output_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove partial output %s: %s", self._output_path, e)

    def _cleanup_temp_files(self) -> None:
        for path in self._temp_files:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Could not remove temp file %s: %s", path, e)
        self._temp_files.clear()


def export_timeline(
    clips: Sequence[Clip],
    videos: Sequence[Video],
    output_path: Path,
    quality: QualityPreset | str = "medium",
    on_progress: ProgressCallback | None = None,
    *,
    transcoder: Transcoder | None = None,
    resolve_path: PathResolver | None = None,
    check_cancelled: Callable[[], bool] | None = None,
    temp_dir: Path | None = None,
) -> ExportResult:
    """Export *clips* (any order) to *output_path*.

    Args:
        clips: Snapshot of the timeline's clips.
        videos: Videos the clips reference.
        output_path: Destination file.
        quality: Preset name ("high", "medium", "low") or a QualityPreset.
        on_progress: Optional callback(percent, stage); percent never decreases.
        transcoder: Engine to use (defaults to FFmpeg).
        resolve_path: Maps a stored video path to a file on disk.
        check_cancelled: Polled during the job; returning True stops it.
        temp_dir: Where intermediate segments go (defaults to the system temp dir).
    """
    return TimelineExporter(
        clips,
        videos,
        output_path,
        quality,
        transcoder=transcoder,
        resolve_path=resolve_path,
        on_progress=on_progress,
        check_cancelled=check_cancelled,
        temp_dir=temp_dir,
    ).run()
