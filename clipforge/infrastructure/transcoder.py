"""FFmpeg-backed transcoding engine: per-segment re-encode and stream-copy concat."""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from clipforge.infrastructure.ffmpeg_runner import FFmpegRunner, get_ffmpeg_runner
from clipforge.models.export_preset import QualityPreset
from clipforge.services.ffmpeg_logger import log_ffmpeg_command, log_ffmpeg_line
from clipforge.utils.config import EXPORT_AUDIO_BITRATE
from clipforge.utils.time_utils import ms_to_ffmpeg_time

logger = logging.getLogger(__name__)

FractionCallback = Callable[[float], None]   # 0.0 - 1.0
CancelCheck = Callable[[], bool]


class TranscodeError(RuntimeError):
    """FFmpeg exited with an error."""


class TranscodeCancelled(TranscodeError):
    """The transcode was stopped on request."""


class Transcoder(Protocol):
    """Contract the export pipeline needs from a transcoding engine."""

    def trim(
        self,
        source_path: Path,
        start_ms: int,
        duration_ms: int,
        video_codec: str,
        audio_codec: str,
        output_path: Path,
        quality: QualityPreset,
        on_progress: FractionCallback | None = None,
        check_cancelled: CancelCheck | None = None,
    ) -> None: ...

    def concat(
        self,
        manifest_path: Path,
        output_path: Path,
        total_ms: int,
        on_progress: FractionCallback | None = None,
        check_cancelled: CancelCheck | None = None,
    ) -> None: ...


class FFmpegTranscoder:
    """Drives ffmpeg with ``-progress pipe:1`` and reports fractional progress."""

    def __init__(self, runner: FFmpegRunner | None = None):
        self._runner = runner

    @property
    def runner(self) -> FFmpegRunner:
        if self._runner is None:
            self._runner = get_ffmpeg_runner()
        return self._runner

    def trim(
        self,
        source_path: Path,
        start_ms: int,
        duration_ms: int,
        video_codec: str,
        audio_codec: str,
        output_path: Path,
        quality: QualityPreset,
        on_progress: FractionCallback | None = None,
        check_cancelled: CancelCheck | None = None,
    ) -> None:
        """Re-encode ``[start, start + duration)`` of *source_path*."""
        args = [
            "-y",
            "-ss", ms_to_ffmpeg_time(start_ms),
            "-i", str(source_path),
            "-t", ms_to_ffmpeg_time(duration_ms),
            "-c:v", video_codec,
            "-preset", quality.preset,
            "-crf", str(quality.crf),
            "-pix_fmt", "yuv420p",
            "-c:a", audio_codec,
            "-b:a", EXPORT_AUDIO_BITRATE,
            "-avoid_negative_ts", "make_zero",
            "-progress", "pipe:1",
            "-nostats",
            str(output_path),
        ]
        self._run_with_progress(args, duration_ms, on_progress, check_cancelled)

    def concat(
        self,
        manifest_path: Path,
        output_path: Path,
        total_ms: int,
        on_progress: FractionCallback | None = None,
        check_cancelled: CancelCheck | None = None,
    ) -> None:
        """Concatenate the segments listed in *manifest_path* without re-encoding."""
        args = [
            "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", str(manifest_path),
            "-c", "copy",
            "-movflags", "+faststart",
            "-progress", "pipe:1",
            "-nostats",
            str(output_path),
        ]
        self._run_with_progress(args, total_ms, on_progress, check_cancelled)

    def _run_with_progress(
        self,
        args: list[str],
        total_ms: int,
        on_progress: FractionCallback | None,
        check_cancelled: CancelCheck | None,
    ) -> None:
        log_ffmpeg_command([self.runner.ffmpeg_path or "ffmpeg", *args])
        process = self.runner.run_async(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )

        # Drain stderr in a background thread so the pipe never fills up
        stderr_chunks: list[str] = []

        def _drain_stderr():
            for line in process.stderr:
                stderr_chunks.append(line)
                log_ffmpeg_line(line)

        stderr_thread = threading.Thread(target=_drain_stderr, daemon=True)
        stderr_thread.start()

        cancelled = False
        if process.stdout:
            for line in process.stdout:
                if check_cancelled and check_cancelled():
                    cancelled = True
                    process.terminate()
                    break
                fraction = parse_progress_line(line, total_ms)
                if fraction is not None and on_progress:
                    on_progress(fraction)

        process.wait()
        stderr_thread.join(timeout=10)

        if cancelled:
            raise TranscodeCancelled("Export cancelled")
        if process.returncode != 0:
            stderr = "".join(stderr_chunks)
            raise TranscodeError(f"FFmpeg failed (code {process.returncode}): {stderr[-500:]}")
        if on_progress:
            on_progress(1.0)


def parse_progress_line(line: str, total_ms: int) -> float | None:
    """Turn an ``out_time_us=`` progress line into a 0..1 fraction."""
    line = line.strip()
    if not line.startswith("out_time_us=") or total_ms <= 0:
        return None
    try:
        us = int(line.split("=", 1)[1])
    except ValueError:
        # ffmpeg prints "N/A" before the first frame
        return None
    return min(1.0, max(0.0, us / 1000.0 / total_ms))
