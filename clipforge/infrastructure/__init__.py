"""Infrastructure layer: external tools (FFmpeg) behind small adapters.

Services depend on these classes rather than on subprocess directly, so
tests can swap in fakes.
"""

from clipforge.infrastructure.ffmpeg_runner import FFmpegRunner
from clipforge.infrastructure.transcoder import FFmpegTranscoder, TranscodeCancelled, TranscodeError

__all__ = [
    "FFmpegRunner",
    "FFmpegTranscoder",
    "TranscodeCancelled",
    "TranscodeError",
]
