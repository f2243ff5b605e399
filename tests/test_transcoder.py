"""Tests for the FFmpeg transcoder command lines and progress parsing."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from clipforge.infrastructure.ffmpeg_runner import FFmpegRunner
from clipforge.infrastructure.transcoder import (
    FFmpegTranscoder,
    TranscodeCancelled,
    TranscodeError,
    parse_progress_line,
)
from clipforge.models.export_preset import get_quality_preset


def _process(stdout_lines=(), stderr_lines=(), returncode=0):
    proc = MagicMock()
    proc.stdout = iter(stdout_lines)
    proc.stderr = iter(stderr_lines)
    proc.returncode = returncode
    proc.wait.return_value = returncode
    return proc


@pytest.fixture
def transcoder():
    return FFmpegTranscoder(FFmpegRunner(ffmpeg_path="/usr/bin/ffmpeg", ffprobe_path="/usr/bin/ffprobe"))


class TestParseProgressLine:
    def test_fraction(self):
        assert parse_progress_line("out_time_us=2500000\n", 10_000) == 0.25

    def test_clamped(self):
        assert parse_progress_line("out_time_us=99000000", 10_000) == 1.0
        assert parse_progress_line("out_time_us=-5", 10_000) == 0.0

    def test_ignored_lines(self):
        assert parse_progress_line("frame=12", 10_000) is None
        assert parse_progress_line("out_time_us=N/A", 10_000) is None
        assert parse_progress_line("out_time_us=100", 0) is None


class TestTrim:
    @patch("clipforge.infrastructure.ffmpeg_runner.subprocess.Popen")
    def test_trim_command(self, mock_popen, transcoder, tmp_path):
        mock_popen.return_value = _process()
        transcoder.trim(
            Path("/videos/a.mp4"), 1500, 4000, "libx264", "aac",
            tmp_path / "seg.mp4", get_quality_preset("low"),
        )
        cmd = mock_popen.call_args[0][0]
        assert cmd[0] == "/usr/bin/ffmpeg"
        assert cmd[cmd.index("-ss") + 1] == "1.500"
        assert cmd[cmd.index("-t") + 1] == "4.000"
        assert cmd[cmd.index("-i") + 1] == str(Path("/videos/a.mp4"))
        assert cmd[cmd.index("-c:v") + 1] == "libx264"
        assert cmd[cmd.index("-c:a") + 1] == "aac"
        assert cmd[cmd.index("-crf") + 1] == "28"
        assert cmd[cmd.index("-preset") + 1] == "veryfast"
        assert cmd[-1] == str(tmp_path / "seg.mp4")

    @patch("clipforge.infrastructure.ffmpeg_runner.subprocess.Popen")
    def test_trim_reports_progress(self, mock_popen, transcoder, tmp_path):
        mock_popen.return_value = _process(["out_time_us=1000000\n", "progress=continue\n",
                                            "out_time_us=2000000\n", "progress=end\n"])
        fractions = []
        transcoder.trim(Path("/a.mp4"), 0, 4000, "libx264", "aac", tmp_path / "s.mp4",
                        get_quality_preset("medium"), on_progress=fractions.append)
        assert fractions == [0.25, 0.5, 1.0]

    @patch("clipforge.infrastructure.ffmpeg_runner.subprocess.Popen")
    def test_nonzero_exit_raises(self, mock_popen, transcoder, tmp_path):
        mock_popen.return_value = _process(stderr_lines=["Invalid data found\n"], returncode=1)
        with pytest.raises(TranscodeError, match="Invalid data found"):
            transcoder.trim(Path("/a.mp4"), 0, 1000, "libx264", "aac", tmp_path / "s.mp4",
                            get_quality_preset("medium"))

    @patch("clipforge.infrastructure.ffmpeg_runner.subprocess.Popen")
    def test_cancel_terminates_process(self, mock_popen, transcoder, tmp_path):
        proc = _process(["out_time_us=1000000\n", "out_time_us=2000000\n"])
        mock_popen.return_value = proc
        with pytest.raises(TranscodeCancelled):
            transcoder.trim(Path("/a.mp4"), 0, 4000, "libx264", "aac", tmp_path / "s.mp4",
                            get_quality_preset("medium"), check_cancelled=lambda: True)
        proc.terminate.assert_called_once()


class TestConcat:
    @patch("clipforge.infrastructure.ffmpeg_runner.subprocess.Popen")
    def test_concat_is_stream_copy(self, mock_popen, transcoder, tmp_path):
        mock_popen.return_value = _process()
        transcoder.concat(tmp_path / "list.txt", tmp_path / "out.mp4", 10_000)
        cmd = mock_popen.call_args[0][0]
        assert cmd[cmd.index("-f") + 1] == "concat"
        assert cmd[cmd.index("-safe") + 1] == "0"
        assert cmd[cmd.index("-c") + 1] == "copy"
        assert "-crf" not in cmd
        assert cmd[-1] == str(tmp_path / "out.mp4")


class TestRunner:
    def test_missing_ffmpeg(self):
        runner = FFmpegRunner.__new__(FFmpegRunner)
        runner._ffmpeg = None
        runner._ffprobe = None
        with pytest.raises(FileNotFoundError, match="FFmpeg not found"):
            runner.run_async(["-version"])
        with pytest.raises(FileNotFoundError, match="FFprobe not found"):
            runner.run_ffprobe(["-version"])
