"""Tests for the two-phase timeline export."""

from pathlib import Path

import pytest

from clipforge.infrastructure.transcoder import TranscodeCancelled, TranscodeError
from clipforge.models.clip import Clip
from clipforge.models.export_preset import get_quality_preset
from clipforge.models.video import Video
from clipforge.services.video_exporter import (
    ExportState,
    TimelineExporter,
    export_timeline,
    write_concat_manifest,
)


class FakeTranscoder:
    """Writes placeholder files and records every call."""

    def __init__(self, fail_on_trim=None, fail_concat=False, steps=(0.25, 0.5, 1.0)):
        self.trims = []
        self.concats = []
        self.manifest_text = None
        self._fail_on_trim = fail_on_trim
        self._fail_concat = fail_concat
        self._steps = steps

    def trim(self, source_path, start_ms, duration_ms, video_codec, audio_codec,
             output_path, quality, on_progress=None, check_cancelled=None):
        self.trims.append((Path(source_path), start_ms, duration_ms, video_codec, audio_codec, quality))
        if self._fail_on_trim == len(self.trims):
            raise TranscodeError("trim exploded")
        Path(output_path).write_bytes(b"seg")
        for step in self._steps:
            if check_cancelled and check_cancelled():
                raise TranscodeCancelled("Export cancelled")
            if on_progress:
                on_progress(step)

    def concat(self, manifest_path, output_path, total_ms, on_progress=None, check_cancelled=None):
        self.concats.append((Path(manifest_path), Path(output_path), total_ms))
        self.manifest_text = Path(manifest_path).read_text(encoding="utf-8")
        Path(output_path).write_bytes(b"partial")
        if self._fail_concat:
            raise TranscodeError("concat exploded")
        for step in self._steps:
            if on_progress:
                on_progress(step)


@pytest.fixture
def videos():
    return [Video("video_1", "a.mp4", "media/a.mp4"), Video("video_2", "b.mp4", "/abs/b.mp4")]


@pytest.fixture
def clips():
    # Deliberately out of timeline order
    return [
        Clip("clip_3", "video_2", 0, 3000, 9000),
        Clip("clip_1", "video_1", 0, 5000, 0),
        Clip("clip_2", "video_1", 6000, 10_000, 5000),
    ]


def _run(clips, videos, tmp_path, transcoder, **kwargs):
    events = []
    result = export_timeline(
        clips,
        videos,
        tmp_path / "out" / "final.mp4",
        kwargs.pop("quality", "medium"),
        on_progress=lambda pct, stage: events.append((pct, stage)),
        transcoder=transcoder,
        resolve_path=lambda p: Path("/project") / p,
        temp_dir=kwargs.pop("temp_dir", tmp_path),
        **kwargs,
    )
    return result, events


def _leftovers(directory):
    return sorted(p.name for p in directory.glob("clipforge_*"))


class TestExportSuccess:
    def test_trims_in_timeline_order(self, tmp_path, clips, videos):
        transcoder = FakeTranscoder()
        result, _ = _run(clips, videos, tmp_path, transcoder)

        assert result.success
        assert result.output_path == str(tmp_path / "out" / "final.mp4")
        assert result.error is None
        assert [(t[1], t[2]) for t in transcoder.trims] == [(0, 5000), (6000, 4000), (0, 3000)]
        assert transcoder.trims[0][0] == Path("/project/media/a.mp4")
        assert transcoder.trims[2][0] == Path("/abs/b.mp4")

    def test_codecs_and_quality(self, tmp_path, clips, videos):
        transcoder = FakeTranscoder()
        _run(clips, videos, tmp_path, transcoder, quality="high")
        _, _, _, vcodec, acodec, quality = transcoder.trims[0]
        assert (vcodec, acodec) == ("libx264", "aac")
        assert quality == get_quality_preset("high")

    def test_progress_is_monotonic_and_ends_at_100(self, tmp_path, clips, videos):
        result, events = _run(clips, videos, tmp_path, FakeTranscoder())
        percents = [pct for pct, _ in events]
        assert percents == sorted(percents)
        assert percents[-1] == 100
        assert all(0 <= p <= 100 for p in percents)

    def test_progress_phases(self, tmp_path, clips, videos):
        _, events = _run(clips, videos, tmp_path, FakeTranscoder())
        stages = [stage for _, stage in events]
        assert stages[0] == "Processing clip 1 of 3"
        assert "Processing clip 3 of 3" in stages
        trim_max = max(p for p, s in events if s.startswith("Processing"))
        assert trim_max == 50
        concat = [p for p, s in events if s == "Concatenating clips"]
        assert concat[0] == 50 and concat[-1] == 100
        assert stages[-1] == "Export complete"

    def test_manifest_lists_segments_in_order(self, tmp_path, clips, videos):
        transcoder = FakeTranscoder()
        _run(clips, videos, tmp_path, transcoder)
        lines = transcoder.manifest_text.splitlines()
        assert len(lines) == 3
        assert all(line.startswith("file '") and line.endswith("'") for line in lines)
        assert ["seg000", "seg001", "seg002"] == [line.rsplit("_", 1)[1][:6] for line in lines]
        assert transcoder.concats[0][2] == 12_000

    def test_temp_files_removed(self, tmp_path, clips, videos):
        _run(clips, videos, tmp_path, FakeTranscoder())
        assert _leftovers(tmp_path) == []
        assert (tmp_path / "out" / "final.mp4").exists()

    def test_state_complete(self, tmp_path, clips, videos):
        exporter = TimelineExporter(
            clips, videos, tmp_path / "final.mp4",
            transcoder=FakeTranscoder(), resolve_path=Path, temp_dir=tmp_path,
        )
        assert exporter.state is ExportState.IDLE
        assert exporter.run().success
        assert exporter.state is ExportState.COMPLETE


class TestExportFailure:
    def test_empty_timeline(self, tmp_path, videos):
        transcoder = FakeTranscoder()
        result, events = _run([], videos, tmp_path, transcoder)
        assert not result.success
        assert result.error == "No clips to export"
        assert transcoder.trims == [] and events == []

    def test_failed_trim_cleans_up(self, tmp_path, clips, videos):
        transcoder = FakeTranscoder(fail_on_trim=2)
        result, _ = _run(clips, videos, tmp_path, transcoder)
        assert not result.success
        assert "trim exploded" in result.error
        assert result.output_path is None
        assert len(transcoder.trims) == 2
        assert transcoder.concats == []
        assert _leftovers(tmp_path) == []

    def test_failed_trim_keeps_existing_output(self, tmp_path, clips, videos):
        output = tmp_path / "out" / "final.mp4"
        output.parent.mkdir()
        output.write_bytes(b"previous export")
        result, _ = _run(clips, videos, tmp_path, FakeTranscoder(fail_on_trim=1))
        assert not result.success
        assert output.read_bytes() == b"previous export"

    def test_failed_concat_removes_partial_output(self, tmp_path, clips, videos):
        result, _ = _run(clips, videos, tmp_path, FakeTranscoder(fail_concat=True))
        assert not result.success
        assert not (tmp_path / "out" / "final.mp4").exists()
        assert _leftovers(tmp_path) == []

    def test_unknown_quality_is_a_failed_result(self, tmp_path, clips, videos):
        result, _ = _run(clips, videos, tmp_path, FakeTranscoder(), quality="ultra")
        assert not result.success
        assert "ultra" in result.error

    def test_missing_video(self, tmp_path, videos):
        clips = [Clip("clip_1", "video_9", 0, 1000, 0)]
        result, _ = _run(clips, videos, tmp_path, FakeTranscoder())
        assert not result.success
        assert "video_9" in result.error

    def test_orphan_uses_source_path(self, tmp_path, videos):
        transcoder = FakeTranscoder()
        clips = [Clip("clip_1", None, 0, 1000, 0, source_path="/old/c.mp4")]
        result, _ = _run(clips, videos, tmp_path, transcoder)
        assert result.success
        assert transcoder.trims[0][0] == Path("/old/c.mp4")


class TestExportCancel:
    def test_cancel_during_trim(self, tmp_path, clips, videos):
        calls = {"n": 0}

        def check_cancelled():
            calls["n"] += 1
            return calls["n"] > 2

        exporter = TimelineExporter(
            clips, videos, tmp_path / "final.mp4",
            transcoder=FakeTranscoder(), resolve_path=Path,
            check_cancelled=check_cancelled, temp_dir=tmp_path,
        )
        result = exporter.run()
        assert not result.success
        assert result.error == "Export cancelled"
        assert exporter.state is ExportState.CANCELLED
        assert _leftovers(tmp_path) == []
        assert not (tmp_path / "final.mp4").exists()


class TestConcatManifest:
    def test_quotes_are_escaped(self, tmp_path):
        manifest = tmp_path / "list.txt"
        write_concat_manifest([Path("/tmp/it's here.mp4"), Path("/tmp/b.mp4")], manifest)
        assert manifest.read_text(encoding="utf-8") == (
            "file '/tmp/it'\\''s here.mp4'\n"
            "file '/tmp/b.mp4'\n"
        )
