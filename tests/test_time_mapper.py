"""Tests for timeline <-> source time mapping."""

from clipforge.models.clip import Clip
from clipforge.services.time_mapper import (
    clip_at,
    contiguous_next,
    source_time_of,
    sorted_by_timeline,
    timeline_time_of,
    total_duration_ms,
)


class TestSourceTimeOf:
    def test_offset_inside_clip(self):
        clip = Clip("clip_1", "video_1", 3000, 8000, 10_000)
        assert source_time_of(10_000, clip) == 3000
        assert source_time_of(12_500, clip) == 5500

    def test_inverse(self):
        clip = Clip("clip_1", "video_1", 3000, 8000, 10_000)
        for t in (10_000, 11_234, 14_999):
            assert timeline_time_of(source_time_of(t, clip), clip) == t


class TestClipAt:
    def test_boundary_belongs_to_later_clip(self, three_clips):
        assert clip_at(9_999, three_clips).id == "clip_1"
        assert clip_at(10_000, three_clips).id == "clip_2"

    def test_end_of_timeline_is_outside(self, three_clips):
        assert clip_at(30_000, three_clips) is None

    def test_gap(self):
        clips = [Clip("a", "v", 0, 1000, 0), Clip("b", "v", 0, 1000, 5000)]
        assert clip_at(2000, clips) is None
        assert clip_at(5000, clips).id == "b"

    def test_empty(self):
        assert clip_at(0, []) is None


class TestTotals:
    def test_total_duration_is_furthest_end(self):
        clips = [Clip("a", "v", 0, 1000, 4000), Clip("b", "v", 0, 2000, 0)]
        assert total_duration_ms(clips) == 5000
        assert total_duration_ms([]) == 0

    def test_sorted_by_timeline(self):
        clips = [Clip("a", "v", 0, 1000, 4000), Clip("b", "v", 0, 2000, 0)]
        assert [c.id for c in sorted_by_timeline(clips)] == ["b", "a"]

    def test_contiguous_next(self, three_clips):
        assert contiguous_next(three_clips[0], three_clips).id == "clip_2"
        assert contiguous_next(three_clips[2], three_clips) is None
