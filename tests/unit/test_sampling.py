"""
Unit tests for the sampling policy.

The policy is pure arithmetic, so we check its invariants over a spread
of durations, intervals and caps rather than one example each.
"""

import math

import pytest

from video_extractor.core.extraction.sampling import SamplingPolicy, potential_frame_count


DURATIONS = [0, 0.4, 1, 2.9, 3, 9.99, 25, 30, 30.5, 59, 61, 99, 100, 101, 600, 601.7, 3599.9, 7200]
INTERVALS = [1, 2, 3, 5, 7, 60]
CAPS = [1, 3, 10, 25]


class TestSamplingPolicyInvariants:
    """Properties that must hold for every input."""

    @pytest.mark.parametrize("duration", DURATIONS)
    @pytest.mark.parametrize("interval", INTERVALS)
    @pytest.mark.parametrize("max_frames", CAPS)
    def test_cap_holds_and_interval_only_widens(self, duration, interval, max_frames):
        policy = SamplingPolicy.for_duration(duration, interval, max_frames)

        assert math.floor(duration / policy.effective_interval) <= max_frames
        assert policy.effective_interval >= interval

    @pytest.mark.parametrize("duration", DURATIONS)
    @pytest.mark.parametrize("interval", INTERVALS)
    @pytest.mark.parametrize("max_frames", CAPS)
    def test_interval_kept_when_cap_not_exceeded(self, duration, interval, max_frames):
        policy = SamplingPolicy.for_duration(duration, interval, max_frames)

        if potential_frame_count(duration, interval) <= max_frames:
            assert policy.effective_interval == interval
            assert not policy.was_widened


class TestSamplingPolicyExamples:
    """Concrete cases worth pinning down."""

    def test_thirty_second_video_keeps_requested_interval(self):
        """30s at 3s/frame is exactly 10 frames: not over the cap."""
        policy = SamplingPolicy.for_duration(30, interval=3, max_frames=10)

        assert policy.effective_interval == 3
        assert policy.fps == "1/3"
        assert policy.expected_frames == 10

    def test_ten_minute_video_is_widened(self):
        """600s would be 200 frames; widen to one every 60s."""
        policy = SamplingPolicy.for_duration(600, interval=3, max_frames=10)

        assert policy.effective_interval == 60
        assert policy.fps == "1/60"
        assert policy.was_widened
        assert policy.expected_frames <= 10

    def test_widening_rounds_up_when_floor_is_too_narrow(self):
        """floor(25 / 10) = 2 would still give 12 frames."""
        policy = SamplingPolicy.for_duration(25, interval=1, max_frames=10)

        assert policy.effective_interval == 3
        assert math.floor(25 / policy.effective_interval) <= 10

    def test_fractional_duration(self):
        policy = SamplingPolicy.for_duration(600.5, interval=3, max_frames=10)

        assert policy.effective_interval == 60

    @pytest.mark.parametrize("duration", [0, None, -5])
    def test_unknown_duration_uses_requested_interval(self, duration):
        policy = SamplingPolicy.for_duration(duration, interval=3, max_frames=10)

        assert policy.duration_seconds == 0
        assert policy.effective_interval == 3


class TestSamplingPolicyValidation:
    """Tests for rejecting nonsensical configuration."""

    def test_rejects_zero_interval(self):
        with pytest.raises(ValueError, match="interval"):
            SamplingPolicy.for_duration(30, interval=0, max_frames=10)

    def test_rejects_zero_cap(self):
        with pytest.raises(ValueError, match="max_frames"):
            SamplingPolicy.for_duration(30, interval=3, max_frames=0)

    def test_rejects_narrowed_interval(self):
        with pytest.raises(ValueError, match="narrower"):
            SamplingPolicy(
                duration_seconds=30,
                requested_interval=3,
                max_frames=10,
                effective_interval=2,
            )
