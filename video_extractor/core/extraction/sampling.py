"""
Sampling policy for frame extraction.

Given a video's duration, we extract one frame every `interval` seconds,
but never more than `max_frames`. For long videos the interval is widened
until the cap holds; it is never narrowed.

Pure functions only, so the policy can be tested without FFmpeg.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SamplingPolicy:
    """
    How frames are sampled from one video.

    requested_interval is what was configured; effective_interval is
    what FFmpeg is asked to use after widening for long videos.
    """
    duration_seconds: float
    requested_interval: int
    max_frames: int
    effective_interval: int

    def __post_init__(self) -> None:
        if self.requested_interval <= 0:
            raise ValueError("Frame interval must be positive")
        if self.max_frames <= 0:
            raise ValueError("max_frames must be positive")
        if self.effective_interval < self.requested_interval:
            raise ValueError("Effective interval cannot be narrower than the requested interval")

    @classmethod
    def for_duration(
        cls,
        duration_seconds: float | None,
        interval: int,
        max_frames: int,
    ) -> "SamplingPolicy":
        """
        Build the policy for a video of the given duration.

        Unknown or negative durations count as 0, which leaves the
        requested interval untouched.
        """
        if interval <= 0:
            raise ValueError("Frame interval must be positive")
        if max_frames <= 0:
            raise ValueError("max_frames must be positive")

        duration = duration_seconds if duration_seconds and duration_seconds > 0 else 0.0

        effective = interval
        if potential_frame_count(duration, interval) > max_frames:
            effective = max(interval, math.floor(duration / max_frames))
            # floor(D / M) can still leave one frame too many
            while potential_frame_count(duration, effective) > max_frames:
                effective += 1

        return cls(
            duration_seconds=duration,
            requested_interval=interval,
            max_frames=max_frames,
            effective_interval=effective,
        )

    @property
    def was_widened(self) -> bool:
        return self.effective_interval != self.requested_interval

    @property
    def fps(self) -> str:
        """Frame rate in FFmpeg's fps filter syntax, e.g. "1/3"."""
        return f"1/{self.effective_interval}"

    @property
    def expected_frames(self) -> int:
        """Upper bound on frames FFmpeg should produce for this policy."""
        return min(self.max_frames, potential_frame_count(self.duration_seconds, self.effective_interval))


def potential_frame_count(duration_seconds: float, interval: int) -> int:
    """Frames one-every-`interval` seconds would yield: floor(D / I)."""
    return math.floor(duration_seconds / interval)
