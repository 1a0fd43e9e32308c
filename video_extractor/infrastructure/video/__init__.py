"""
Video processing infrastructure.

Handles server-side frame sampling using FFmpeg:
- Duration probing
- Frame extraction at a fixed rate
"""

from .processor import (
    FFmpegFrameSampler,
    MockFrameSampler,
    create_frame_sampler,
)

__all__ = [
    "FFmpegFrameSampler",
    "MockFrameSampler",
    "create_frame_sampler",
]
