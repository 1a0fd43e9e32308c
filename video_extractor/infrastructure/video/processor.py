"""
Frame sampling using FFmpeg.

This module wraps the two decoder calls the handler needs:
1. Probe the video duration (ffprobe)
2. Extract frames at a fixed rate into a directory (ffmpeg fps filter)

Why FFmpeg:
- Handles every container Slack users share (mp4, mov, mkv, webm, ...)
- The fps filter samples evenly without seeking per frame
- Available everywhere (including Docker)

Subprocesses run in a worker thread via asyncio.to_thread so the event
loop keeps serving other events while FFmpeg works.
"""

import asyncio
import json
import logging
import subprocess
from pathlib import Path
from typing import Optional

from video_extractor.config.settings import Settings
from video_extractor.core.extraction.errors import SamplingError
from video_extractor.core.extraction.handler import FrameSampler
from video_extractor.core.extraction.models import frame_sort_key
from video_extractor.core.extraction.sampling import SamplingPolicy

logger = logging.getLogger(__name__)

FRAME_PATTERN = "frame_%03d.jpg"


class FFmpegFrameSampler:
    """
    Frame sampler using FFmpeg/FFprobe binaries.

    Paths are checked lazily: a missing binary shows up as a
    SamplingError on the first video rather than at startup.
    """

    def __init__(
        self,
        ffmpeg_path: str = "ffmpeg",
        ffprobe_path: str = "ffprobe",
        quality: int = 2,  # 2-31, lower is better
        probe_timeout: float = 30.0,
        extraction_timeout: float = 300.0,
    ) -> None:
        self._ffmpeg = ffmpeg_path
        self._ffprobe = ffprobe_path
        self._quality = quality
        self._probe_timeout = probe_timeout
        self._extraction_timeout = extraction_timeout

    async def probe_duration(self, video_path: Path) -> float:
        """
        Read the container duration with ffprobe.

        Returns 0.0 when ffprobe reports no duration (some live
        recordings); the sampling policy copes with that.
        """
        cmd = [
            self._ffprobe,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            str(video_path),
        ]

        result = await self._run(cmd, timeout=self._probe_timeout, tool="ffprobe")

        try:
            info = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as e:
            raise SamplingError(f"Could not parse ffprobe output: {e}") from e

        duration = parse_duration(info.get("format", {}).get("duration"))
        logger.info("Probed video", extra={"path": str(video_path), "duration": duration})
        return duration

    async def extract_frames(
        self,
        video_path: Path,
        output_dir: Path,
        policy: SamplingPolicy,
    ) -> list[Path]:
        """
        Extract frames at 1/effective_interval fps, capped at max_frames.

        Frames are written as frame_001.jpg, frame_002.jpg, ... so
        lexical order is sampling order.
        """
        cmd = build_extract_command(
            self._ffmpeg,
            video_path,
            output_dir,
            policy,
            self._quality,
        )

        await self._run(cmd, timeout=self._extraction_timeout, tool="ffmpeg")

        frames = list_frames(output_dir)
        logger.info(
            "Extracted frames",
            extra={"count": len(frames), "fps": policy.fps, "max_frames": policy.max_frames}
        )
        return frames

    async def _run(self, cmd: list[str], timeout: float, tool: str) -> subprocess.CompletedProcess:
        try:
            result = await asyncio.to_thread(
                subprocess.run,
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise SamplingError(f"{tool} timed out after {timeout}s") from e
        except FileNotFoundError as e:
            raise SamplingError(
                f"{tool} not found. Install with: apt-get install ffmpeg"
            ) from e

        if result.returncode != 0:
            logger.error(
                "Decoder failed",
                extra={"tool": tool, "returncode": result.returncode, "stderr": (result.stderr or "")[-500:]}
            )
            raise SamplingError(f"{tool} failed with exit code {result.returncode}")

        return result


def parse_duration(value: object) -> float:
    """ffprobe reports duration as a string; missing or garbage means 0."""
    if value is None:
        return 0.0
    try:
        duration = float(value)
    except (TypeError, ValueError):
        return 0.0
    return duration if duration > 0 else 0.0


def build_extract_command(
    ffmpeg_path: str,
    video_path: Path,
    output_dir: Path,
    policy: SamplingPolicy,
    quality: int,
) -> list[str]:
    """Build the ffmpeg command line for one sampling policy."""
    return [
        ffmpeg_path,
        "-i", str(video_path),
        "-vf", f"fps={policy.fps}",
        "-q:v", str(quality),
        "-frames:v", str(policy.max_frames),
        "-y",  # Overwrite without asking
        str(output_dir / FRAME_PATTERN),
    ]


def list_frames(output_dir: Path) -> list[Path]:
    """Extracted frames in sampling order."""
    return sorted(
        (p for p in output_dir.iterdir() if p.suffix.lower() == ".jpg"),
        key=frame_sort_key,
    )


# ---------------------------------------------------------------------------
# Mock Sampler for Local Development
# ---------------------------------------------------------------------------

# A valid 1x1 JPEG, enough for Slack to accept the upload
PLACEHOLDER_JPEG = bytes.fromhex(
    "ffd8ffe000104a46494600010100000100010000ffdb004300080606070605080707070909080a0c"
    "140d0c0b0b0c1912130f141d1a1f1e1d1a1c1c20242e2720222c231c1c2837292c30313434341f27"
    "393d38323c2e333432ffc0000b080001000101011100ffc4001f0000010501010101010100000000"
    "000000000102030405060708090a0bffc400b5100002010303020403050504040000017d01020300"
    "041105122131410613516107227114328191a1082342b1c11552d1f02433627282090a161718191a"
    "25262728292a3435363738393a434445464748494a535455565758595a636465666768696a737475"
    "767778797a838485868788898a92939495969798999aa2a3a4a5a6a7a8a9aab2b3b4b5b6b7b8b9ba"
    "c2c3c4c5c6c7c8c9cad2d3d4d5d6d7d8d9dae1e2e3e4e5e6e7e8e9eaf1f2f3f4f5f6f7f8f9faffda"
    "0008010100003f00fbd328a0028a2803ffd9"
)


class MockFrameSampler:
    """
    Frame sampler for local development and tests, no FFmpeg needed.

    Pretends every video is `duration_seconds` long and writes one
    placeholder JPEG per sampling point.
    """

    def __init__(self, duration_seconds: float = 30.0) -> None:
        self.duration_seconds = duration_seconds
        logger.info("Initialized mock frame sampler", extra={"duration": duration_seconds})

    async def probe_duration(self, video_path: Path) -> float:
        return self.duration_seconds

    async def extract_frames(
        self,
        video_path: Path,
        output_dir: Path,
        policy: SamplingPolicy,
    ) -> list[Path]:
        # fps filter emits a frame at t=0, then one per interval
        count = min(policy.max_frames, int(policy.duration_seconds // policy.effective_interval) + 1)
        if policy.duration_seconds <= 0:
            count = 0

        for i in range(1, count + 1):
            (output_dir / f"frame_{i:03d}.jpg").write_bytes(PLACEHOLDER_JPEG)

        return list_frames(output_dir)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_frame_sampler(settings: Optional[Settings] = None, mock_mode: bool = False) -> FrameSampler:
    """
    Factory function for the frame sampler.

    Args:
        settings: Supplies binary paths, quality and timeouts
        mock_mode: If True, return mock sampler (no FFmpeg required)
    """
    if mock_mode or (settings is not None and settings.video_mock_mode):
        return MockFrameSampler()

    if settings is None:
        return FFmpegFrameSampler()

    return FFmpegFrameSampler(
        ffmpeg_path=settings.ffmpeg_path,
        ffprobe_path=settings.ffprobe_path,
        quality=settings.frame_quality,
        probe_timeout=settings.probe_timeout_seconds,
        extraction_timeout=settings.extraction_timeout_seconds,
    )
