"""
Video event handling: the orchestration for one shared file.

This module contains the whole lifecycle of a file_shared event:
resolve the file, decide whether it's a video, download it, sample
frames, post them back into the thread, and clean up. It's
framework-agnostic: Slack, HTTP and FFmpeg are reached through the
protocols below, so tests can drive it with in-memory fakes.

Each call to handle() owns its own workspace and status message.
Handlers share no mutable state, so events can be processed
concurrently without locks.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional, Protocol

from .errors import (
    MissingDownloadUrlError,
    NoFramesError,
    ProcessingError,
    UploadError,
)
from .models import FileDescriptor, FrameSet, SampledFrame, UploadEvent, frame_sort_key
from .sampling import SamplingPolicy
from .workspace import Workspace

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class ChatClient(Protocol):
    """
    The slice of the chat platform API we use.

    Methods raise TransferError on API failures, except get_file_info
    which returns None when the file can't be resolved.
    """

    async def get_file_info(self, file_id: str) -> Optional[FileDescriptor]:
        ...

    async def post_message(self, channel_id: str, text: str, thread_ts: Optional[str] = None) -> str:
        """Post a message and return its ts."""
        ...

    async def update_message(self, channel_id: str, ts: str, text: str) -> None:
        ...

    async def add_reaction(self, channel_id: str, ts: str, name: str) -> None:
        ...

    async def remove_reaction(self, channel_id: str, ts: str, name: str) -> None:
        ...

    async def upload_file(
        self,
        channel_id: str,
        path: Path,
        filename: str,
        comment: str,
        thread_ts: Optional[str] = None,
    ) -> None:
        ...


class VideoDownloader(Protocol):
    """Streams a remote video to a local path. Raises DownloadError."""

    async def download(self, url: str, destination: Path) -> Path:
        ...


class FrameSampler(Protocol):
    """
    Interface to the external decoder.

    Both methods raise SamplingError on decoder failure or timeout.
    """

    async def probe_duration(self, video_path: Path) -> float:
        """Duration in seconds, 0.0 if the container doesn't say."""
        ...

    async def extract_frames(
        self,
        video_path: Path,
        output_dir: Path,
        policy: SamplingPolicy,
    ) -> list[Path]:
        """Write frames into output_dir and return their paths."""
        ...


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

PROCESSING_REACTION = "hourglass_flowing_sand"
COMPLETE_REACTION = "white_check_mark"

STATUS_STARTED = '📹 Processing video "{name}"... extracting key frames for analysis.'
STATUS_EXTRACTED = '📹 Extracted {count} key frames from "{name}". Uploading...'
STATUS_COMPLETE = '✅ Extracted {count} key frames from "{name}". They are ready for analysis!'


class ProcessingOutcome(Enum):
    """How handling one event ended."""
    IGNORED = "ignored"      # Not a video, or the file couldn't be resolved
    COMPLETED = "completed"  # All frames posted
    FAILED = "failed"        # Stopped with an error status message


async def best_effort(action: Awaitable[object], description: str) -> None:
    """
    Await a non-fatal side effect, logging and discarding any failure.

    Used for reactions: "already_reacted" or "no_reaction" errors must
    never interrupt processing.
    """
    try:
        await action
    except Exception as e:
        logger.info(
            "Best-effort action failed",
            extra={"action": description, "error": str(e)}
        )


class StatusMessage:
    """
    The single progress message for one event, edited in place.

    Once finish() or fail() has run the message is terminal and further
    updates are ignored.
    """

    def __init__(self, chat: ChatClient, channel_id: str, thread_ts: Optional[str]) -> None:
        self._chat = chat
        self._channel_id = channel_id
        self._thread_ts = thread_ts
        self.ts: Optional[str] = None
        self.text: str = ""
        self.terminal = False

    async def post(self, text: str) -> None:
        self.ts = await self._chat.post_message(self._channel_id, text, thread_ts=self._thread_ts)
        self.text = text

    async def update(self, text: str) -> None:
        if self.terminal:
            return
        if self.ts is None:
            await self.post(text)
            return
        await self._chat.update_message(self._channel_id, self.ts, text)
        self.text = text

    async def finish(self, text: str) -> None:
        await self.update(text)
        self.terminal = True

    async def fail(self, text: str) -> None:
        """Show a terminal error. Never raises; a failure here is only logged."""
        if self.terminal:
            return
        try:
            await self.update(text)
        except Exception:
            logger.exception(
                "Failed to update status message with error",
                extra={"channel_id": self._channel_id, "ts": self.ts}
            )
        self.terminal = True


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------

class VideoEventHandler:
    """
    Processes file_shared events end to end.

    Stateless between events: every dependency is injected once at
    startup and each call to handle() creates its own workspace and
    status message.
    """

    def __init__(
        self,
        chat: ChatClient,
        downloader: VideoDownloader,
        sampler: FrameSampler,
        frame_interval: int = 3,
        max_frames: int = 10,
        upload_delay_seconds: float = 0.5,
        workspace_factory: Callable[[], Workspace] = Workspace,
    ) -> None:
        if frame_interval <= 0:
            raise ValueError("frame_interval must be positive")
        if max_frames <= 0:
            raise ValueError("max_frames must be positive")

        self._chat = chat
        self._downloader = downloader
        self._sampler = sampler
        self._frame_interval = frame_interval
        self._max_frames = max_frames
        self._upload_delay = upload_delay_seconds
        self._workspace_factory = workspace_factory

    async def handle(self, event: UploadEvent) -> ProcessingOutcome:
        """
        Process one event. Never raises.

        Errors are contained here so one bad file can't take down the
        Socket Mode connection or affect other events.
        """
        try:
            return await self._process(event)
        except Exception:
            logger.exception(
                "Unhandled error processing file",
                extra={"file_id": event.file_id, "channel_id": event.channel_id}
            )
            return ProcessingOutcome.FAILED

    async def _process(self, event: UploadEvent) -> ProcessingOutcome:
        logger.info(
            "File shared",
            extra={"file_id": event.file_id, "channel_id": event.channel_id}
        )

        file = await self._resolve(event)
        if file is None:
            return ProcessingOutcome.IGNORED

        thread_ts = file.thread_ts(event.channel_id)

        logger.info(
            "Processing video",
            extra={"file_id": file.id, "file_name": file.name, "size_bytes": file.size}
        )

        if thread_ts:
            await best_effort(
                self._chat.add_reaction(event.channel_id, thread_ts, PROCESSING_REACTION),
                "add processing reaction",
            )

        status = StatusMessage(self._chat, event.channel_id, thread_ts)
        await status.post(STATUS_STARTED.format(name=file.name))

        workspace = self._workspace_factory()
        try:
            frame_count = await self._extract_and_post(event, file, thread_ts, workspace, status)
        except ProcessingError as e:
            logger.warning(
                "Video processing failed",
                extra={
                    "file_id": file.id,
                    "error_type": type(e).__name__,
                    "error": str(e),
                }
            )
            await status.fail(e.user_message)
            return ProcessingOutcome.FAILED
        except Exception:
            logger.exception("Unexpected error processing video", extra={"file_id": file.id})
            await status.fail(ProcessingError.user_message)
            return ProcessingOutcome.FAILED
        finally:
            workspace.cleanup()

        if thread_ts:
            await best_effort(
                self._chat.remove_reaction(event.channel_id, thread_ts, PROCESSING_REACTION),
                "remove processing reaction",
            )
            await best_effort(
                self._chat.add_reaction(event.channel_id, thread_ts, COMPLETE_REACTION),
                "add complete reaction",
            )

        logger.info("Video complete", extra={"file_id": file.id, "frames_uploaded": frame_count})
        return ProcessingOutcome.COMPLETED

    async def _resolve(self, event: UploadEvent) -> Optional[FileDescriptor]:
        """
        Look up the file and keep it only if it's a video.

        Failures here are silent to the user: we don't know yet that
        the file was meant for us.
        """
        try:
            file = await self._chat.get_file_info(event.file_id)
        except ProcessingError as e:
            logger.warning(
                "Could not get file info",
                extra={"file_id": event.file_id, "error": str(e)}
            )
            return None

        if file is None:
            logger.info("Could not get file info", extra={"file_id": event.file_id})
            return None

        if not file.is_video:
            logger.info(
                "Not a video file",
                extra={"file_id": file.id, "file_name": file.name, "mimetype": file.mimetype}
            )
            return None

        return file

    async def _extract_and_post(
        self,
        event: UploadEvent,
        file: FileDescriptor,
        thread_ts: Optional[str],
        workspace: Workspace,
        status: StatusMessage,
    ) -> int:
        """Steps from workspace creation through the final status update."""
        workspace.acquire()

        url = file.download_url
        if not url:
            raise MissingDownloadUrlError(f"File {file.id} has no download URL")

        video_path = workspace.video_path(file.name)
        logger.info("Downloading video", extra={"file_id": file.id, "path": str(video_path)})
        await self._downloader.download(url, video_path)

        frames = await self._sample(video_path, workspace.frames_dir)
        if frames.is_empty:
            raise NoFramesError(f"No frames extracted from {file.name}")

        logger.info("Extracted frames, uploading", extra={"file_id": file.id, "count": len(frames)})
        await status.update(STATUS_EXTRACTED.format(count=len(frames), name=file.name))

        await self._upload_frames(event.channel_id, thread_ts, frames)

        await status.finish(STATUS_COMPLETE.format(count=len(frames), name=file.name))
        return len(frames)

    async def _sample(self, video_path: Path, frames_dir: Path) -> FrameSet:
        duration = await self._sampler.probe_duration(video_path)
        policy = SamplingPolicy.for_duration(duration, self._frame_interval, self._max_frames)

        logger.info(
            "Sampling video",
            extra={
                "duration": policy.duration_seconds,
                "requested_interval": policy.requested_interval,
                "effective_interval": policy.effective_interval,
                "interval_widened": policy.was_widened,
                "expected_frames": policy.expected_frames,
            }
        )

        paths = await self._sampler.extract_frames(video_path, frames_dir, policy)
        if len(paths) > policy.max_frames:
            # the sampler ignored its -frames:v cap
            logger.warning(
                "Sampler returned more frames than allowed",
                extra={"returned": len(paths), "max_frames": policy.max_frames}
            )
            paths = sorted(paths, key=frame_sort_key)[:policy.max_frames]
        return FrameSet.from_paths(paths, policy)

    async def _upload_frames(
        self,
        channel_id: str,
        thread_ts: Optional[str],
        frames: FrameSet,
    ) -> None:
        """Post frames one at a time, in order, pausing between uploads."""
        for frame in frames:
            if frame.index > 1 and self._upload_delay > 0:
                await asyncio.sleep(self._upload_delay)
            await self._upload_frame(channel_id, thread_ts, frame)

    async def _upload_frame(
        self,
        channel_id: str,
        thread_ts: Optional[str],
        frame: SampledFrame,
    ) -> None:
        try:
            await self._chat.upload_file(
                channel_id,
                frame.path,
                filename=frame.filename,
                comment=frame.caption,
                thread_ts=thread_ts,
            )
        except UploadError:
            raise
        except ProcessingError as e:
            raise UploadError(f"Upload of frame {frame.index}/{frame.total} failed: {e}") from e
