"""
Errors raised while processing a shared video.

Each error carries the text shown to the user when it ends processing.
The handler catches ProcessingError, writes user_message into the status
message and stops. Anything else is treated as unanticipated.
"""


class ProcessingError(Exception):
    """Base class for failures that end processing of one video."""

    user_message = "❌ Something went wrong while processing this video."

    def __init__(self, detail: str = "", user_message: str | None = None) -> None:
        super().__init__(detail or self.user_message)
        if user_message is not None:
            self.user_message = user_message


class WorkspaceError(ProcessingError):
    """Raised when the per-event temporary directory can't be created."""

    user_message = "❌ Could not prepare a workspace for this video."


class TransferError(ProcessingError):
    """Raised when a download, upload or Slack API call fails."""

    user_message = "❌ Could not reach Slack while processing this video."


class MissingDownloadUrlError(TransferError):
    """The file descriptor has no URL we can download from."""

    user_message = "❌ Could not download video. No download URL is available."


class DownloadError(TransferError):
    """Raised when streaming the video to disk fails."""

    user_message = "❌ Could not download video. Please try sharing it again."


class UploadError(TransferError):
    """Raised when posting an extracted frame fails."""

    user_message = "❌ Could not upload the extracted frames."


class SamplingError(ProcessingError):
    """Raised when ffprobe/ffmpeg fail or time out."""

    user_message = "❌ Could not extract frames from video."


class NoFramesError(SamplingError):
    """The decoder finished but produced no images."""
