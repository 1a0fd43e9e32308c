"""
Video frame extraction logic.

Contains the event handler, domain models, the sampling policy and the
per-event workspace.
"""

from .errors import (
    DownloadError,
    MissingDownloadUrlError,
    NoFramesError,
    ProcessingError,
    SamplingError,
    TransferError,
    UploadError,
    WorkspaceError,
)
from .handler import (
    ChatClient,
    FrameSampler,
    ProcessingOutcome,
    StatusMessage,
    VideoDownloader,
    VideoEventHandler,
    best_effort,
)
from .models import (
    FileDescriptor,
    FrameSet,
    SampledFrame,
    UploadEvent,
    format_timestamp,
    frame_sort_key,
    is_video_file,
)
from .sampling import SamplingPolicy
from .workspace import Workspace

__all__ = [
    "ChatClient",
    "DownloadError",
    "FileDescriptor",
    "FrameSampler",
    "FrameSet",
    "MissingDownloadUrlError",
    "NoFramesError",
    "ProcessingError",
    "ProcessingOutcome",
    "SampledFrame",
    "SamplingError",
    "SamplingPolicy",
    "StatusMessage",
    "TransferError",
    "UploadError",
    "UploadEvent",
    "VideoDownloader",
    "VideoEventHandler",
    "Workspace",
    "WorkspaceError",
    "best_effort",
    "format_timestamp",
    "frame_sort_key",
    "is_video_file",
]
