"""
Domain models for video frame extraction.

These models represent what one file_shared event is about: the event
itself, the file it points to, and the frames we pull out of it. They
don't know about Slack's SDK, HTTP, or FFmpeg; just plain data and the
rules for interpreting it.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .sampling import SamplingPolicy


# Extensions we treat as video regardless of the reported MIME type
VIDEO_EXTENSIONS = frozenset({"mp4", "mov", "avi", "mkv", "webm", "m4v", "wmv", "flv"})


def is_video_file(name: str, mimetype: str = "") -> bool:
    """
    Decide whether a shared file is a video.

    Either signal is enough: a known extension (case-insensitive), or a
    MIME type under video/. Slack sometimes reports generic MIME types
    for recordings, so the extension check matters.
    """
    extension = Path(name or "").suffix.lower().lstrip(".")
    if extension in VIDEO_EXTENSIONS:
        return True
    return (mimetype or "").lower().startswith("video/")


def format_timestamp(seconds: float) -> str:
    """Format whole seconds as M:SS, e.g. 125 -> "2:05"."""
    total = int(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


_TRAILING_NUMBER = re.compile(r"(\d+)$")


def frame_sort_key(path: Path) -> tuple[int, int, str]:
    """
    Order frame files by their trailing number, not lexically.

    frame_999.jpg sorts before frame_1000.jpg. Names without a number
    come last, by name.
    """
    match = _TRAILING_NUMBER.search(path.stem)
    if match is None:
        return (1, 0, path.name)
    return (0, int(match.group(1)), path.name)


@dataclass(frozen=True)
class UploadEvent:
    """A file_shared notification: which file, shared where."""
    file_id: str
    channel_id: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "UploadEvent":
        """
        Build from a Slack file_shared event payload.

        The file id is at the top level; older payloads only carry
        it nested under "file".
        """
        file_id = payload.get("file_id") or (payload.get("file") or {}).get("id")
        channel_id = payload.get("channel_id")

        if not file_id:
            raise ValueError("file_shared event has no file id")
        if not channel_id:
            raise ValueError("file_shared event has no channel id")

        return cls(file_id=file_id, channel_id=channel_id)


@dataclass
class FileDescriptor:
    """
    Metadata about a shared file, as returned by files.info.

    shares maps "public"/"private" to {channel_id: [share, ...]} where
    each share has the ts of the message that shared the file.
    """
    id: str
    name: str = ""
    mimetype: str = ""
    url_private: Optional[str] = None
    url_private_download: Optional[str] = None
    shares: dict[str, dict[str, list[dict[str, Any]]]] = field(default_factory=dict)
    size: Optional[int] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "FileDescriptor":
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            mimetype=data.get("mimetype") or "",
            url_private=data.get("url_private"),
            url_private_download=data.get("url_private_download"),
            shares=data.get("shares") or {},
            size=data.get("size"),
        )

    @property
    def is_video(self) -> bool:
        return is_video_file(self.name, self.mimetype)

    @property
    def download_url(self) -> Optional[str]:
        """The authenticated download URL, falling back to the private URL."""
        return self.url_private_download or self.url_private

    def thread_ts(self, channel_id: str) -> Optional[str]:
        """
        Timestamp of the message that shared this file in `channel_id`.

        Replies and reactions are attached to this message. Returns None
        when the share can't be found (e.g. shares not populated yet).
        """
        for visibility in ("public", "private"):
            channel_shares = (self.shares.get(visibility) or {}).get(channel_id) or []
            for share in channel_shares:
                ts = share.get("ts")
                if ts:
                    return ts
        return None


@dataclass(frozen=True)
class SampledFrame:
    """
    One extracted image, ready to post.

    index is 1-based; offset_seconds is where in the video it was taken.
    """
    path: Path
    index: int
    total: int
    offset_seconds: int

    @property
    def filename(self) -> str:
        return f"frame_{self.index}_of_{self.total}.jpg"

    @property
    def caption(self) -> str:
        return f"🖼️ Frame {self.index}/{self.total} ({format_timestamp(self.offset_seconds)})"


@dataclass
class FrameSet:
    """The ordered frames extracted from one video."""
    frames: list[SampledFrame]

    @classmethod
    def from_paths(cls, paths: list[Path], policy: SamplingPolicy) -> "FrameSet":
        """
        Number frames 1..N in frame-number order.

        Offsets use the effective interval, i.e. the spacing FFmpeg
        actually sampled at, so captions match the video.
        """
        ordered = sorted(paths, key=frame_sort_key)
        total = len(ordered)
        frames = [
            SampledFrame(
                path=path,
                index=i,
                total=total,
                offset_seconds=(i - 1) * policy.effective_interval,
            )
            for i, path in enumerate(ordered, start=1)
        ]
        return cls(frames=frames)

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self):
        return iter(self.frames)

    @property
    def is_empty(self) -> bool:
        return not self.frames
