"""
Per-event temporary workspace.

Each event gets its own directory holding the downloaded video and a
frames/ subdirectory for FFmpeg output. Nothing is shared between events,
and the directory is removed when processing ends, whatever the outcome.
"""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .errors import WorkspaceError

logger = logging.getLogger(__name__)


class Workspace:
    """
    An exclusively-owned temporary directory for one video.

    Creating the object does no I/O; call acquire() to create the
    directory and cleanup() to remove it. cleanup() is safe to call
    more than once and never raises.
    """

    FRAMES_DIRNAME = "frames"
    VIDEO_BASENAME = "video"

    def __init__(self, parent: Optional[str] = None, prefix: str = "video-extractor-") -> None:
        self._parent = parent
        self._prefix = prefix
        self._root: Optional[Path] = None

    @property
    def root(self) -> Path:
        if self._root is None:
            raise WorkspaceError("Workspace has not been acquired")
        return self._root

    @property
    def frames_dir(self) -> Path:
        return self.root / self.FRAMES_DIRNAME

    def acquire(self) -> "Workspace":
        """Create the directory tree. Raises WorkspaceError on failure."""
        try:
            self._root = Path(tempfile.mkdtemp(prefix=self._prefix, dir=self._parent))
            (self._root / self.FRAMES_DIRNAME).mkdir()
        except OSError as e:
            logger.error(
                "Failed to create workspace",
                extra={"parent": self._parent, "error": str(e)}
            )
            self.cleanup()
            raise WorkspaceError(f"Could not create workspace: {e}") from e

        logger.debug("Created workspace", extra={"path": str(self._root)})
        return self

    def video_path(self, filename: str) -> Path:
        """
        Where to store the downloaded video.

        The download is always named video.<ext>; only a plain
        alphanumeric extension is taken from the Slack file name, so
        names like "frames" or ".." can't resolve to a directory.
        """
        suffix = Path(filename or "").suffix
        if not suffix[1:].isalnum():
            suffix = ""
        return self.root / f"{self.VIDEO_BASENAME}{suffix.lower()}"

    def cleanup(self) -> None:
        if self._root is None:
            return

        root, self._root = self._root, None
        try:
            shutil.rmtree(root)
            logger.info("Cleaned up workspace", extra={"path": str(root)})
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(
                "Workspace cleanup failed",
                extra={"path": str(root), "error": str(e)}
            )
