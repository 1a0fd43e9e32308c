"""
Unit tests for the per-event workspace.
"""

import pytest

from video_extractor.core.extraction.errors import WorkspaceError
from video_extractor.core.extraction.workspace import Workspace


class TestWorkspace:
    """Tests for creating and removing the temp directory."""

    def test_acquire_creates_root_and_frames_dir(self, tmp_path):
        workspace = Workspace(parent=str(tmp_path)).acquire()

        assert workspace.root.is_dir()
        assert workspace.root.parent == tmp_path
        assert workspace.frames_dir.is_dir()

        workspace.cleanup()

    def test_each_workspace_is_unique(self, tmp_path):
        first = Workspace(parent=str(tmp_path)).acquire()
        second = Workspace(parent=str(tmp_path)).acquire()

        assert first.root != second.root

        first.cleanup()
        second.cleanup()

    def test_cleanup_removes_everything(self, tmp_path):
        workspace = Workspace(parent=str(tmp_path)).acquire()
        root = workspace.root
        workspace.video_path("clip.mp4").write_bytes(b"video")
        (workspace.frames_dir / "frame_001.jpg").write_bytes(b"jpg")

        workspace.cleanup()

        assert not root.exists()

    def test_cleanup_is_idempotent(self, tmp_path):
        workspace = Workspace(parent=str(tmp_path)).acquire()

        workspace.cleanup()
        workspace.cleanup()

    def test_cleanup_before_acquire_is_a_no_op(self):
        Workspace().cleanup()

    def test_cleanup_tolerates_already_deleted_directory(self, tmp_path):
        workspace = Workspace(parent=str(tmp_path)).acquire()
        workspace.frames_dir.rmdir()
        workspace.root.rmdir()

        workspace.cleanup()

    def test_acquire_failure_raises_workspace_error(self, tmp_path):
        missing_parent = tmp_path / "does-not-exist"

        with pytest.raises(WorkspaceError):
            Workspace(parent=str(missing_parent)).acquire()

    def test_root_requires_acquire(self):
        with pytest.raises(WorkspaceError, match="not been acquired"):
            Workspace().root

    def test_video_path_keeps_extension_only(self, tmp_path):
        workspace = Workspace(parent=str(tmp_path)).acquire()

        path = workspace.video_path("Team Standup.MOV")

        assert path == workspace.root / "video.mov"

        workspace.cleanup()

    def test_video_path_strips_directories(self, tmp_path):
        """A crafted file name can't escape the workspace."""
        workspace = Workspace(parent=str(tmp_path)).acquire()

        path = workspace.video_path("../../etc/passwd.mp4")

        assert path == workspace.root / "video.mp4"

        workspace.cleanup()

    @pytest.mark.parametrize("filename", ["", "frames", "..", ".", ".mp4", "clip.m p4", "clip."])
    def test_video_path_never_collides_with_a_directory(self, tmp_path, filename):
        """Names matching the layout still give a writable file path."""
        workspace = Workspace(parent=str(tmp_path)).acquire()

        path = workspace.video_path(filename)

        assert path == workspace.root / "video"
        path.write_bytes(b"video")
        assert workspace.frames_dir.is_dir()

        workspace.cleanup()
