"""
Fixtures shared by the unit tests.

Workspace factories hand the handler SpyWorkspace instances rooted in
tmp_path and keep a list of them, so tests can check cleanup per event.
"""

import pytest

from fakes import SpyWorkspace


@pytest.fixture
def workspaces() -> list[SpyWorkspace]:
    """Every workspace the handler creates during a test, in order."""
    return []


@pytest.fixture
def workspace_factory(tmp_path, workspaces):
    def _factory() -> SpyWorkspace:
        workspace = SpyWorkspace(parent=str(tmp_path))
        workspaces.append(workspace)
        return workspace
    return _factory


@pytest.fixture
def failing_workspace_factory(tmp_path, workspaces):
    def _factory() -> SpyWorkspace:
        workspace = SpyWorkspace(parent=str(tmp_path), fail_acquire=True)
        workspaces.append(workspace)
        return workspace
    return _factory
