"""Shared fixtures."""

import pytest

from storage_deploy.config.models import DeploymentSettings
from tests.mock_storage import MockObjectStore


@pytest.fixture
def mock_store():
    return MockObjectStore()


@pytest.fixture
def make_settings():
    """Build settings with test-friendly defaults."""
    def _make(**overrides):
        values = {"current_version": "1.2.3", "chunk_size": 4, "retries": 3}
        values.update(overrides)
        return DeploymentSettings(**values)
    return _make


@pytest.fixture
def deploy_dir(tmp_path):
    """Reference tree of five files under two nested directories."""
    root = tmp_path / "dist"
    (root / "nested" / "nestednested").mkdir(parents=True)
    for relative in [
        "root_file",
        "nested/file",
        "nested/file_2",
        "nested/nestednested/file",
        "nested/nestednested/file_2",
    ]:
        (root / relative).write_text(relative)
    return root
