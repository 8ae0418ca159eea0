"""Pytest configuration for test discovery and shared fixtures.

This file ensures that `src/` is importable without an editable install.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src directory is in path for imports
repo_root = Path(__file__).parent.parent
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from aspace_client.auth import Credentials  # noqa: E402


@pytest.fixture
def credentials() -> Credentials:
    """Credentials for the mocked backend used throughout the suite."""
    return Credentials(
        api_url="http://aspace.test:8089", username="admin", password="admin", timeout=5.0
    )
