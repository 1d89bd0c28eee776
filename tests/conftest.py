"""Pytest configuration for tests.

Sets up Python path and fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to Python path so imports work correctly
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tests.fixtures.fake_github import FakeGitHub, create_test_repository  # noqa: E402


@pytest.fixture
def fake_github():
    """Fake repository with two files on main."""
    return FakeGitHub(files={"README.md": "hello", "docs/guide.md": "guide"})


@pytest.fixture
def repo(fake_github):
    """RepositoryOperations bound to the fake repository."""
    return create_test_repository(fake_github)
