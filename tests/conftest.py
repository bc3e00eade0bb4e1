"""
Test configuration — ensures repo root is in sys.path + logging isolation.

The CLI reconfigures the root logger. Handlers it installs are removed after
every test so one test's stderr capture never leaks into the next.
"""

import json
import logging
import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import policygen.* and tests.fixtures
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tests.fixtures import make_surface, strict_entries  # noqa: E402


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def strict_surface():
    """Surface covering every ANKA module plus one extra module."""
    return make_surface(strict_entries(extra_modules=("std/extra",)))


@pytest.fixture
def write_surface(tmp_path):
    """Write a surface value into tmp_path; returns the path as a string."""

    def _write(value, name="surface.json"):
        path = tmp_path / name
        path.write_text(json.dumps(value), encoding="utf-8")
        return str(path)

    return _write
