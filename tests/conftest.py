"""
Pytest configuration and shared fixtures for mintlist tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_allowlist = importlib.import_module("fixtures.allowlist_fixtures")

make_records = _allowlist.make_records
make_csv_text = _allowlist.make_csv_text


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def three_records():
    """The three golden allocation records."""
    return make_records(3)


@pytest.fixture
def five_records():
    """The five golden allocation records."""
    return make_records(5)


@pytest.fixture
def dataset_csv(tmp_path):
    """A CSV file holding the three golden records."""
    path = tmp_path / "allowlist.csv"
    path.write_text(make_csv_text(), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep MINTLIST_* variables from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("MINTLIST_"):
            monkeypatch.delenv(key, raising=False)

