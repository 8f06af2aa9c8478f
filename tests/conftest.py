from __future__ import annotations

import os
import tempfile

# must happen before teamdex.config is imported anywhere
os.environ.setdefault("TEAMDEX_DATA_DIR", tempfile.mkdtemp(prefix="teamdex-test-"))
os.environ.setdefault("TEAMDEX_OFFLINE", "1")

import pytest

from teamdex.constants import TYPES
from teamdex.relations import chart_repository


@pytest.fixture
def repo():
    return chart_repository()


@pytest.fixture
def chart(repo):
    """Relations for all 18 types from the bundled chart."""
    return repo.snapshot(TYPES)
