"""
Common pytest fixtures.
"""
import io
from datetime import datetime, timezone

import pytest
from rich.console import Console

from toodoux.config import Config


@pytest.fixture
def now():
    """A fixed point in time tasks are rendered at."""
    return datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def config(tmp_path):
    """Default configuration rooted in a temporary directory."""
    return Config(root=tmp_path)


@pytest.fixture
def console():
    """Console writing uncolored text to a buffer; read it with ``console.file.getvalue()``."""
    return Console(file=io.StringIO(), width=200, color_system=None, highlight=False)
