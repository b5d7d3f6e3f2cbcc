from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.save_builder import SaveBuilder


@pytest.fixture
def save_builder(tmp_path: Path) -> SaveBuilder:
    """Provide a reusable save builder rooted at the pytest tmp_path."""
    return SaveBuilder(tmp_path)
