from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.script_tree import ScriptTreeBuilder


@pytest.fixture
def script_tree(tmp_path: Path) -> ScriptTreeBuilder:
    """Provide a reusable script tree builder rooted at the pytest tmp_path."""
    return ScriptTreeBuilder(tmp_path)
