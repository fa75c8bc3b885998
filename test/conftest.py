"""
Pytest configuration and shared fixtures for strategyconditions tests.

Path setup is handled by pyproject.toml [tool.pytest.ini_options] pythonpath.
"""

import pytest

from strategyconditions.condition import Condition
from strategyconditions.edit_buffer import SyncedEditBuffer
from strategyconditions.grammar import GrammarValidator
from strategyconditions.token_catalog import TokenCatalog


PROPOSITIONS = ["p", "q", "r", "gear_down"]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog():
    """Catalog with a few short propositions and one long one."""
    return TokenCatalog(PROPOSITIONS)


@pytest.fixture
def validator():
    return GrammarValidator()


@pytest.fixture
def make_condition(catalog):
    """Factory building a Condition from canonical text."""
    def _make(text: str) -> Condition:
        return Condition.from_text(text, catalog)
    return _make


@pytest.fixture
def make_buffer(make_condition):
    """Factory building a SyncedEditBuffer over condition text."""
    def _make(text: str) -> SyncedEditBuffer:
        return SyncedEditBuffer(make_condition(text))
    return _make


@pytest.fixture
def propositions_file(tmp_path):
    """Plain-text propositions file with the standard test names."""
    path = tmp_path / "propositions.txt"
    path.write_text("# test propositions\n" + "\n".join(PROPOSITIONS) + "\n", encoding="utf-8")
    return path
