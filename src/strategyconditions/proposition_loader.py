"""
Proposition file loading.

Handles:
- JSON array of names: ``["p", "q"]``
- Wrapped JSON: ``{ "propositions": [...] }``
- Plain text with one name per line (``#`` comments allowed)

The proposition set is owned by the caller; this module only reads it.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Iterable, List

from . import package_logger
from .tokens import OPERATOR_SYMBOLS, PAREN_CHARS, TRUE_CONDITION, OperatorKind

logger = package_logger(__name__)

# Characters that would split a name when condition text is tokenized
_FORBIDDEN = re.compile(r"[\s" + re.escape(PAREN_CHARS + "".join(OPERATOR_SYMBOLS)) + r"]")

# Canonical operator text; a proposition with one of these names would
# re-read as the operator
_KEYWORDS = frozenset(kind.value for kind in OperatorKind)


class PropositionLoadError(Exception):
    """Raised when propositions cannot be loaded."""
    pass


def load_propositions_file(path: Path) -> List[str]:
    """
    Load proposition names from a file.

    Files ending in ``.json`` are parsed as JSON, anything else as plain text.

    Args:
        path: Path to the propositions file

    Returns:
        Ordered list of unique proposition names

    Raises:
        PropositionLoadError: If the file is missing, unreadable or malformed
    """
    path = Path(path)
    if not path.exists():
        raise PropositionLoadError(f"Propositions file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PropositionLoadError(f"Failed to read propositions file: {e}")

    if path.suffix.lower() == ".json":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PropositionLoadError(f"Invalid JSON in propositions file: {e}")
        names = _parse_propositions_data(data)
    else:
        names = [
            line.strip()
            for line in raw.splitlines()
            if line.strip() and not line.strip().startswith("#")
        ]

    propositions = normalize_propositions(names)
    logger.info(f"Loaded {len(propositions)} propositions from {path}")
    return propositions


def _parse_propositions_data(data: Any) -> List[str]:
    """Extract the name list from parsed JSON data."""
    if isinstance(data, dict) and "propositions" in data:
        data = data["propositions"]
        if not isinstance(data, list):
            raise PropositionLoadError("Wrapped format: 'propositions' must be a list")

    if not isinstance(data, list):
        raise PropositionLoadError(
            "Invalid propositions file format. Expected array of names or "
            "wrapped format: { \"propositions\": [...] }"
        )

    for i, name in enumerate(data):
        if not isinstance(name, str):
            raise PropositionLoadError(f"Proposition at index {i}: must be a string")
    return data


def normalize_propositions(names: Iterable[str]) -> List[str]:
    """
    Validate proposition names and drop duplicates, keeping first occurrence.

    The ``true`` sentinel is silently skipped since it is always known.

    Raises:
        PropositionLoadError: If a name is empty, contains a separator or is
            an operator keyword
    """
    seen = set()
    result = []
    for name in names:
        if not name:
            raise PropositionLoadError("Proposition name cannot be empty")
        if _FORBIDDEN.search(name):
            raise PropositionLoadError(
                f"Proposition '{name}' contains whitespace, a parenthesis or an operator symbol"
            )
        if name in _KEYWORDS:
            raise PropositionLoadError(f"Proposition '{name}' is an operator keyword")
        if name == TRUE_CONDITION or name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result
