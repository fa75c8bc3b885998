"""
Token catalog: the lexical vocabulary of conditions.

Maps single-character shortcut keys to operators, looks up proposition
names supplied by an external source, and splits pasted or stored text into
tokens.  All lookups are pure.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from . import package_logger
from .proposition_loader import load_propositions_file, normalize_propositions
from .tokens import (
    CLOSE_PAREN,
    OPEN_PAREN,
    OPERATOR_SYMBOLS,
    TRUE_CONDITION,
    TRUE_TOKEN,
    OperatorKind,
    Token,
)

logger = package_logger(__name__)

DEFAULT_SHORTCUTS: Dict[str, OperatorKind] = {
    "a": OperatorKind.AND,
    "o": OperatorKind.OR,
    "n": OperatorKind.NOT,
    "i": OperatorKind.IMPLIES,
    "x": OperatorKind.XOR,
    "e": OperatorKind.IFF,
}

_PARENS = {"(": OPEN_PAREN, ")": CLOSE_PAREN}


class CatalogError(Exception):
    """Raised when a shortcut table or proposition source is invalid."""
    pass


class TokenCatalog:
    """
    Lookup tables for shortcut keys, operator keywords and propositions.

    The proposition names are treated as a read-only set; the catalog keeps
    its own copy so later changes by the owner do not leak into an open
    editing session.
    """

    def __init__(
        self,
        propositions: Iterable[str] = (),
        shortcuts: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Args:
            propositions: Known proposition names, in display order
            shortcuts: Optional ``{key: operator keyword}`` table replacing
                       the default a/o/n/i/x/e shortcuts

        Raises:
            CatalogError: If the shortcut table is invalid
        """
        self._propositions: List[str] = normalize_propositions(propositions)
        self._proposition_set = frozenset(self._propositions)
        if shortcuts is None:
            self._shortcuts = dict(DEFAULT_SHORTCUTS)
        else:
            self._shortcuts = self._validate_shortcuts(shortcuts)

    @classmethod
    def from_file(cls, path: Path, shortcuts: Optional[Mapping[str, str]] = None) -> TokenCatalog:
        """Build a catalog from a propositions file (see proposition_loader)."""
        return cls(load_propositions_file(path), shortcuts)

    @classmethod
    def from_config(cls, config, propositions: Optional[Iterable[str]] = None) -> TokenCatalog:
        """
        Build a catalog from a Config.

        Args:
            config: Config providing ``shortcuts`` and ``propositions_path``
            propositions: Names to use instead of ``propositions_path``
        """
        shortcuts = config.get("shortcuts")
        if propositions is None:
            path = config.get("propositions_path")
            propositions = load_propositions_file(Path(path)) if path else []
        return cls(propositions, shortcuts)

    @staticmethod
    def _validate_shortcuts(shortcuts: Mapping[str, str]) -> Dict[str, OperatorKind]:
        if not isinstance(shortcuts, Mapping):
            raise CatalogError("Shortcut table must be a mapping of key to operator")

        table: Dict[str, OperatorKind] = {}
        for key, op_name in shortcuts.items():
            if not isinstance(key, str) or len(key) != 1:
                raise CatalogError(f"Shortcut key {key!r} must be a single character")
            if key in _PARENS or key.isspace():
                raise CatalogError(f"Shortcut key {key!r} is reserved")
            try:
                table[key] = OperatorKind(op_name)
            except ValueError:
                raise CatalogError(f"Shortcut '{key}' names unknown operator {op_name!r}")
        return table

    @property
    def propositions(self) -> List[str]:
        """Known proposition names in source order (sentinel excluded)."""
        return list(self._propositions)

    def operator_for_shortcut(self, key: str) -> Optional[Token]:
        """Return the operator token bound to a shortcut key, if any."""
        kind = self._shortcuts.get(key)
        if kind is None:
            return None
        return Token.for_operator(kind)

    def proposition_named(self, text: str) -> Optional[Token]:
        """Exact, case-sensitive proposition lookup; ``true`` is always known."""
        if text == TRUE_CONDITION:
            return TRUE_TOKEN
        if text in self._proposition_set:
            return Token.proposition(text)
        return None

    def paren_token(self, ch: str) -> Optional[Token]:
        return _PARENS.get(ch)

    def operator_named(self, word: str) -> Optional[Token]:
        """Look up an operator by keyword (``and``) or symbol (``∧``)."""
        kind = OPERATOR_SYMBOLS.get(word)
        if kind is None:
            try:
                kind = OperatorKind(word)
            except ValueError:
                return None
        return Token.for_operator(kind)

    def tokenize(self, text: str) -> Optional[List[Token]]:
        """
        Split text into tokens using the interactive lexical rules.

        Whitespace separates words; parentheses and operator symbols stand
        alone even when adjacent to other characters.  A word is resolved as
        a proposition, then the ``true`` sentinel, then an operator keyword,
        then a shortcut letter.

        Returns:
            The token list, or None if any word is unknown or the text holds
            no tokens at all
        """
        tokens: List[Token] = []
        word: List[str] = []

        def flush() -> bool:
            if not word:
                return True
            token = self._resolve_word("".join(word))
            word.clear()
            if token is None:
                return False
            tokens.append(token)
            return True

        for ch in text:
            if ch.isspace():
                if not flush():
                    return None
            elif ch in _PARENS or ch in OPERATOR_SYMBOLS:
                if not flush():
                    return None
                if ch in _PARENS:
                    tokens.append(_PARENS[ch])
                else:
                    tokens.append(self.operator_named(ch))
            else:
                word.append(ch)
        if not flush():
            return None

        return tokens or None

    def _resolve_word(self, word: str) -> Optional[Token]:
        token = self.proposition_named(word)
        if token is None:
            token = self.operator_named(word)
        if token is None and len(word) == 1:
            token = self.operator_for_shortcut(word)
        if token is None:
            logger.debug(f"Unknown word in condition text: {word!r}")
        return token
