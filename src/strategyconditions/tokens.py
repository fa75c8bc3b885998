"""
Token types for strategy graph conditions.

A condition is an ordered sequence of tokens:
- Propositions (names supplied by the proposition source)
- The ``true`` sentinel meaning "always true"
- Logical operators (not, and, or, xor, implies, iff)
- Parentheses

Every token carries a fixed canonical display string.  Operator display
strings include their surrounding spaces so the concatenation of display
strings reads like ``p and q`` or ``not (p or q)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

# Canonical text of the always-true condition
TRUE_CONDITION = "true"


class TokenKind(str, Enum):
    """Tag of a condition token."""
    PROPOSITION = "proposition"
    TRUE = "true"
    OPERATOR = "operator"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"


class OperatorKind(str, Enum):
    """Logical connectives; the value is the operator keyword."""
    NOT = "not"
    AND = "and"
    OR = "or"
    XOR = "xor"
    IMPLIES = "implies"
    IFF = "iff"

    @property
    def is_binary(self) -> bool:
        return self is not OperatorKind.NOT


OPERATOR_DISPLAY: Dict[OperatorKind, str] = {
    OperatorKind.NOT: "not ",
    OperatorKind.AND: " and ",
    OperatorKind.OR: " or ",
    OperatorKind.XOR: " xor ",
    OperatorKind.IMPLIES: " implies ",
    OperatorKind.IFF: " iff ",
}

# Alternative single-character spellings accepted in pasted text
OPERATOR_SYMBOLS: Dict[str, OperatorKind] = {
    "¬": OperatorKind.NOT,
    "∧": OperatorKind.AND,
    "∨": OperatorKind.OR,
    "⊕": OperatorKind.XOR,
    "→": OperatorKind.IMPLIES,
    "↔": OperatorKind.IFF,
}

PAREN_CHARS = "()"


@dataclass(frozen=True)
class Token:
    """
    One atomic unit of a condition.

    Use the ``proposition``/``operator`` constructors or the module constants
    rather than building tokens by hand so that ``display`` stays canonical.
    """
    kind: TokenKind
    display: str
    operator: Optional[OperatorKind] = None

    @classmethod
    def proposition(cls, name: str) -> Token:
        if not name:
            raise ValueError("Proposition name cannot be empty")
        return cls(TokenKind.PROPOSITION, name)

    @classmethod
    def for_operator(cls, kind: OperatorKind) -> Token:
        return cls(TokenKind.OPERATOR, OPERATOR_DISPLAY[kind], kind)

    def __len__(self) -> int:
        return len(self.display)

    def __str__(self) -> str:
        return self.display


OPEN_PAREN = Token(TokenKind.OPEN_PAREN, "(")
CLOSE_PAREN = Token(TokenKind.CLOSE_PAREN, ")")
TRUE_TOKEN = Token(TokenKind.TRUE, TRUE_CONDITION)
