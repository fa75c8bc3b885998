"""
Condition grammar and validator.

    Condition  := Iff
    Iff        := Implies ( 'iff' Implies )*
    Implies    := Or ( 'implies' Or )*
    Or         := Xor ( 'or' Xor )*
    Xor        := And ( 'xor' And )*
    And        := Unary ( 'and' Unary )*
    Unary      := 'not' Unary | Primary
    Primary    := Proposition | 'true' | '(' Condition ')'

Binary levels are left-associative.  Their order is a table
(`DEFAULT_PRECEDENCE`, loosest first) so a host can rearrange it without
touching the parser.  The parser keeps operators and open parentheses on
an explicit stack, so deeply nested input cannot exhaust the call stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from . import package_logger
from .condition import Condition
from .tokens import TRUE_CONDITION, OperatorKind, Token, TokenKind

logger = package_logger(__name__)

# User-facing message when a condition is rejected at commit time
CONDITION_NOT_VALID = "The Condition is not valid."

DEFAULT_PRECEDENCE = (
    OperatorKind.IFF,
    OperatorKind.IMPLIES,
    OperatorKind.OR,
    OperatorKind.XOR,
    OperatorKind.AND,
)


class ConditionNotValidError(Exception):
    """Raised by GrammarValidator.check for a malformed condition."""

    def __init__(self, message: str = CONDITION_NOT_VALID) -> None:
        super().__init__(message)


class _GrammarMismatch(Exception):
    """Internal: token sequence does not match the grammar."""
    pass


@dataclass(frozen=True)
class PropositionNode:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TrueNode:
    def __str__(self) -> str:
        return TRUE_CONDITION


@dataclass(frozen=True)
class UnaryNode:
    operator: OperatorKind
    operand: "Node"

    def __str__(self) -> str:
        return f"{self.operator.value} {self.operand}"


@dataclass(frozen=True)
class BinaryNode:
    operator: OperatorKind
    left: "Node"
    right: "Node"

    def __str__(self) -> str:
        return f"({self.left} {self.operator.value} {self.right})"


Node = Union[PropositionNode, TrueNode, UnaryNode, BinaryNode]


class GrammarValidator:
    """
    Accepts or rejects a finished condition.

    ``parse`` never raises for malformed input; a rejected condition is
    ordinary user input.  The parse tree is available via ``parse_tree`` for
    callers that want it, and is not kept anywhere.
    """

    def __init__(self, precedence: Sequence[Union[OperatorKind, str]] = DEFAULT_PRECEDENCE) -> None:
        """
        Args:
            precedence: The five binary operators, loosest binding first

        Raises:
            ValueError: If precedence is not a permutation of the binary operators
        """
        levels = tuple(OperatorKind(op) for op in precedence)
        binary = {op for op in OperatorKind if op.is_binary}
        if len(levels) != len(binary) or set(levels) != binary:
            raise ValueError(
                f"Precedence must list each binary operator once, got {[op.value for op in levels]}"
            )
        self.precedence = levels

    @classmethod
    def from_config(cls, config) -> GrammarValidator:
        return cls(config.get("operator_precedence"))

    def parse(self, condition: Condition) -> bool:
        """Return True iff the whole token sequence is one well-formed condition."""
        return self.parse_tree(condition) is not None

    def parse_tree(self, condition: Condition) -> Optional[Node]:
        """Return the parse tree, or None if the condition is malformed."""
        parser = _Parser(condition.tokens, self.precedence)
        try:
            return parser.parse()
        except _GrammarMismatch as e:
            logger.debug(f"Condition {condition.display_text()!r} rejected: {e}")
            return None

    def check(self, condition: Condition) -> Node:
        """
        Like parse_tree, but raises on failure.

        Raises:
            ConditionNotValidError: If the condition is malformed
        """
        tree = self.parse_tree(condition)
        if tree is None:
            raise ConditionNotValidError()
        return tree


# Marker for an open parenthesis on the operator stack
_OPEN = None


class _Parser:
    """
    Single-use operator-precedence parser over a token list.

    Operators and open parentheses wait on an explicit stack, so nesting
    depth is bounded by memory rather than the interpreter's call stack.
    ``not`` is a prefix operator binding tighter than every binary level.
    """

    def __init__(self, tokens: List[Token], precedence: Sequence[OperatorKind]) -> None:
        self.tokens = tokens
        self.rank = {kind: level for level, kind in enumerate(precedence, start=1)}
        self.rank[OperatorKind.NOT] = len(precedence) + 1
        self.operands: List[Node] = []
        self.operators: List[Optional[OperatorKind]] = []

    def parse(self) -> Node:
        if not self.tokens:
            raise _GrammarMismatch("empty condition")

        expect_operand = True
        for pos, token in enumerate(self.tokens):
            if expect_operand:
                expect_operand = self._operand_position(token, pos)
            else:
                expect_operand = self._operator_position(token, pos)

        if expect_operand:
            raise _GrammarMismatch("missing operand at end of condition")
        while self.operators:
            if self.operators[-1] is _OPEN:
                raise _GrammarMismatch("unclosed '('")
            self._reduce()
        return self.operands[0]

    def _operand_position(self, token: Token, pos: int) -> bool:
        """Handle a token where an operand must start; returns expect_operand."""
        if token.kind is TokenKind.PROPOSITION:
            self.operands.append(PropositionNode(token.display))
            return False
        if token.kind is TokenKind.TRUE:
            self.operands.append(TrueNode())
            return False
        if token.kind is TokenKind.OPEN_PAREN:
            self.operators.append(_OPEN)
            return True
        if token.operator is OperatorKind.NOT:
            self.operators.append(OperatorKind.NOT)
            return True
        raise _GrammarMismatch(f"expected operand, got {token.display.strip()!r} at token {pos}")

    def _operator_position(self, token: Token, pos: int) -> bool:
        """Handle a token following a complete operand; returns expect_operand."""
        if token.kind is TokenKind.CLOSE_PAREN:
            while self.operators and self.operators[-1] is not _OPEN:
                self._reduce()
            if not self.operators:
                raise _GrammarMismatch(f"unmatched ')' at token {pos}")
            self.operators.pop()
            return False
        if token.kind is TokenKind.OPERATOR and token.operator.is_binary:
            rank = self.rank[token.operator]
            # Equal rank reduces first: binary levels are left-associative.
            while self.operators and self.operators[-1] is not _OPEN \
                    and self.rank[self.operators[-1]] >= rank:
                self._reduce()
            self.operators.append(token.operator)
            return True
        raise _GrammarMismatch(f"unexpected {token.display.strip()!r} at token {pos}")

    def _reduce(self) -> None:
        kind = self.operators.pop()
        operand = self.operands.pop()
        if kind is OperatorKind.NOT:
            self.operands.append(UnaryNode(kind, operand))
        else:
            self.operands.append(BinaryNode(kind, self.operands.pop(), operand))
