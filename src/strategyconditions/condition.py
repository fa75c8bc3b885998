"""
Condition model: an ordered token sequence plus text position mapping.

The display text of a condition is always the concatenation of its tokens'
display strings.  Text offsets that fall between two tokens (or at either
end) are *boundaries*; they are the only places a caret may rest and the
only offsets accepted by the mutation methods.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from enum import Enum
from itertools import accumulate
from typing import Iterator, List, Optional

from . import package_logger
from .token_catalog import TokenCatalog
from .tokens import Token

logger = package_logger(__name__)


class OffsetError(ValueError):
    """Raised when a text offset is not a token boundary."""
    pass


class ConditionTextError(ValueError):
    """Raised when stored condition text cannot be split into tokens."""
    pass


class Direction(str, Enum):
    """Which neighbour of the caret a single deletion removes."""
    FORWARD = "forward"    # Delete key
    BACKWARD = "backward"  # Backspace key


class EditError(str, Enum):
    """Why an insertion was rejected."""
    INVALID_SHORTCUT = "invalid_shortcut"
    INVALID_PASTE = "invalid_paste"
    UNKNOWN_PROPOSITION = "unknown_proposition"


@dataclass
class InsertResult:
    """Outcome of Condition.insert_at."""
    text: str = ""
    error: Optional[EditError] = None
    tokens: List[Token] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.error is None


class Condition:
    """
    Ordered sequence of condition tokens.

    Identity of a token is its position; inserting or removing a token
    shifts every later index.
    """

    def __init__(self, catalog: TokenCatalog, tokens: Optional[List[Token]] = None) -> None:
        self.catalog = catalog
        self._tokens: List[Token] = list(tokens or [])

    @classmethod
    def from_text(cls, text: str, catalog: TokenCatalog) -> Condition:
        """
        Rebuild a condition from its stored canonical text.

        Args:
            text: Stored condition text; empty or blank text gives an empty condition
            catalog: Catalog used to recognise words

        Raises:
            ConditionTextError: If the text contains unknown words
        """
        if not text.strip():
            return cls(catalog)
        tokens = catalog.tokenize(text)
        if tokens is None:
            raise ConditionTextError(f"Condition text cannot be tokenized: {text!r}")
        return cls(catalog, tokens)

    @property
    def tokens(self) -> List[Token]:
        return list(self._tokens)

    def copy(self) -> Condition:
        return Condition(self.catalog, self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return self._tokens == other._tokens

    def __str__(self) -> str:
        return self.display_text()

    def __repr__(self) -> str:
        return f"Condition({self.display_text()!r})"

    # ------------------------------------------------------------------
    # Position mapping
    # ------------------------------------------------------------------

    def display_text(self) -> str:
        return "".join(token.display for token in self._tokens)

    def total_length(self) -> int:
        return sum(len(token) for token in self._tokens)

    def boundaries(self) -> List[int]:
        """Boundary offsets: the start of every token, then the total length."""
        return [0] + list(accumulate(len(token) for token in self._tokens))

    def is_boundary(self, offset: int) -> bool:
        bounds = self.boundaries()
        i = bisect_left(bounds, offset)
        return i < len(bounds) and bounds[i] == offset

    def index_at_text_offset(self, offset: int) -> int:
        """
        Map a boundary offset to the index of the token starting there.

        The final boundary maps to ``len(tokens)``.

        Raises:
            OffsetError: If offset is not a boundary; snap it first
        """
        bounds = self.boundaries()
        i = bisect_left(bounds, offset)
        if i == len(bounds) or bounds[i] != offset:
            raise OffsetError(f"Offset {offset} is not a token boundary of {self.display_text()!r}")
        return i

    def text_offset_at_index(self, index: int) -> int:
        """Inverse of index_at_text_offset."""
        if not 0 <= index <= len(self._tokens):
            raise IndexError(f"Token index {index} out of range 0..{len(self._tokens)}")
        return self.boundaries()[index]

    def snap_text_offset(self, candidate: int, previous: int = 0) -> int:
        """
        Round a free caret offset to a boundary.

        A candidate inside a token jumps over the token in the direction of
        travel: to the token's end when moving right of *previous*, to its
        start otherwise.  Out-of-range candidates are clamped.

        Args:
            candidate: Raw offset reported by the text surface
            previous: Last boundary the caret rested on

        Returns:
            A boundary offset
        """
        bounds = self.boundaries()
        candidate = max(0, min(candidate, bounds[-1]))
        i = bisect_right(bounds, candidate) - 1
        if bounds[i] == candidate:
            return candidate
        start, end = bounds[i], bounds[i + 1]
        return end if candidate > previous else start

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def tokens_for_input(self, raw: str) -> InsertResult:
        """
        Translate typed or pasted input into tokens without inserting them.

        A single character must be a shortcut key or a parenthesis.  Longer
        input is tokenized as a whole and accepted only if every word is
        recognised.
        """
        if len(raw) == 1:
            token = self.catalog.operator_for_shortcut(raw)
            if token is None:
                token = self.catalog.paren_token(raw)
            if token is None:
                return InsertResult(error=EditError.INVALID_SHORTCUT)
            new_tokens = [token]
        else:
            new_tokens = self.catalog.tokenize(raw)
            if new_tokens is None:
                logger.info(f"Rejected pasted text {raw!r}")
                return InsertResult(error=EditError.INVALID_PASTE)
        return InsertResult(
            text="".join(token.display for token in new_tokens),
            tokens=new_tokens,
        )

    def insert_at(self, offset: int, raw: str) -> InsertResult:
        """
        Insert typed or pasted input at a boundary.

        Returns:
            InsertResult with the inserted display text, or an error and no
            change to the condition
        """
        index = self.index_at_text_offset(offset)
        result = self.tokens_for_input(raw)
        if result.accepted:
            self._tokens[index:index] = result.tokens
            logger.debug(f"Inserted {result.text!r} at token index {index}")
        return result

    def insert_tokens(self, offset: int, tokens: List[Token]) -> str:
        """Insert ready-made tokens at a boundary; returns their display text."""
        index = self.index_at_text_offset(offset)
        self._tokens[index:index] = tokens
        text = "".join(token.display for token in tokens)
        logger.debug(f"Inserted {text!r} at token index {index}")
        return text

    def insert_token(self, offset: int, token: Token) -> str:
        return self.insert_tokens(offset, [token])

    def remove_range(self, start: int, end: int) -> List[Token]:
        """
        Remove every token between two boundaries.

        Returns:
            The removed tokens
        """
        if start > end:
            raise OffsetError(f"Range start {start} is after end {end}")
        first = self.index_at_text_offset(start)
        last = self.index_at_text_offset(end)
        removed = self._tokens[first:last]
        del self._tokens[first:last]
        if removed:
            logger.debug(f"Removed tokens {first}..{last - 1}")
        return removed

    def remove_single_logical(self, caret: int, direction: Direction) -> Optional[Token]:
        """
        Remove the whole token next to the caret.

        Backward removes the token on the left, forward the one on the right.
        Nothing happens at the start (backward) or end (forward).

        Returns:
            The removed token, or None
        """
        index = self.index_at_text_offset(caret)
        if Direction(direction) is Direction.BACKWARD:
            index -= 1
        if not 0 <= index < len(self._tokens):
            return None
        removed = self._tokens.pop(index)
        logger.debug(f"Removed token {removed.display!r} at index {index}")
        return removed
