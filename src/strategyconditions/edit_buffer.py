"""
Synchronized edit buffer.

Sits between a linear text surface and a Condition.  The text surface
forwards raw edit intents (insert, remove, caret move); the buffer snaps
offsets to token boundaries, applies the change to the Condition first and
only then to its text, so a rejected edit never touches either.  After each
accepted change the text must equal the condition's display text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from . import package_logger
from .condition import Condition, ConditionTextError, Direction, EditError
from .tokens import Token

logger = package_logger(__name__)


class StructuralInvariantViolation(AssertionError):
    """Buffer text and condition display text have diverged (a defect)."""
    pass


@dataclass
class EditResult:
    """Outcome of one edit intent, as plain values for the text surface."""
    accepted: bool
    text: str
    caret: int
    inserted: str = ""
    removed: List[Token] = field(default_factory=list)
    error: Optional[EditError] = None


class SyncedEditBuffer:
    """
    Keeps a text buffer equal to ``condition.display_text()``.

    Caret state is a ``dot`` (the moving end) and a ``mark`` (the anchor);
    they differ when a selection is active.  Both are always boundaries.
    """

    def __init__(self, condition: Condition) -> None:
        self.condition = condition
        self._text = condition.display_text()
        self._dot = 0
        self._mark = 0
        # Direction reference for snapping free caret movement
        self._last_boundary = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def caret(self) -> int:
        return self._dot

    @property
    def mark(self) -> int:
        return self._mark

    @property
    def has_selection(self) -> bool:
        return self._dot != self._mark

    def selection(self) -> Tuple[int, int]:
        """Selected range as ``(start, end)``; empty when start == end."""
        return min(self._dot, self._mark), max(self._dot, self._mark)

    # ------------------------------------------------------------------
    # Caret
    # ------------------------------------------------------------------

    def move_caret(self, dot: int, mark: Optional[int] = None) -> int:
        """
        Record a caret movement reported by the text surface.

        Args:
            dot: New raw caret offset
            mark: Selection anchor; None collapses the selection onto dot

        Returns:
            The snapped caret offset the surface should display
        """
        new_dot = self.condition.snap_text_offset(dot, self._last_boundary)
        if mark is None:
            new_mark = new_dot
        else:
            new_mark = self.condition.snap_text_offset(mark, self._mark)
        if new_dot != dot:
            logger.debug(f"Caret snapped from {dot} to {new_dot}")
        self._dot = new_dot
        self._mark = new_mark
        self._last_boundary = new_dot
        return new_dot

    def _set_caret(self, offset: int) -> None:
        self._dot = self._mark = self._last_boundary = offset

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def insert(self, raw: str, offset: Optional[int] = None) -> EditResult:
        """
        Insert typed or pasted input.

        Args:
            raw: Shortcut character, parenthesis, or pasted text
            offset: Where to insert; None inserts at the caret and replaces
                    the active selection

        Returns:
            EditResult; on rejection text, tokens and caret are unchanged
        """
        result = self.condition.tokens_for_input(raw)
        if not result.accepted:
            return self._rejected(result.error)
        return self._insert_tokens(result.tokens, offset)

    def insert_proposition(self, name: str, offset: Optional[int] = None) -> EditResult:
        """Insert a known proposition by name (the "Add" button flow)."""
        token = self.condition.catalog.proposition_named(name)
        if token is None:
            logger.info(f"Unknown proposition {name!r}")
            return self._rejected(EditError.UNKNOWN_PROPOSITION)
        return self._insert_tokens([token], offset)

    def _insert_tokens(self, tokens: List[Token], offset: Optional[int]) -> EditResult:
        removed: List[Token] = []
        if offset is None:
            offset = self._dot
            if self.has_selection:
                offset, end = self.selection()
                removed = self._remove_between(offset, end)
        else:
            offset = self.condition.snap_text_offset(offset, self._last_boundary)

        inserted = self.condition.insert_tokens(offset, tokens)
        self._text = self._text[:offset] + inserted + self._text[offset:]
        self._set_caret(offset + len(inserted))
        self._verify()
        return EditResult(True, self._text, self._dot, inserted=inserted, removed=removed)

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def delete_backward(self) -> EditResult:
        """Backspace: remove the selection, or the whole token left of the caret."""
        if self.has_selection:
            return self.delete_selection()
        return self._delete_single(Direction.BACKWARD)

    def delete_forward(self) -> EditResult:
        """Delete: remove the selection, or the whole token right of the caret."""
        if self.has_selection:
            return self.delete_selection()
        return self._delete_single(Direction.FORWARD)

    def delete_selection(self) -> EditResult:
        start, end = self.selection()
        return self.delete_range(start, end)

    def delete_range(self, start: int, end: int) -> EditResult:
        """
        Remove every token touched by ``[start, end)``.

        Offsets inside a token widen the range to cover that token.
        """
        if start > end:
            start, end = end, start
        if start == end:
            return EditResult(True, self._text, self._dot)
        start = self.condition.snap_text_offset(start, end)
        end = self.condition.snap_text_offset(end, start)
        removed = self._remove_between(start, end)
        self._set_caret(start)
        self._verify()
        return EditResult(True, self._text, self._dot, removed=removed)

    def remove(self, offset: int, length: int) -> EditResult:
        """
        Interpret a raw remove request from the text surface.

        With a selection the selection is removed.  Without one, a request
        that does not start at the caret came from Backspace, otherwise from
        Delete.
        """
        if self.has_selection:
            return self.delete_selection()
        if offset != self._dot:
            return self._delete_single(Direction.BACKWARD)
        return self._delete_single(Direction.FORWARD)

    def _delete_single(self, direction: Direction) -> EditResult:
        caret = self._dot
        token = self.condition.remove_single_logical(caret, direction)
        if token is None:
            return EditResult(True, self._text, caret)
        if direction is Direction.BACKWARD:
            caret -= len(token)
        self._text = self._text[:caret] + self._text[caret + len(token):]
        self._set_caret(caret)
        self._verify()
        return EditResult(True, self._text, caret, removed=[token])

    def _remove_between(self, start: int, end: int) -> List[Token]:
        removed = self.condition.remove_range(start, end)
        self._text = self._text[:start] + self._text[end:]
        return removed

    # ------------------------------------------------------------------
    # Whole-buffer operations
    # ------------------------------------------------------------------

    def set_text(self, text: str) -> EditResult:
        """
        Replace the whole content with canonical condition text.

        Raises:
            ConditionTextError: If the text contains unknown words
        """
        tokens: List[Token] = []
        if text.strip():
            parsed = self.condition.catalog.tokenize(text)
            if parsed is None:
                raise ConditionTextError(f"Condition text cannot be tokenized: {text!r}")
            tokens = parsed

        removed = self._remove_between(0, len(self._text))
        inserted = self.condition.insert_tokens(0, tokens)
        self._text = inserted
        self._set_caret(0)
        self._verify()
        return EditResult(True, self._text, 0, inserted=inserted, removed=removed)

    def _rejected(self, error: Optional[EditError]) -> EditResult:
        return EditResult(False, self._text, self._dot, error=error)

    def _verify(self) -> None:
        expected = self.condition.display_text()
        if expected != self._text:
            raise StructuralInvariantViolation(
                f"Buffer text {self._text!r} differs from condition text {expected!r}"
            )
