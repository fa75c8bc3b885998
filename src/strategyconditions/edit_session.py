"""
Edit session: the condition dialog contract without any widgets.

A session owns one SyncedEditBuffer for the lifetime of an "add condition",
"add backend" or "edit condition" dialog.  The presentation layer forwards
focus changes, keystrokes, pastes and button presses; the session answers
with plain values and, on commit, hands back a validated Condition.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from . import package_logger
from .condition import Condition, EditError
from .config import Config
from .edit_buffer import EditResult, SyncedEditBuffer
from .grammar import CONDITION_NOT_VALID, GrammarValidator
from .token_catalog import TokenCatalog
from .tokens import TRUE_CONDITION

logger = package_logger(__name__)

PASTE_NOT_VALID = "The copied and pasted value does not contain a correct Condition."


class SessionKind(str, Enum):
    """Which dialog flow opened the session."""
    ADD_EDGE = "add_edge"
    ADD_VERTEX_AND_EDGE = "add_vertex_and_edge"
    EDIT_EDGE = "edit_edge"


class SessionClosedError(Exception):
    """Raised when a committed or cancelled session is used again."""
    pass


@dataclass
class CommitResult:
    """Outcome of EditSession.commit."""
    accepted: bool
    condition: Optional[Condition] = None
    changed: bool = False
    message: str = ""


class EditSession:
    """
    One condition editing dialog.

    The stored condition text is shown as-is; an empty stored condition is
    shown as the ``true`` sentinel, which is cleared as soon as the text
    surface gains focus.
    """

    def __init__(
        self,
        catalog: TokenCatalog,
        kind: SessionKind = SessionKind.EDIT_EDGE,
        stored_condition: str = "",
        *,
        validator: Optional[GrammarValidator] = None,
        config: Optional[Config] = None,
        on_notice: Optional[Callable[[str], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Args:
            catalog: Token catalog with the known propositions
            kind: Dialog flow
            stored_condition: Canonical text of the edge's current condition
            validator: Grammar validator; built from config when omitted
            config: Configuration; defaults are used when omitted
            on_notice: Shows a non-blocking information message
            on_cancel: Called when an ADD_EDGE session is cancelled so the
                       owner can remove its placeholder edge

        Raises:
            ConditionTextError: If stored_condition contains unknown words
        """
        config = config or Config()
        self.catalog = catalog
        self.kind = SessionKind(kind)
        self.validator = validator or GrammarValidator.from_config(config)
        self._true_on_empty = config.get("true_literal_on_empty")
        self._on_notice = on_notice
        self._on_cancel = on_cancel
        self._notice_shown = False
        self._closed = False

        condition = Condition.from_text(stored_condition or TRUE_CONDITION, catalog)
        self._stored_text = condition.display_text()
        self.buffer = SyncedEditBuffer(condition)
        logger.debug(f"Opened {self.kind.value} session with {self._stored_text!r}")

    @property
    def condition(self) -> Condition:
        return self.buffer.condition

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Text surface events
    # ------------------------------------------------------------------

    def focus_gained(self) -> None:
        if self.buffer.text == TRUE_CONDITION:
            self.buffer.set_text("")

    def focus_lost(self) -> None:
        # While the paste notice is up the surface loses focus to it; the
        # user is still editing, so the sentinel must not reappear.
        if self.buffer.text == "" and self._true_on_empty and not self._notice_shown:
            self.buffer.set_text(TRUE_CONDITION)

    def type_text(self, raw: str) -> EditResult:
        """Insert a keystroke or pasted text at the caret."""
        result = self.buffer.insert(raw)
        if result.error is EditError.INVALID_PASTE:
            self._notify(PASTE_NOT_VALID)
        return result

    paste = type_text

    def add_proposition(self, name: str) -> EditResult:
        """Insert the proposition chosen in the proposition list."""
        if self.buffer.text == TRUE_CONDITION:
            self.buffer.set_text("")
        return self.buffer.insert_proposition(name)

    def move_caret(self, dot: int, mark: Optional[int] = None) -> int:
        return self.buffer.move_caret(dot, mark)

    def delete_backward(self) -> EditResult:
        return self.buffer.delete_backward()

    def delete_forward(self) -> EditResult:
        return self.buffer.delete_forward()

    def _notify(self, message: str) -> None:
        logger.info(message)
        if self._on_notice is None:
            return
        self._notice_shown = True
        try:
            self._on_notice(message)
        finally:
            self._notice_shown = False

    # ------------------------------------------------------------------
    # Buttons
    # ------------------------------------------------------------------

    def commit(self) -> CommitResult:
        """
        Validate and close the session.

        Returns:
            CommitResult; when not accepted the session stays open and the
            message should be shown to the user

        Raises:
            SessionClosedError: If the session was already closed
        """
        self._ensure_open()
        # The OK button takes focus from the text surface first.
        self.focus_lost()

        if not self.validator.parse(self.condition):
            logger.info(f"Rejected condition {self.text!r}")
            return CommitResult(False, message=CONDITION_NOT_VALID)

        changed = self.kind is not SessionKind.EDIT_EDGE or self.text != self._stored_text
        self._closed = True
        logger.debug(f"Committed {self.text!r} (changed={changed})")
        return CommitResult(True, self.condition.copy(), changed)

    def cancel(self) -> None:
        """
        Discard the session.

        Raises:
            SessionClosedError: If the session was already closed
        """
        self._ensure_open()
        self._closed = True
        if self.kind is SessionKind.ADD_EDGE and self._on_cancel is not None:
            self._on_cancel()

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"{self.kind.value} session is already closed")
