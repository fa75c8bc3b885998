"""
Strategy Conditions - structured editing of strategy graph edge conditions.

Keeps a text surface and a token model of a boolean condition in lockstep,
snaps the caret to token boundaries and validates finished conditions with a
recursive-descent grammar (`GrammarValidator`).
"""

import logging
import sys

from .version import __version__

__author__ = "Strategy Conditions Contributors"
__license__ = "MIT"

# Central logger name for the package.  A host application can call
# set_package_logger_name() to move every submodule logger under its own
# hierarchy.  During tests the default "strategyconditions" parent is used,
# which pytest's log capture picks up automatically.
_PACKAGE_LOGGER_NAME: str = "strategyconditions"


def set_package_logger_name(name: str) -> None:
    """Override the package logger name (called by a host at startup)."""
    global _PACKAGE_LOGGER_NAME
    _PACKAGE_LOGGER_NAME = name

    # Rebind module-level logger objects in already-imported submodules.
    _submodule_names = (
        "config", "proposition_loader", "token_catalog", "condition",
        "grammar", "edit_buffer", "edit_session", "cli",
    )
    for suffix in _submodule_names:
        module = sys.modules.get(f"strategyconditions.{suffix}")
        if module is not None and hasattr(module, "logger"):
            module.logger = package_logger(module.__name__)


def package_logger(module: str) -> logging.Logger:
    """Return a child logger under the package hierarchy.

    Usage in submodules::

        from strategyconditions import package_logger
        logger = package_logger(__name__)

    With the default root this yields e.g. ``strategyconditions.condition``.
    After ``set_package_logger_name("editor")`` it yields
    ``editor.condition``.
    """
    base = _PACKAGE_LOGGER_NAME
    prefix = "strategyconditions."
    if module.startswith(prefix):
        return logging.getLogger(f"{base}.{module[len(prefix):]}")
    # Caller is the root package itself or an unknown path
    return logging.getLogger(base)

from .tokens import Token, TokenKind, OperatorKind, TRUE_CONDITION
from .token_catalog import TokenCatalog, CatalogError
from .condition import Condition, Direction, EditError, InsertResult
from .grammar import GrammarValidator, ConditionNotValidError
from .edit_buffer import SyncedEditBuffer, EditResult, StructuralInvariantViolation
from .edit_session import EditSession, SessionKind, CommitResult
from .config import Config

__all__ = [
    "Token",
    "TokenKind",
    "OperatorKind",
    "TRUE_CONDITION",
    "TokenCatalog",
    "CatalogError",
    "Condition",
    "Direction",
    "EditError",
    "InsertResult",
    "GrammarValidator",
    "ConditionNotValidError",
    "SyncedEditBuffer",
    "EditResult",
    "StructuralInvariantViolation",
    "EditSession",
    "SessionKind",
    "CommitResult",
    "Config",
]
