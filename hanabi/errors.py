"""
Engine errors and error codes.

Two families of failure exist:
- Rule violations: expected rejections (wrong turn, redundant hint, ...).
  Actions report them as failed ActionResults carrying an ErrorCode.
- Invariant violations: a state that fails validation. These mean a corrupt
  snapshot or an engine bug, see engine_core.validation.StateValidationError.
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable reasons for a rejected action or setup."""
    # Setup / configuration
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"

    # Turn / lifecycle
    GAME_OVER = "GAME_OVER"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    UNKNOWN_CARD = "UNKNOWN_CARD"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"

    # Play / discard
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    EMPTY_HAND = "EMPTY_HAND"
    HINT_TOKENS_FULL = "HINT_TOKENS_FULL"

    # Hints
    NO_HINT_TOKENS = "NO_HINT_TOKENS"
    SELF_HINT = "SELF_HINT"
    SUIT_NOT_ACTIVE = "SUIT_NOT_ACTIVE"
    WILD_SUIT_NOT_NAMEABLE = "WILD_SUIT_NOT_NAMEABLE"
    INVALID_NUMBER = "INVALID_NUMBER"
    HINT_TOUCHES_NOTHING = "HINT_TOUCHES_NOTHING"
    REDUNDANT_HINT = "REDUNDANT_HINT"
    CONTRADICTORY_HINT = "CONTRADICTORY_HINT"

    # Selection workflow
    NO_PENDING_ACTION = "NO_PENDING_ACTION"
    WRONG_SELECTION_STEP = "WRONG_SELECTION_STEP"
    INCOMPLETE_SELECTION = "INCOMPLETE_SELECTION"

    # State integrity
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


class HanabiError(Exception):
    """Base class for every error raised by the engine."""


class RuleViolation(HanabiError):
    """An action or request broke a game rule. State is left unchanged."""

    def __init__(self, message: str, code: ErrorCode):
        self.message = message
        self.code = code
        super().__init__(message)


class ConfigurationError(RuleViolation):
    """A new-game configuration failed its preconditions."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_CONFIGURATION)
