"""
Action System - Actions, payloads, and results.

Actions represent:
1. Turn actions (play, discard, color hint, number hint)
2. Selection steps (begin, pick card/target/color/number, confirm, cancel)

All state changes flow through actions and the reducer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import ErrorCode, RuleViolation
from .state import Suit
from .validation import StateValidationError


class ActionType(Enum):
    """Types of actions in the system."""
    # Turn actions: each consumes the acting player's turn
    PLAY = "play"
    DISCARD = "discard"
    HINT_COLOR = "hint_color"
    HINT_NUMBER = "hint_number"

    # Selection workflow: drafts an action without taking the turn
    BEGIN_PLAY = "begin_play"
    BEGIN_DISCARD = "begin_discard"
    BEGIN_COLOR_HINT = "begin_color_hint"
    BEGIN_NUMBER_HINT = "begin_number_hint"
    SELECT_CARD = "select_card"
    SELECT_HINT_TARGET = "select_hint_target"
    SELECT_HINT_COLOR = "select_hint_color"
    SELECT_HINT_NUMBER = "select_hint_number"
    CONFIRM_SELECTION = "confirm_selection"
    CANCEL_SELECTION = "cancel_selection"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; validation happens in the
    reducer. `player_id`, when given, names the acting player and must be
    the player whose turn it is.
    """
    player_id: str | None = None
    card_id: str | None = None
    target_player_id: str | None = None
    suit: Suit | None = None
    number: int | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are validated before application and applied atomically:
    a rejected action leaves the state untouched.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def play(cls, card_id: str, player_id: str | None = None) -> Action:
        """Factory for play action."""
        return cls(ActionType.PLAY, ActionPayload(player_id=player_id, card_id=card_id))

    @classmethod
    def discard(cls, card_id: str, player_id: str | None = None) -> Action:
        """Factory for discard action."""
        return cls(ActionType.DISCARD, ActionPayload(player_id=player_id, card_id=card_id))

    @classmethod
    def hint_color(cls, target_player_id: str, suit: Suit, player_id: str | None = None) -> Action:
        """Factory for color hint."""
        return cls(
            ActionType.HINT_COLOR,
            ActionPayload(player_id=player_id, target_player_id=target_player_id, suit=suit),
        )

    @classmethod
    def hint_number(cls, target_player_id: str, number: int, player_id: str | None = None) -> Action:
        """Factory for number hint."""
        return cls(
            ActionType.HINT_NUMBER,
            ActionPayload(player_id=player_id, target_player_id=target_player_id, number=number),
        )

    @classmethod
    def begin(cls, action_type: ActionType) -> Action:
        return cls(action_type)

    @classmethod
    def select_card(cls, card_id: str) -> Action:
        return cls(ActionType.SELECT_CARD, ActionPayload(card_id=card_id))

    @classmethod
    def select_hint_target(cls, target_player_id: str) -> Action:
        return cls(ActionType.SELECT_HINT_TARGET, ActionPayload(target_player_id=target_player_id))

    @classmethod
    def select_hint_color(cls, suit: Suit) -> Action:
        return cls(ActionType.SELECT_HINT_COLOR, ActionPayload(suit=suit))

    @classmethod
    def select_hint_number(cls, number: int) -> Action:
        return cls(ActionType.SELECT_HINT_NUMBER, ActionPayload(number=number))

    @classmethod
    def confirm(cls, player_id: str | None = None) -> Action:
        return cls(ActionType.CONFIRM_SELECTION, ActionPayload(player_id=player_id))

    @classmethod
    def cancel(cls) -> Action:
        return cls(ActionType.CANCEL_SELECTION)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Error message and code (if failed)
    - Human-readable changes for presentation
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None

    # Populated when the post-action state failed validation
    invariant_violations: list[str] = field(default_factory=list)

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def invariant_failure(cls, violations: list[str]) -> ActionResult:
        return cls(
            success=False,
            error="; ".join(violations),
            error_code=ErrorCode.INVARIANT_VIOLATION,
            invariant_violations=list(violations),
        )

    @classmethod
    def success_with_state(cls, state: Any, changes: list[str] | None = None) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])

    def unwrap(self) -> Any:
        """
        Return the new state, or raise the error this result carries.

        Invariant failures raise StateValidationError; everything else raises
        RuleViolation.
        """
        if self.success:
            return self.new_state
        if self.error_code == ErrorCode.INVARIANT_VIOLATION:
            raise StateValidationError(self.invariant_violations)
        raise RuleViolation(self.error or "Action failed", self.error_code or ErrorCode.UNKNOWN_ACTION)
