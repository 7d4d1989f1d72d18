"""
Hanabi Game - The engine facade.

A HanabiGame owns exactly one committed GameState. Every mutation goes
through the reducer, which works on a copy; the facade swaps the copy in
only when the action succeeded and the result validated. Reads hand out
independent copies, so callers can never reach the committed state.

Usage:
    game = HanabiGame.new(player_names=["Ana", "Ben"], shuffle_seed=7)

    result = game.give_number_hint("p2", 1)
    if not result.success:
        print(result.error_code, result.error)

    view = game.get_perspective_state("p2")
"""

from __future__ import annotations
import logging
from typing import Any

from .action import Action, ActionResult, ActionType
from .perspective import PerspectiveState, project_perspective
from .reducer import Reducer
from .setup import GameConfig, create_initial_state
from .snapshot import restore_state, serialize_state
from .state import GameState, GameStatus, Suit
from .validation import assert_valid_state

logger = logging.getLogger(__name__)


class HanabiGame:
    """Authoritative rules engine for one game."""

    def __init__(self, config: GameConfig | None = None):
        state = create_initial_state(config)
        assert_valid_state(state)
        self._state = state
        self._reducer = Reducer()

    @classmethod
    def new(cls, **options: Any) -> HanabiGame:
        """Start a game from GameConfig keyword options."""
        return cls(GameConfig(**options))

    @classmethod
    def from_state(cls, state: GameState) -> HanabiGame:
        """Adopt a copy of an existing state after validating it."""
        candidate = state.clone()
        assert_valid_state(candidate)
        game = cls.__new__(cls)
        game._state = candidate
        game._reducer = Reducer()
        return game

    @classmethod
    def from_snapshot(cls, payload: dict[str, Any]) -> HanabiGame:
        """Restore a game from a wire snapshot. Raises StateValidationError."""
        return cls.from_state(restore_state(payload))

    # =========================================================================
    # Reads
    # =========================================================================

    def get_snapshot(self) -> GameState:
        """Independent deep copy of the committed state."""
        return self._state.clone()

    def serialize(self) -> dict[str, Any]:
        """The committed state as a wire snapshot."""
        return serialize_state(self._state)

    def get_perspective_state(self, viewer_id: str) -> PerspectiveState:
        return project_perspective(self._state, viewer_id)

    def get_score(self) -> int:
        return self._state.score

    def is_game_over(self) -> bool:
        return self._state.is_terminal

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def current_player_id(self) -> str:
        return self._state.current_player.player_id

    # =========================================================================
    # Writes
    # =========================================================================

    def apply(self, action: Action) -> ActionResult:
        """
        Apply an action and commit the result if it succeeded.

        The returned ActionResult carries its own copy of the new state.
        """
        result = self._reducer.apply(self._state, action)
        if result.success:
            self._state = result.new_state
            result.new_state = self._state.clone()
            if self._state.is_terminal:
                logger.info("Game over: %s, score %d", self._state.status.value, self._state.score)
        return result

    def replace_state(self, candidate: GameState | dict[str, Any]) -> None:
        """
        Swap in a whole new state, e.g. a snapshot received from the host.

        The candidate is validated first; on failure StateValidationError is
        raised and the committed state is kept.
        """
        if isinstance(candidate, GameState):
            state = candidate.clone()
            assert_valid_state(state)
        else:
            state = restore_state(candidate)
        self._state = state
        logger.debug("Replaced state at turn %d", state.turn)

    def play_card(self, card_id: str, player_id: str | None = None) -> ActionResult:
        return self.apply(Action.play(card_id, player_id))

    def discard_card(self, card_id: str, player_id: str | None = None) -> ActionResult:
        return self.apply(Action.discard(card_id, player_id))

    def give_color_hint(
        self, target_player_id: str, suit: Suit | str, player_id: str | None = None
    ) -> ActionResult:
        return self.apply(Action.hint_color(target_player_id, suit, player_id))

    def give_number_hint(
        self, target_player_id: str, number: int, player_id: str | None = None
    ) -> ActionResult:
        return self.apply(Action.hint_number(target_player_id, number, player_id))

    # Selection workflow

    def begin_play_selection(self) -> ActionResult:
        return self.apply(Action.begin(ActionType.BEGIN_PLAY))

    def begin_discard_selection(self) -> ActionResult:
        return self.apply(Action.begin(ActionType.BEGIN_DISCARD))

    def begin_color_hint_selection(self) -> ActionResult:
        return self.apply(Action.begin(ActionType.BEGIN_COLOR_HINT))

    def begin_number_hint_selection(self) -> ActionResult:
        return self.apply(Action.begin(ActionType.BEGIN_NUMBER_HINT))

    def select_card(self, card_id: str) -> ActionResult:
        return self.apply(Action.select_card(card_id))

    def select_hint_target(self, player_id: str) -> ActionResult:
        return self.apply(Action.select_hint_target(player_id))

    def select_hint_color(self, suit: Suit | str) -> ActionResult:
        return self.apply(Action.select_hint_color(suit))

    def select_hint_number(self, number: int) -> ActionResult:
        return self.apply(Action.select_hint_number(number))

    def confirm_selection(self, player_id: str | None = None) -> ActionResult:
        return self.apply(Action.confirm(player_id))

    def cancel_selection(self) -> ActionResult:
        return self.apply(Action.cancel())
