"""
Tests for state validation.

Each test corrupts one aspect of a valid state and checks that the
validator names it.
"""

import pytest

from ..engine_core.state import GameStatus, LastRoundState, PendingAction, Suit
from ..engine_core.validation import StateValidationError, assert_valid_state, validate_state


@pytest.fixture
def state(standard_game):
    """A valid, freshly dealt state to corrupt."""
    return standard_game.get_snapshot()


class TestValidState:
    """Tests for states that should pass."""

    def test_fresh_state_is_valid(self, state):
        result = validate_state(state)

        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_states_after_actions_are_valid(self, standard_game):
        standard_game.play_card("c001")
        standard_game.give_color_hint("p1", Suit.YELLOW)

        assert validate_state(standard_game.get_snapshot()).valid


class TestZones:
    """Every card lives in exactly one zone."""

    def test_card_in_two_zones(self, state):
        state.draw_deck.append("c001")

        errors = validate_state(state).errors

        assert "Card appears in multiple zones: c001" in errors

    def test_card_in_no_zone(self, state):
        state.draw_deck.remove("c011")

        errors = validate_state(state).errors

        assert "Every card must exist in exactly one zone (hand, deck, discard, or fireworks)" in errors

    def test_unknown_card_in_hand(self, state):
        state.players[0].cards.append("c999")

        assert "Unknown card in hand: c999" in validate_state(state).errors

    def test_duplicate_player_names(self, state):
        state.players[1].name = " ANA"

        errors = validate_state(state).errors

        assert any(error.startswith("Duplicate player name") for error in errors)


class TestCounters:
    """Token bounds and status consistency."""

    def test_hint_tokens_out_of_range(self, state):
        state.hint_tokens = 9
        assert "hintTokens is out of range" in validate_state(state).errors

    def test_fuse_tokens_out_of_range(self, state):
        state.fuse_tokens_used = -1
        assert "fuseTokensUsed is out of range" in validate_state(state).errors

    def test_won_requires_complete_fireworks(self, state):
        state.status = GameStatus.WON
        assert "Won state requires all active fireworks to be complete" in validate_state(state).errors

    def test_last_round_requires_countdown(self, state):
        state.status = GameStatus.LAST_ROUND

        assert "lastRound state is required when status is last_round" in validate_state(state).errors

        state.last_round = LastRoundState(turns_remaining=2)
        assert validate_state(state).valid

    def test_countdown_only_in_last_round(self, state):
        state.last_round = LastRoundState(turns_remaining=1)

        assert "lastRound must be null unless status is last_round" in validate_state(state).errors

    def test_current_player_out_of_range(self, state):
        state.current_turn_player_index = 2
        assert "currentTurnPlayerIndex is out of range" in validate_state(state).errors


class TestFireworks:
    """Firework piles are ordered by suit and number."""

    def test_firework_must_start_at_one(self, state):
        state.players[1].cards.remove("c002")
        state.fireworks[Suit.RED] = ["c002"]

        errors = validate_state(state).errors

        assert "Firework R must be in ascending order starting at 1" in errors

    def test_card_in_wrong_pile(self, state):
        state.players[0].cards.remove("c003")
        state.fireworks[Suit.RED] = ["c003"]

        assert "Card c003 is in wrong firework pile" in validate_state(state).errors

    def test_missing_pile_is_reported(self, state):
        del state.fireworks[Suit.RED]
        state.status = GameStatus.WON

        result = validate_state(state)

        assert "Missing firework array for suit R" in result.errors
        assert "Won state requires all active fireworks to be complete" in result.errors
        assert state.score == 0

    def test_inactive_suit_pile_must_be_empty(self, state):
        state.players[0].cards.remove("c001")
        state.fireworks[Suit.MULTICOLOR] = ["c001"]

        errors = validate_state(state).errors

        assert "Inactive suit M cannot have cards in fireworks" in errors


class TestCards:
    """Card identity and hint metadata."""

    def test_known_and_excluded_color(self, state):
        hints = state.cards["c001"].hints
        hints.color = Suit.RED
        hints.not_colors = [Suit.RED]

        assert "Card c001 both knows and excludes color R" in validate_state(state).errors

    def test_duplicate_exclusions(self, state):
        state.cards["c001"].hints.not_numbers = [2, 2]
        assert "Duplicate notNumbers for card c001" in validate_state(state).errors

    def test_multicolor_card_without_variant(self, state):
        state.cards["c001"].suit = Suit.MULTICOLOR

        errors = validate_state(state).errors

        assert "Found multicolor card while includeMulticolor=false" in errors


class TestUiDraft:
    """The selection draft agrees with the pending action and status."""

    def test_selection_without_pending_action(self, state):
        state.ui.selected_card_id = "c001"

        errors = validate_state(state).errors

        assert "selectedCardId must be null when no action is pending" in errors

    def test_no_pending_action_when_game_over(self, state):
        state.status = GameStatus.LOST
        state.ui.pending_action = PendingAction.PLAY

        errors = validate_state(state).errors

        assert "No action can be pending when the game is over" in errors

    def test_card_selection_invalid_for_hints(self, state):
        state.ui.pending_action = PendingAction.HINT_NUMBER
        state.ui.selected_card_id = "c001"

        assert "card selection is invalid for hint actions" in validate_state(state).errors

    def test_unknown_target(self, state):
        state.ui.pending_action = PendingAction.HINT_COLOR
        state.ui.selected_target_player_id = "p9"

        assert "selectedTargetPlayerId references unknown player" in validate_state(state).errors


class TestLogs:
    """Log entries are unique and stamped in the past."""

    def test_future_log_is_a_warning(self, standard_game):
        state = standard_game.play_card("c001").new_state
        state.logs[0].turn = 10

        result = validate_state(state)

        assert result.valid
        assert result.warnings == ["Log log-0001 is stamped after the current turn"]

    def test_duplicate_log_id(self, standard_game):
        state = standard_game.play_card("c001").new_state
        state.logs[1].log_id = state.logs[0].log_id

        assert "Duplicate log id: log-0001" in validate_state(state).errors


class TestAssertValidState:
    """Tests for the raising variant."""

    def test_raises_with_all_errors(self, state):
        state.hint_tokens = 9
        state.fuse_tokens_used = 9

        with pytest.raises(StateValidationError) as exc_info:
            assert_valid_state(state)

        assert exc_info.value.errors == ["hintTokens is out of range", "fuseTokensUsed is out of range"]
        assert str(exc_info.value) == "State validation failed: 2 invariant violation(s)"

    def test_single_error_message(self, state):
        state.hint_tokens = 9

        with pytest.raises(StateValidationError, match="hintTokens is out of range"):
            assert_valid_state(state)
