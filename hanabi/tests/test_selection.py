"""
Tests for the selection workflow.

Tests:
- Begin / select / confirm / cancel transitions
- Live hint previews
- Same legality as the direct action methods
"""

from ..engine_core.game import HanabiGame
from ..engine_core.state import GameUiState, PendingAction, Suit
from ..errors import ErrorCode


class TestPlaySelection:
    """Drafting a play or discard."""

    def test_begin_play(self, standard_game):
        result = standard_game.begin_play_selection()

        assert result.success
        ui = result.new_state.ui
        assert ui.pending_action == PendingAction.PLAY
        assert ui.selected_card_id is None
        assert result.new_state.turn == 1

    def test_select_and_confirm_play(self, standard_game):
        standard_game.begin_play_selection()
        state = standard_game.select_card("c001").new_state
        assert state.ui.selected_card_id == "c001"
        assert state.ui.highlighted_card_ids == ["c001"]

        result = standard_game.confirm_selection()

        assert result.success
        assert result.new_state.fireworks[Suit.RED] == ["c001"]
        assert result.new_state.ui == GameUiState()
        assert result.new_state.current_player.player_id == "p2"

    def test_select_card_outside_hand(self, standard_game):
        standard_game.begin_play_selection()
        result = standard_game.select_card("c002")

        assert result.error_code == ErrorCode.CARD_NOT_IN_HAND
        assert result.error == "Selected card is not in the current player hand"

    def test_confirm_without_card(self, standard_game):
        standard_game.begin_play_selection()
        result = standard_game.confirm_selection()

        assert result.error_code == ErrorCode.INCOMPLETE_SELECTION
        assert result.error == "Select a card before confirming play"

    def test_begin_discard_at_full_tokens(self, standard_game):
        result = standard_game.begin_discard_selection()
        assert result.error_code == ErrorCode.HINT_TOKENS_FULL

    def test_confirm_discard(self, standard_game):
        standard_game.give_color_hint("p2", Suit.RED)
        assert standard_game.begin_discard_selection().success
        assert standard_game.select_card("c002").success

        state = standard_game.confirm_selection().new_state

        assert state.discard_pile == ["c002"]
        assert state.hint_tokens == 8

    def test_confirm_checks_actor(self, standard_game):
        standard_game.begin_play_selection()
        standard_game.select_card("c001")

        result = standard_game.confirm_selection(player_id="p2")

        assert result.error_code == ErrorCode.NOT_YOUR_TURN


class TestHintSelection:
    """Drafting a hint."""

    def test_preview_follows_draft(self, standard_game):
        standard_game.begin_color_hint_selection()
        state = standard_game.select_hint_target("p2").new_state
        assert state.ui.selected_target_player_id == "p2"
        assert state.ui.highlighted_card_ids == []

        state = standard_game.select_hint_color(Suit.RED).new_state
        assert state.ui.selected_hint_suit == Suit.RED
        assert state.ui.highlighted_card_ids == ["c002"]

        state = standard_game.select_hint_color(Suit.BLUE).new_state
        assert state.ui.highlighted_card_ids == ["c008"]

    def test_number_preview(self, two_red_game):
        two_red_game.begin_number_hint_selection()
        two_red_game.select_hint_number(2)
        state = two_red_game.select_hint_target("p2").new_state

        assert state.ui.pending_action == PendingAction.HINT_NUMBER
        assert state.ui.highlighted_card_ids == ["c002", "c006", "c008", "c010"]

    def test_confirm_hint(self, standard_game):
        standard_game.begin_color_hint_selection()
        standard_game.select_hint_target("p2")
        standard_game.select_hint_color(Suit.RED)

        state = standard_game.confirm_selection().new_state

        assert state.hint_tokens == 7
        assert state.cards["c002"].hints.color == Suit.RED
        assert state.ui.pending_action is None

    def test_confirm_incomplete_hint(self, standard_game):
        standard_game.begin_number_hint_selection()
        standard_game.select_hint_target("p2")

        result = standard_game.confirm_selection()

        assert result.error_code == ErrorCode.INCOMPLETE_SELECTION
        assert result.error == "Select a target and a number before confirming hint"

    def test_wrong_step(self, standard_game):
        standard_game.begin_color_hint_selection()

        assert standard_game.select_hint_number(2).error_code == ErrorCode.WRONG_SELECTION_STEP
        assert standard_game.select_card("c001").error_code == ErrorCode.WRONG_SELECTION_STEP

    def test_select_self_as_target(self, standard_game):
        standard_game.begin_color_hint_selection()
        result = standard_game.select_hint_target("p1")

        assert result.error_code == ErrorCode.SELF_HINT

    def test_begin_hint_without_tokens(self, standard_game):
        state = standard_game.get_snapshot()
        state.hint_tokens = 0
        game = HanabiGame.from_state(state)

        assert game.begin_color_hint_selection().error_code == ErrorCode.NO_HINT_TOKENS
        assert game.begin_number_hint_selection().error_code == ErrorCode.NO_HINT_TOKENS

    def test_redundant_hint_rejected_on_confirm(self, two_red_game):
        """Confirming enforces the same rules as the direct call."""
        two_red_game.give_color_hint("p2", Suit.RED)
        two_red_game.give_number_hint("p1", 1)
        two_red_game.begin_color_hint_selection()
        two_red_game.select_hint_target("p2")
        two_red_game.select_hint_color(Suit.RED)
        before = two_red_game.get_snapshot()

        result = two_red_game.confirm_selection()

        assert result.error_code == ErrorCode.REDUNDANT_HINT
        assert two_red_game.get_snapshot() == before
        assert before.ui.pending_action == PendingAction.HINT_COLOR


class TestCancelAndConfirm:
    """Clearing and misusing the draft."""

    def test_cancel_clears_draft(self, standard_game):
        standard_game.begin_play_selection()
        standard_game.select_card("c003")

        state = standard_game.cancel_selection().new_state

        assert state.ui == GameUiState()
        assert state.turn == 1

    def test_confirm_without_pending(self, standard_game):
        result = standard_game.confirm_selection()

        assert result.error_code == ErrorCode.NO_PENDING_ACTION
        assert result.error == "No pending action to confirm"

    def test_begin_replaces_previous_draft(self, standard_game):
        standard_game.begin_play_selection()
        standard_game.select_card("c001")

        state = standard_game.begin_color_hint_selection().new_state

        assert state.ui.pending_action == PendingAction.HINT_COLOR
        assert state.ui.selected_card_id is None

    def test_draft_travels_in_snapshot(self, standard_game):
        standard_game.begin_play_selection()
        standard_game.select_card("c005")

        ui = standard_game.serialize()["ui"]

        assert ui["pendingAction"] == "play"
        assert ui["selectedCardId"] == "c005"
        assert ui["highlightedCardIds"] == ["c005"]
