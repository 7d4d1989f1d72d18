"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through Reducer.apply().

Design principles:
- Transactional: handlers mutate a clone; the input state is never touched
- Validates the action before applying and the state after applying
- Returns ActionResult with success/failure
- Delegates hint semantics to hints.py
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable

from ..errors import ErrorCode, RuleViolation
from .action import Action, ActionResult, ActionType
from .hints import Hint, apply_hint, check_hint, draft_highlights
from .state import (
    CARD_NUMBERS,
    MAX_FIREWORK_HEIGHT,
    WILD_SUIT,
    Card,
    DiscardLog,
    DrawLog,
    EndReason,
    GameState,
    GameStatus,
    GameUiState,
    HintLog,
    LastRoundState,
    PendingAction,
    Player,
    PlayLog,
    StatusLog,
    Suit,
    empty_counts,
)
from .validation import validate_state

logger = logging.getLogger(__name__)

Handler = Callable[[GameState, Action], list[str]]


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with a new state or an error. The given state is
        left unchanged either way.
        """
        handler = self._get_handler(action.action_type)
        if handler is None:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.UNKNOWN_ACTION,
            )

        working = state.clone()
        try:
            self._validate_action(working, action)
            changes = handler(working, action)
        except RuleViolation as e:
            logger.debug("Rejected %s: %s", action.action_type.value, e.message)
            return ActionResult.failure(e.message, error_code=e.code)

        validation = validate_state(working)
        if not validation.valid:
            logger.warning(
                "Action %s produced an invalid state: %s",
                action.action_type.value, "; ".join(validation.errors),
            )
            return ActionResult.invariant_failure(validation.errors)

        logger.debug("Applied %s (turn %d)", action.action_type.value, working.turn)
        return ActionResult.success_with_state(working, changes=changes)

    def _validate_action(self, state: GameState, action: Action) -> None:
        """
        Checks shared by every action: the game is running and, when the
        action names its actor, that actor holds the turn.
        """
        if action.action_type == ActionType.CANCEL_SELECTION:
            return

        if state.is_terminal:
            raise RuleViolation(f"Game is over ({state.status.value})", ErrorCode.GAME_OVER)

        actor_id = action.payload.player_id
        if actor_id is not None and actor_id != state.current_player.player_id:
            if state.get_player(actor_id) is None:
                raise RuleViolation(f"Unknown player: {actor_id}", ErrorCode.UNKNOWN_PLAYER)
            raise RuleViolation(f"Not {actor_id}'s turn", ErrorCode.NOT_YOUR_TURN)

    def _get_handler(self, action_type: ActionType) -> Handler | None:
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PLAY: self._handle_play,
            ActionType.DISCARD: self._handle_discard,
            ActionType.HINT_COLOR: self._handle_hint_color,
            ActionType.HINT_NUMBER: self._handle_hint_number,
            ActionType.BEGIN_PLAY: self._handle_begin_play,
            ActionType.BEGIN_DISCARD: self._handle_begin_discard,
            ActionType.BEGIN_COLOR_HINT: self._handle_begin_hint,
            ActionType.BEGIN_NUMBER_HINT: self._handle_begin_hint,
            ActionType.SELECT_CARD: self._handle_select_card,
            ActionType.SELECT_HINT_TARGET: self._handle_select_hint_target,
            ActionType.SELECT_HINT_COLOR: self._handle_select_hint_color,
            ActionType.SELECT_HINT_NUMBER: self._handle_select_hint_number,
            ActionType.CONFIRM_SELECTION: self._handle_confirm,
            ActionType.CANCEL_SELECTION: self._handle_cancel,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Turn actions
    # =========================================================================

    def _handle_play(self, state: GameState, action: Action) -> list[str]:
        """Handle play action."""
        player = state.current_player
        card = self._take_from_hand(state, player, action.payload.card_id, "play")
        self._clear_recent_hints(state)

        success = card.number == state.firework_height(card.suit) + 1
        gained_hint = False
        if success:
            state.fireworks[card.suit].append(card.card_id)
            if card.number == MAX_FIREWORK_HEIGHT and state.hint_tokens < state.settings.max_hint_tokens:
                state.hint_tokens += 1
                gained_hint = True
        else:
            state.discard_pile.append(card.card_id)
            state.fuse_tokens_used += 1

        state.logs.append(PlayLog(
            log_id=self._next_log_id(state),
            turn=state.turn,
            actor_id=player.player_id,
            actor_name=player.name,
            card_id=card.card_id,
            suit=card.suit,
            number=card.number,
            success=success,
            gained_hint=gained_hint,
            fuse_tokens_used=state.fuse_tokens_used,
        ))

        outcome = "played" if success else "misplayed"
        changes = [f"{player.name} {outcome} {card.suit.value}{card.number}"]

        if not success and state.fuse_tokens_used >= state.settings.max_fuse_tokens:
            self._end_game(state, GameStatus.LOST, EndReason.FUSE_LIMIT_REACHED)
        elif not success and state.settings.endless_mode and not self._perfection_possible(state):
            self._end_game(state, GameStatus.LOST, EndReason.INDISPENSABLE_CARD_DISCARDED)
        elif success and state.all_fireworks_complete:
            self._end_game(state, GameStatus.WON, EndReason.ALL_FIREWORKS_COMPLETED)
        else:
            self._draw_replacement(state, player)

        self._finalize_turn(state)
        return changes

    def _handle_discard(self, state: GameState, action: Action) -> list[str]:
        """Handle discard action."""
        if state.hint_tokens >= state.settings.max_hint_tokens:
            raise RuleViolation(
                "Cannot discard while all hint tokens are available",
                ErrorCode.HINT_TOKENS_FULL,
            )

        player = state.current_player
        card = self._take_from_hand(state, player, action.payload.card_id, "discard")
        self._clear_recent_hints(state)
        state.discard_pile.append(card.card_id)
        state.hint_tokens += 1

        state.logs.append(DiscardLog(
            log_id=self._next_log_id(state),
            turn=state.turn,
            actor_id=player.player_id,
            actor_name=player.name,
            card_id=card.card_id,
            suit=card.suit,
            number=card.number,
            gained_hint=True,
        ))

        if state.settings.endless_mode and not self._perfection_possible(state):
            self._end_game(state, GameStatus.LOST, EndReason.INDISPENSABLE_CARD_DISCARDED)
        else:
            self._draw_replacement(state, player)

        self._finalize_turn(state)
        return [f"{player.name} discarded {card.suit.value}{card.number}"]

    def _handle_hint_color(self, state: GameState, action: Action) -> list[str]:
        """Handle color hint."""
        suit = self._require_nameable_suit(state, action.payload.suit)
        return self._give_hint(state, action.payload.target_player_id, Hint.color(suit))

    def _handle_hint_number(self, state: GameState, action: Action) -> list[str]:
        """Handle number hint."""
        number = self._require_card_number(action.payload.number)
        return self._give_hint(state, action.payload.target_player_id, Hint.of_number(number))

    def _give_hint(self, state: GameState, target_id: str | None, hint: Hint) -> list[str]:
        actor = state.current_player
        target = self._require_hint_target(state, target_id)
        if state.hint_tokens <= 0:
            raise RuleViolation("Cannot give a hint with zero hint tokens", ErrorCode.NO_HINT_TOKENS)

        touched = check_hint(state, target, hint)

        self._clear_recent_hints(state)
        state.hint_tokens -= 1
        apply_hint(state, target, hint, touched)

        state.logs.append(HintLog(
            log_id=self._next_log_id(state),
            turn=state.turn,
            actor_id=actor.player_id,
            actor_name=actor.name,
            target_id=target.player_id,
            target_name=target.name,
            hint_type=hint.hint_type,
            suit=hint.suit,
            number=hint.number,
            touched_card_ids=list(touched),
        ))

        self._finalize_turn(state)
        return [f"{actor.name} told {target.name} about {len(touched)} {hint.label} card(s)"]

    # =========================================================================
    # Selection workflow
    # =========================================================================

    def _handle_begin_play(self, state: GameState, action: Action) -> list[str]:
        if not state.current_player.cards:
            raise RuleViolation("Cannot play with no cards in hand", ErrorCode.EMPTY_HAND)
        state.ui = GameUiState(pending_action=PendingAction.PLAY)
        return []

    def _handle_begin_discard(self, state: GameState, action: Action) -> list[str]:
        if not state.current_player.cards:
            raise RuleViolation("Cannot discard with no cards in hand", ErrorCode.EMPTY_HAND)
        if state.hint_tokens >= state.settings.max_hint_tokens:
            raise RuleViolation(
                "Cannot discard while all hint tokens are available",
                ErrorCode.HINT_TOKENS_FULL,
            )
        state.ui = GameUiState(pending_action=PendingAction.DISCARD)
        return []

    def _handle_begin_hint(self, state: GameState, action: Action) -> list[str]:
        if state.hint_tokens <= 0:
            raise RuleViolation("Cannot give a hint with zero hint tokens", ErrorCode.NO_HINT_TOKENS)
        pending = (
            PendingAction.HINT_COLOR
            if action.action_type == ActionType.BEGIN_COLOR_HINT
            else PendingAction.HINT_NUMBER
        )
        state.ui = GameUiState(pending_action=pending)
        return []

    def _handle_select_card(self, state: GameState, action: Action) -> list[str]:
        if state.ui.pending_action not in {PendingAction.PLAY, PendingAction.DISCARD}:
            raise RuleViolation(
                "Card selection is only available for play or discard actions",
                ErrorCode.WRONG_SELECTION_STEP,
            )
        card_id = action.payload.card_id
        if card_id not in state.current_player.cards:
            raise RuleViolation(
                "Selected card is not in the current player hand",
                ErrorCode.CARD_NOT_IN_HAND,
            )
        state.ui.selected_card_id = card_id
        state.ui.highlighted_card_ids = [card_id]
        return []

    def _handle_select_hint_target(self, state: GameState, action: Action) -> list[str]:
        if state.ui.pending_action is None or not state.ui.pending_action.is_hint:
            raise RuleViolation(
                "Hint target selection is only available for hint actions",
                ErrorCode.WRONG_SELECTION_STEP,
            )
        target = self._require_hint_target(state, action.payload.target_player_id)
        state.ui.selected_target_player_id = target.player_id
        state.ui.highlighted_card_ids = draft_highlights(state, state.ui)
        return []

    def _handle_select_hint_color(self, state: GameState, action: Action) -> list[str]:
        if state.ui.pending_action != PendingAction.HINT_COLOR:
            raise RuleViolation(
                "Color selection is only available for color hints",
                ErrorCode.WRONG_SELECTION_STEP,
            )
        state.ui.selected_hint_suit = self._require_nameable_suit(state, action.payload.suit)
        state.ui.highlighted_card_ids = draft_highlights(state, state.ui)
        return []

    def _handle_select_hint_number(self, state: GameState, action: Action) -> list[str]:
        if state.ui.pending_action != PendingAction.HINT_NUMBER:
            raise RuleViolation(
                "Number selection is only available for number hints",
                ErrorCode.WRONG_SELECTION_STEP,
            )
        state.ui.selected_hint_number = self._require_card_number(action.payload.number)
        state.ui.highlighted_card_ids = draft_highlights(state, state.ui)
        return []

    def _handle_confirm(self, state: GameState, action: Action) -> list[str]:
        """Turn the draft into the matching turn action and apply it."""
        ui = state.ui
        pending = ui.pending_action
        if pending is None:
            raise RuleViolation("No pending action to confirm", ErrorCode.NO_PENDING_ACTION)

        actor_id = action.payload.player_id
        if pending in {PendingAction.PLAY, PendingAction.DISCARD}:
            if ui.selected_card_id is None:
                raise RuleViolation(
                    f"Select a card before confirming {pending.value}",
                    ErrorCode.INCOMPLETE_SELECTION,
                )
            if pending == PendingAction.PLAY:
                return self._handle_play(state, Action.play(ui.selected_card_id, actor_id))
            return self._handle_discard(state, Action.discard(ui.selected_card_id, actor_id))

        if pending == PendingAction.HINT_COLOR:
            if ui.selected_target_player_id is None or ui.selected_hint_suit is None:
                raise RuleViolation(
                    "Select a target and a color before confirming hint",
                    ErrorCode.INCOMPLETE_SELECTION,
                )
            return self._handle_hint_color(state, Action.hint_color(
                ui.selected_target_player_id, ui.selected_hint_suit, actor_id,
            ))

        if ui.selected_target_player_id is None or ui.selected_hint_number is None:
            raise RuleViolation(
                "Select a target and a number before confirming hint",
                ErrorCode.INCOMPLETE_SELECTION,
            )
        return self._handle_hint_number(state, Action.hint_number(
            ui.selected_target_player_id, ui.selected_hint_number, actor_id,
        ))

    def _handle_cancel(self, state: GameState, action: Action) -> list[str]:
        state.ui = GameUiState()
        return []

    # =========================================================================
    # Shared checks
    # =========================================================================

    def _take_from_hand(self, state: GameState, player: Player, card_id: str | None, verb: str) -> Card:
        """Remove a card from the player's hand and return it."""
        if not player.cards:
            raise RuleViolation(f"Cannot {verb} with no cards in hand", ErrorCode.EMPTY_HAND)
        if card_id not in player.cards:
            if state.get_card(card_id) is None:
                raise RuleViolation(f"Unknown card: {card_id}", ErrorCode.UNKNOWN_CARD)
            raise RuleViolation(
                f"Can only {verb} a card from the current player hand",
                ErrorCode.CARD_NOT_IN_HAND,
            )
        player.cards.remove(card_id)
        return state.cards[card_id]

    def _require_hint_target(self, state: GameState, target_id: str | None) -> Player:
        if target_id == state.current_player.player_id:
            raise RuleViolation("Cannot target yourself with a hint", ErrorCode.SELF_HINT)
        target = state.get_player(target_id) if target_id is not None else None
        if target is None:
            raise RuleViolation(f"Unknown player: {target_id}", ErrorCode.UNKNOWN_PLAYER)
        return target

    def _require_nameable_suit(self, state: GameState, value) -> Suit:
        """A suit that may be named in a color hint in this game."""
        try:
            suit = value if isinstance(value, Suit) else Suit(value)
        except ValueError:
            raise RuleViolation(f"Color {value} is not active in this game", ErrorCode.SUIT_NOT_ACTIVE)
        if suit not in state.settings.active_suits:
            raise RuleViolation(f"Color {suit.value} is not active in this game", ErrorCode.SUIT_NOT_ACTIVE)
        if state.settings.multicolor_wild_hints and suit == WILD_SUIT:
            raise RuleViolation(
                "Cannot call multicolor when multicolorWildHints=true",
                ErrorCode.WILD_SUIT_NOT_NAMEABLE,
            )
        return suit

    def _require_card_number(self, value) -> int:
        if isinstance(value, bool) or value not in CARD_NUMBERS:
            raise RuleViolation(f"Invalid hint number: {value}", ErrorCode.INVALID_NUMBER)
        return int(value)

    # =========================================================================
    # Bookkeeping
    # =========================================================================

    def _next_log_id(self, state: GameState) -> str:
        log_id = f"log-{state.next_log_id:04d}"
        state.next_log_id += 1
        return log_id

    def _clear_recent_hints(self, state: GameState) -> None:
        for card in state.cards.values():
            card.hints.recently_hinted = False

    def _draw_replacement(self, state: GameState, player: Player) -> None:
        if not state.draw_deck:
            return
        card_id = state.draw_deck.pop(0)
        player.cards.append(card_id)
        state.logs.append(DrawLog(
            log_id=self._next_log_id(state),
            turn=state.turn,
            actor_id=player.player_id,
            actor_name=player.name,
            card_id=card_id,
            remaining_deck=len(state.draw_deck),
        ))

    def _perfection_possible(self, state: GameState) -> bool:
        """
        Whether every active firework can still reach 5 using the cards left
        in the draw deck and in hands.
        """
        remaining = empty_counts()
        for card_id in state.draw_deck:
            card = state.cards[card_id]
            remaining[card.suit][card.number] += 1
        for player in state.players:
            for card_id in player.cards:
                card = state.cards[card_id]
                remaining[card.suit][card.number] += 1

        for suit in state.settings.active_suits:
            height = state.firework_height(suit)
            for number in CARD_NUMBERS:
                if number > height and remaining[suit][number] <= 0:
                    return False
        return True

    def _end_game(self, state: GameState, status: GameStatus, reason: EndReason) -> None:
        state.status = status
        state.last_round = None
        state.logs.append(StatusLog(
            log_id=self._next_log_id(state),
            turn=state.turn,
            status=status,
            reason=reason,
            score=state.score,
        ))
        logger.info("Game ended: %s (%s), score %d", status.value, reason.value, state.score)

    def _update_final_round(self, state: GameState) -> None:
        """Count down the final round once the draw deck is exhausted."""
        if state.settings.endless_mode:
            return

        if state.status == GameStatus.LAST_ROUND:
            state.last_round.turns_remaining -= 1
            if state.last_round.turns_remaining <= 0:
                self._end_game(state, GameStatus.FINISHED, EndReason.FINAL_ROUND_COMPLETE)
        elif state.status == GameStatus.ACTIVE and not state.draw_deck:
            # Every player, including the one who drew the last card, gets one more turn
            state.status = GameStatus.LAST_ROUND
            state.last_round = LastRoundState(turns_remaining=state.num_players)

    def _can_give_hint(self, state: GameState, index: int) -> bool:
        if state.hint_tokens <= 0:
            return False
        return any(
            player.cards for other, player in enumerate(state.players) if other != index
        )

    def _has_legal_action(self, state: GameState, index: int) -> bool:
        return bool(state.players[index].cards) or self._can_give_hint(state, index)

    def _advance_turn(self, state: GameState) -> None:
        """Move to the next seat that can act; fall back to the next seat."""
        count = state.num_players
        current = state.current_turn_player_index
        for offset in range(1, count + 1):
            candidate = (current + offset) % count
            if self._has_legal_action(state, candidate):
                state.current_turn_player_index = candidate
                return
        state.current_turn_player_index = (current + 1) % count

    def _finalize_turn(self, state: GameState) -> None:
        if not state.is_terminal:
            self._update_final_round(state)
        if not state.is_terminal:
            self._advance_turn(state)
        state.turn += 1
        state.ui = GameUiState()


def apply_action(state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer()
    return reducer.apply(state, action)
