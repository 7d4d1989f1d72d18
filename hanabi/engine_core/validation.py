"""
State Validation - Structural invariants of a GameState.

Validates that:
1. Settings and token counts are self-consistent
2. Every card lives in exactly one zone
3. Firework piles are well-formed
4. Players, logs and the ui draft reference things that exist
5. Status, last-round and ui fields agree with each other

Runs after every committed action and on every restored snapshot.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from ..errors import HanabiError
from .state import (
    CARD_NUMBERS,
    MAX_FIREWORK_HEIGHT,
    MAX_PLAYERS,
    MIN_PLAYERS,
    SUITS,
    WILD_SUIT,
    GameState,
    GameStatus,
    PendingAction,
    Suit,
    normalize_player_name,
)

logger = logging.getLogger(__name__)


class StateValidationError(HanabiError):
    """Raised when a state breaks one or more invariants."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        summary = errors[0] if len(errors) == 1 else f"{len(errors)} invariant violation(s)"
        super().__init__(f"State validation failed: {summary}")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_card_number(value) -> bool:
    return _is_int(value) and value in CARD_NUMBERS


def validate_state(state: GameState) -> ValidationResult:
    """
    Check every invariant and collect all failures.

    Never raises for a malformed state; use assert_valid_state for that.
    """
    errors: list[str] = []
    warnings: list[str] = []

    errors.extend(_validate_settings(state))
    errors.extend(_validate_counters(state))
    errors.extend(_validate_cards(state))
    errors.extend(_validate_fireworks(state))
    errors.extend(_validate_zones(state))
    errors.extend(_validate_logs(state, warnings))
    errors.extend(_validate_ui(state))

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def assert_valid_state(state: GameState) -> None:
    """Raise StateValidationError if the state breaks any invariant."""
    result = validate_state(state)
    if not result.valid:
        logger.warning("State failed validation: %s", "; ".join(result.errors))
        raise StateValidationError(result.errors)


# =============================================================================
# Sections
# =============================================================================

def _validate_settings(state: GameState) -> list[str]:
    errors = []
    settings = state.settings

    if not _is_int(settings.max_hint_tokens) or settings.max_hint_tokens <= 0:
        errors.append("Invalid maxHintTokens")
    if not _is_int(settings.max_fuse_tokens) or settings.max_fuse_tokens <= 0:
        errors.append("Invalid maxFuseTokens")
    if not _is_int(settings.hand_size) or settings.hand_size <= 0:
        errors.append("Invalid handSize")

    active = list(settings.active_suits)
    if not active:
        errors.append("activeSuits cannot be empty")
    for suit in active:
        if not isinstance(suit, Suit):
            errors.append(f"Invalid active suit: {suit}")
    if len(set(active)) != len(active):
        errors.append("activeSuits must not contain duplicates")

    if settings.include_multicolor and WILD_SUIT not in active:
        errors.append("Multicolor suit must be active when includeMulticolor=true")
    if not settings.include_multicolor and WILD_SUIT in active:
        errors.append("Multicolor suit cannot be active when includeMulticolor=false")

    if settings.multicolor_short_deck and not settings.include_multicolor:
        errors.append("multicolorShortDeck requires includeMulticolor=true")
    if settings.multicolor_wild_hints:
        if not settings.include_multicolor:
            errors.append("multicolorWildHints requires includeMulticolor=true")
        if settings.multicolor_short_deck:
            errors.append("multicolorWildHints cannot be combined with multicolorShortDeck")

    return errors


def _validate_counters(state: GameState) -> list[str]:
    errors = []
    settings = state.settings

    if not MIN_PLAYERS <= len(state.players) <= MAX_PLAYERS:
        errors.append(f"State must have {MIN_PLAYERS} to {MAX_PLAYERS} players")
    if not _is_int(state.current_turn_player_index) or not (
        0 <= state.current_turn_player_index < len(state.players)
    ):
        errors.append("currentTurnPlayerIndex is out of range")

    if not _is_int(state.hint_tokens) or not 0 <= state.hint_tokens <= settings.max_hint_tokens:
        errors.append("hintTokens is out of range")
    if not _is_int(state.fuse_tokens_used) or not (
        0 <= state.fuse_tokens_used <= settings.max_fuse_tokens
    ):
        errors.append("fuseTokensUsed is out of range")

    if not isinstance(state.status, GameStatus):
        errors.append("Invalid game status")

    if state.status == GameStatus.LAST_ROUND:
        if state.last_round is None:
            errors.append("lastRound state is required when status is last_round")
        elif not _is_int(state.last_round.turns_remaining) or state.last_round.turns_remaining <= 0:
            errors.append("lastRound.turnsRemaining must be positive")
    elif state.last_round is not None:
        errors.append("lastRound must be null unless status is last_round")

    if not _is_int(state.turn) or state.turn < 1:
        errors.append("turn must be a positive integer")
    if not _is_int(state.next_log_id) or state.next_log_id < 1:
        errors.append("nextLogId must be a positive integer")

    if state.status == GameStatus.WON and not state.all_fireworks_complete:
        errors.append("Won state requires all active fireworks to be complete")

    return errors


def _validate_cards(state: GameState) -> list[str]:
    errors = []
    if not state.cards:
        errors.append("cards map cannot be empty")

    for card_id, card in state.cards.items():
        if card.card_id != card_id:
            errors.append(f"Card id mismatch for {card_id}")
        if not isinstance(card.suit, Suit):
            errors.append(f"Invalid suit for card {card_id}")
        elif card.suit == WILD_SUIT and not state.settings.include_multicolor:
            errors.append("Found multicolor card while includeMulticolor=false")
        if not _is_card_number(card.number):
            errors.append(f"Invalid number for card {card_id}")

        hints = card.hints
        if hints.color is not None and not isinstance(hints.color, Suit):
            errors.append(f"Invalid hint color for card {card_id}")
        if hints.number is not None and not _is_card_number(hints.number):
            errors.append(f"Invalid hint number for card {card_id}")
        if any(not isinstance(suit, Suit) for suit in hints.not_colors):
            errors.append(f"Invalid notColor hint for card {card_id}")
        if len(set(hints.not_colors)) != len(hints.not_colors):
            errors.append(f"Duplicate notColors for card {card_id}")
        if any(not _is_card_number(number) for number in hints.not_numbers):
            errors.append(f"Invalid notNumber hint for card {card_id}")
        if len(set(hints.not_numbers)) != len(hints.not_numbers):
            errors.append(f"Duplicate notNumbers for card {card_id}")
        if hints.color is not None and hints.color in hints.not_colors:
            errors.append(f"Card {card_id} both knows and excludes color {hints.color.value}")
        if hints.number is not None and hints.number in hints.not_numbers:
            errors.append(f"Card {card_id} both knows and excludes number {hints.number}")
        if not isinstance(hints.recently_hinted, bool):
            errors.append(f"recentlyHinted must be boolean for card {card_id}")

    return errors


def _validate_fireworks(state: GameState) -> list[str]:
    errors = []
    active = set(state.settings.active_suits)

    for suit in SUITS:
        pile = state.fireworks.get(suit)
        if pile is None:
            errors.append(f"Missing firework array for suit {suit.value}")
            continue
        if suit not in active and pile:
            errors.append(f"Inactive suit {suit.value} cannot have cards in fireworks")
        if len(pile) > MAX_FIREWORK_HEIGHT:
            errors.append(f"Firework {suit.value} is taller than {MAX_FIREWORK_HEIGHT}")

        for expected, card_id in enumerate(pile, start=1):
            card = state.cards.get(card_id)
            if card is None:
                errors.append(f"Unknown card in fireworks: {card_id}")
                continue
            if card.suit != suit:
                errors.append(f"Card {card_id} is in wrong firework pile")
            if card.number != expected:
                errors.append(f"Firework {suit.value} must be in ascending order starting at 1")
                break

    return errors


def _validate_zones(state: GameState) -> list[str]:
    """Players are well-formed and the zones partition the card-id set."""
    errors = []
    seen: set[str] = set()

    def place(card_id: str, zone: str) -> None:
        if card_id not in state.cards:
            errors.append(f"Unknown card in {zone}: {card_id}")
        elif card_id in seen:
            errors.append(f"Card appears in multiple zones: {card_id}")
        seen.add(card_id)

    player_ids: set[str] = set()
    names: set[str] = set()
    for player in state.players:
        if not isinstance(player.player_id, str) or not player.player_id:
            errors.append("Player id must be a non-empty string")
        elif player.player_id in player_ids:
            errors.append(f"Duplicate player id: {player.player_id}")
        player_ids.add(player.player_id)

        if not isinstance(player.name, str) or not player.name.strip():
            errors.append("Player name must be non-empty")
        else:
            key = normalize_player_name(player.name)
            if key in names:
                errors.append(f"Duplicate player name: {player.name}")
            names.add(key)

        for card_id in player.cards:
            place(card_id, "hand")

    for card_id in state.draw_deck:
        place(card_id, "drawDeck")
    for card_id in state.discard_pile:
        place(card_id, "discard pile")
    for suit in SUITS:
        for card_id in state.fireworks.get(suit, []):
            place(card_id, "fireworks")

    if seen != set(state.cards):
        errors.append("Every card must exist in exactly one zone (hand, deck, discard, or fireworks)")

    return errors


def _validate_logs(state: GameState, warnings: list[str]) -> list[str]:
    errors = []
    log_ids: set[str] = set()

    for log in state.logs:
        if not isinstance(log.log_id, str) or not log.log_id:
            errors.append("Log id must be a non-empty string")
        elif log.log_id in log_ids:
            errors.append(f"Duplicate log id: {log.log_id}")
        log_ids.add(log.log_id)

        if not _is_int(log.turn) or log.turn < 1:
            errors.append(f"Invalid log turn for log {log.log_id}")
        elif _is_int(state.turn) and log.turn > state.turn:
            warnings.append(f"Log {log.log_id} is stamped after the current turn")

    return errors


def _validate_ui(state: GameState) -> list[str]:
    errors = []
    ui = state.ui
    pending = ui.pending_action

    if pending is not None and not isinstance(pending, PendingAction):
        errors.append("Invalid pendingAction")
    if ui.selected_hint_suit is not None and not isinstance(ui.selected_hint_suit, Suit):
        errors.append("selectedHintSuit must be a suit or null")
    if ui.selected_hint_number is not None and not _is_card_number(ui.selected_hint_number):
        errors.append("selectedHintNumber must be a number or null")
    for card_id in ui.highlighted_card_ids:
        if card_id not in state.cards:
            errors.append(f"Unknown highlighted card: {card_id}")

    if pending is None:
        if ui.selected_card_id is not None:
            errors.append("selectedCardId must be null when no action is pending")
        if ui.selected_target_player_id is not None:
            errors.append("selectedTargetPlayerId must be null when no action is pending")
        if ui.selected_hint_suit is not None:
            errors.append("selectedHintSuit must be null when no action is pending")
        if ui.selected_hint_number is not None:
            errors.append("selectedHintNumber must be null when no action is pending")
        if ui.highlighted_card_ids:
            errors.append("highlightedCardIds must be empty when no action is pending")
    elif pending in {PendingAction.PLAY, PendingAction.DISCARD}:
        if ui.selected_target_player_id is not None:
            errors.append("target selection is invalid for play/discard")
        if ui.selected_hint_suit is not None:
            errors.append("hint suit selection is invalid for play/discard")
        if ui.selected_hint_number is not None:
            errors.append("hint number selection is invalid for play/discard")
    elif isinstance(pending, PendingAction) and pending.is_hint:
        if ui.selected_card_id is not None:
            errors.append("card selection is invalid for hint actions")
        if ui.selected_target_player_id is not None and state.get_player(
            ui.selected_target_player_id
        ) is None:
            errors.append("selectedTargetPlayerId references unknown player")

    if isinstance(state.status, GameStatus) and state.status.is_terminal and pending is not None:
        errors.append("No action can be pending when the game is over")

    return errors
