"""
Hint Model - Per-card belief state and hint legality.

A hint is legal when it touches at least one card in the target's hand and
would change at least one card's recorded knowledge. Legality is decided by
pure functions here before the reducer mutates anything.

Two semantics exist for color hints:
- Standard: a card knows its color or a list of excluded colors.
- Wild hints: the multicolor suit answers to every color hint, so a card
  tracks an ordered set of candidate suits instead.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..errors import ErrorCode, RuleViolation
from .state import (
    CARD_NUMBERS,
    WILD_SUIT,
    Card,
    GameSettings,
    GameState,
    GameUiState,
    HintType,
    PendingAction,
    Player,
    Suit,
)


@dataclass(frozen=True)
class Hint:
    """A color or number clue, independent of who gives it."""
    hint_type: HintType
    suit: Suit | None = None
    number: int | None = None

    @classmethod
    def color(cls, suit: Suit) -> Hint:
        return cls(hint_type=HintType.COLOR, suit=suit)

    @classmethod
    def of_number(cls, number: int) -> Hint:
        return cls(hint_type=HintType.NUMBER, number=number)

    @property
    def label(self) -> str:
        return self.suit.value if self.hint_type == HintType.COLOR else str(self.number)


def uses_wild_semantics(settings: GameSettings, hint: Hint) -> bool:
    return (
        hint.hint_type == HintType.COLOR
        and settings.multicolor_wild_hints
        and hint.suit != WILD_SUIT
    )


def matches_color_hint(settings: GameSettings, card_suit: Suit, hint_suit: Suit) -> bool:
    """Whether a card of `card_suit` is touched by a color hint for `hint_suit`."""
    if card_suit == hint_suit:
        return True
    return settings.multicolor_wild_hints and card_suit == WILD_SUIT and hint_suit != WILD_SUIT


def card_matches(settings: GameSettings, card: Card, hint: Hint) -> bool:
    if hint.hint_type == HintType.NUMBER:
        return card.number == hint.number
    return matches_color_hint(settings, card.suit, hint.suit)


def touched_card_ids(state: GameState, target: Player, hint: Hint) -> list[str]:
    """Cards in the target's hand the hint would touch, in hand order."""
    touched = []
    for card_id in target.cards:
        card = state.cards.get(card_id)
        if card is None:
            raise RuleViolation(f"Unknown card in target hand: {card_id}", ErrorCode.UNKNOWN_CARD)
        if card_matches(state.settings, card, hint):
            touched.append(card_id)
    return touched


# =============================================================================
# Candidate suits (wild hints)
# =============================================================================

def possible_suits(settings: GameSettings, card: Card) -> list[Suit]:
    """Known color, or every active suit not yet excluded, in suit order."""
    if card.hints.color is not None:
        return [card.hints.color]
    return [suit for suit in settings.active_suits if suit not in card.hints.not_colors]


def narrow_possible_suits(current: list[Suit], hint_suit: Suit, touched: bool) -> list[Suit]:
    """Candidate suits after a wild-semantics color hint for `hint_suit`."""
    allowed = {hint_suit, WILD_SUIT}
    if touched:
        return [suit for suit in current if suit in allowed]
    return [suit for suit in current if suit not in allowed]


def set_possible_suits(settings: GameSettings, card: Card, suits: list[Suit]) -> None:
    unique = list(dict.fromkeys(suits))
    if not unique:
        raise RuleViolation(
            f"Color hint would make card {card.card_id} have no possible suits",
            ErrorCode.CONTRADICTORY_HINT,
        )
    card.hints.not_colors = [suit for suit in settings.active_suits if suit not in unique]
    card.hints.color = unique[0] if len(unique) == 1 else None


# =============================================================================
# Redundancy
# =============================================================================

def _card_already_knows(card: Card, hint: Hint, touched: bool) -> bool:
    if hint.hint_type == HintType.NUMBER:
        known, excluded, value = card.hints.number, card.hints.not_numbers, hint.number
    else:
        known, excluded, value = card.hints.color, card.hints.not_colors, hint.suit

    if touched:
        return known == value and value not in excluded
    return value in excluded


def is_redundant_hint(state: GameState, target: Player, hint: Hint, touched: list[str]) -> bool:
    """
    True iff applying the hint would change no card's belief state.

    Pure: never mutates `state`.
    """
    touched_set = set(touched)
    wild = uses_wild_semantics(state.settings, hint)

    for card_id in target.cards:
        card = state.cards[card_id]
        is_touched = card_id in touched_set
        if wild:
            current = possible_suits(state.settings, card)
            if narrow_possible_suits(current, hint.suit, is_touched) != current:
                return False
        elif not _card_already_knows(card, hint, is_touched):
            return False

    return True


# =============================================================================
# Legality + application
# =============================================================================

def check_hint(state: GameState, target: Player, hint: Hint) -> list[str]:
    """
    Decide whether the hint may be given to `target`.

    Returns the touched card ids. Raises RuleViolation when the hint touches
    nothing, is redundant, or (wild hints) would leave a card without any
    candidate suit.
    """
    if hint.hint_type == HintType.NUMBER and (
        isinstance(hint.number, bool) or hint.number not in CARD_NUMBERS
    ):
        raise RuleViolation(f"Invalid hint number: {hint.number}", ErrorCode.INVALID_NUMBER)

    touched = touched_card_ids(state, target, hint)
    if not touched:
        raise RuleViolation(
            f"Hint must touch at least one card ({hint.label})",
            ErrorCode.HINT_TOUCHES_NOTHING,
        )

    if uses_wild_semantics(state.settings, hint):
        touched_set = set(touched)
        for card_id in target.cards:
            current = possible_suits(state.settings, state.cards[card_id])
            if not narrow_possible_suits(current, hint.suit, card_id in touched_set):
                raise RuleViolation(
                    f"Color hint would make card {card_id} have no possible suits",
                    ErrorCode.CONTRADICTORY_HINT,
                )

    if is_redundant_hint(state, target, hint, touched):
        raise RuleViolation("Hint would provide no new information", ErrorCode.REDUNDANT_HINT)

    return touched


def apply_hint(state: GameState, target: Player, hint: Hint, touched: list[str]) -> None:
    """Record the hint on every card in the target's hand. Call check_hint first."""
    touched_set = set(touched)

    if uses_wild_semantics(state.settings, hint):
        for card_id in target.cards:
            card = state.cards[card_id]
            is_touched = card_id in touched_set
            narrowed = narrow_possible_suits(
                possible_suits(state.settings, card), hint.suit, is_touched
            )
            set_possible_suits(state.settings, card, narrowed)
            card.hints.recently_hinted = is_touched
        return

    for card_id in target.cards:
        hints = state.cards[card_id].hints
        if hint.hint_type == HintType.NUMBER:
            known_attr, excluded, value = "number", hints.not_numbers, hint.number
        else:
            known_attr, excluded, value = "color", hints.not_colors, hint.suit

        if card_id in touched_set:
            setattr(hints, known_attr, value)
            excluded[:] = [v for v in excluded if v != value]
            hints.recently_hinted = True
        elif value not in excluded:
            excluded.append(value)


def draft_highlights(state: GameState, ui: GameUiState) -> list[str]:
    """Live preview of which cards the drafted hint would touch."""
    if ui.pending_action is None or not ui.pending_action.is_hint:
        return []
    if ui.selected_target_player_id is None:
        return []

    target = state.get_player(ui.selected_target_player_id)
    if target is None:
        raise RuleViolation(
            f"Unknown player: {ui.selected_target_player_id}", ErrorCode.UNKNOWN_PLAYER
        )

    if ui.pending_action == PendingAction.HINT_COLOR:
        if ui.selected_hint_suit is None:
            return []
        return touched_card_ids(state, target, Hint.color(ui.selected_hint_suit))

    if ui.selected_hint_number is None:
        return []
    return touched_card_ids(state, target, Hint.of_number(ui.selected_hint_number))
