"""
Perspective Projection - What one player is allowed to see.

A viewer sees every card except the ones in their own hand, whose suit and
number are masked; hints on those cards stay visible. The projection also
derives the public card-counting tables: how many copies of each card the
viewer can account for, and how many may still be hidden from them.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any

from ..errors import ErrorCode, RuleViolation
from .snapshot import serialize_hints, serialize_log, serialize_ui
from .state import (
    CARD_NUMBERS,
    SUITS,
    CardHints,
    GameLogEntry,
    GameState,
    GameStatus,
    GameUiState,
    Suit,
    empty_counts,
)

SuitCounts = dict[Suit, dict[int, int]]


@dataclass
class PerspectiveCard:
    card_id: str
    suit: Suit | None
    number: int | None
    hints: CardHints
    is_hidden_from_viewer: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.card_id,
            "suit": self.suit.value if self.suit is not None else None,
            "number": self.number,
            "hints": serialize_hints(self.hints),
            "isHiddenFromViewer": self.is_hidden_from_viewer,
        }


@dataclass
class PerspectivePlayer:
    player_id: str
    name: str
    is_viewer: bool
    is_current_turn: bool
    cards: list[PerspectiveCard] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.player_id,
            "name": self.name,
            "cards": [card.to_dict() for card in self.cards],
            "isViewer": self.is_viewer,
            "isCurrentTurn": self.is_current_turn,
        }


def _counts_to_dict(counts: SuitCounts) -> dict[str, dict[str, int]]:
    return {
        suit.value: {str(number): count for number, count in by_number.items()}
        for suit, by_number in counts.items()
    }


@dataclass
class PerspectiveState:
    """Read-only view of a game for one viewer."""
    viewer_id: str
    current_turn_player_id: str
    players: list[PerspectivePlayer]
    hint_tokens: int
    max_hint_tokens: int
    fuse_tokens_used: int
    max_fuse_tokens: int
    draw_deck_count: int
    status: GameStatus
    turn: int
    score: int
    active_suits: list[Suit]
    logs: list[GameLogEntry]
    ui: GameUiState
    fireworks_heights: dict[Suit, int]
    known_unavailable_counts: SuitCounts
    known_remaining_counts: SuitCounts

    def get_player(self, player_id: str) -> PerspectivePlayer | None:
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view with camelCase keys."""
        return {
            "viewerId": self.viewer_id,
            "currentTurnPlayerId": self.current_turn_player_id,
            "players": [player.to_dict() for player in self.players],
            "hintTokens": self.hint_tokens,
            "maxHintTokens": self.max_hint_tokens,
            "fuseTokensUsed": self.fuse_tokens_used,
            "maxFuseTokens": self.max_fuse_tokens,
            "drawDeckCount": self.draw_deck_count,
            "status": self.status.value,
            "turn": self.turn,
            "score": self.score,
            "activeSuits": [suit.value for suit in self.active_suits],
            "logs": [serialize_log(entry) for entry in self.logs],
            "ui": serialize_ui(self.ui),
            "fireworksHeights": {suit.value: height for suit, height in self.fireworks_heights.items()},
            "knownUnavailableCounts": _counts_to_dict(self.known_unavailable_counts),
            "knownRemainingCounts": _counts_to_dict(self.known_remaining_counts),
        }


def _unavailable_counts(state: GameState, viewer_id: str) -> SuitCounts:
    """Copies the viewer can see outside the draw deck and their own hand."""
    counts = empty_counts()
    visible = list(state.discard_pile)
    for suit in SUITS:
        visible.extend(state.fireworks[suit])
    for player in state.players:
        if player.player_id != viewer_id:
            visible.extend(player.cards)

    for card_id in visible:
        card = state.cards[card_id]
        counts[card.suit][card.number] += 1
    return counts


def project_perspective(state: GameState, viewer_id: str) -> PerspectiveState:
    """
    Project the state for `viewer_id`.

    Pure: returns independent copies and never mutates `state`. Raises
    RuleViolation for an unknown viewer.
    """
    viewer = state.get_player(viewer_id)
    if viewer is None:
        raise RuleViolation(f"Unknown perspective player: {viewer_id}", ErrorCode.UNKNOWN_PLAYER)

    current_id = state.current_player.player_id

    players = []
    for player in state.players:
        hidden = player.player_id == viewer_id
        cards = []
        for card_id in player.cards:
            card = state.cards[card_id]
            cards.append(PerspectiveCard(
                card_id=card.card_id,
                suit=None if hidden else card.suit,
                number=None if hidden else card.number,
                hints=deepcopy(card.hints),
                is_hidden_from_viewer=hidden,
            ))
        players.append(PerspectivePlayer(
            player_id=player.player_id,
            name=player.name,
            is_viewer=hidden,
            is_current_turn=player.player_id == current_id,
            cards=cards,
        ))

    unavailable = _unavailable_counts(state, viewer_id)
    remaining = {
        suit: {
            number: max(0, state.settings.copies_of(suit, number) - unavailable[suit][number])
            for number in CARD_NUMBERS
        }
        for suit in SUITS
    }

    return PerspectiveState(
        viewer_id=viewer_id,
        current_turn_player_id=current_id,
        players=players,
        hint_tokens=state.hint_tokens,
        max_hint_tokens=state.settings.max_hint_tokens,
        fuse_tokens_used=state.fuse_tokens_used,
        max_fuse_tokens=state.settings.max_fuse_tokens,
        draw_deck_count=len(state.draw_deck),
        status=state.status,
        turn=state.turn,
        score=state.score,
        active_suits=list(state.settings.active_suits),
        logs=deepcopy(state.logs),
        ui=deepcopy(state.ui),
        fireworks_heights={suit: state.firework_height(suit) for suit in SUITS},
        known_unavailable_counts=unavailable,
        known_remaining_counts=remaining,
    )
