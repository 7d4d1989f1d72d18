"""
Game State - The single mutable aggregate the engine owns.

Design principles:
- One owner: only the reducer mutates a GameState, and only a working copy
- Serializable: every field maps onto the wire snapshot (see snapshot.py)
- Suit-indexed: per-suit collections always carry every Suit member
- Gameplay vs. selection: the ui draft lives in its own sub-record
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union


class Suit(Enum):
    """Card suits. MULTICOLOR is the optional sixth, "wild" suit."""
    RED = "R"
    YELLOW = "Y"
    GREEN = "G"
    BLUE = "B"
    WHITE = "W"
    MULTICOLOR = "M"


SUITS: tuple[Suit, ...] = tuple(Suit)
BASE_SUITS: tuple[Suit, ...] = SUITS[:5]
WILD_SUIT = Suit.MULTICOLOR

CARD_NUMBERS: tuple[int, ...] = (1, 2, 3, 4, 5)
MAX_FIREWORK_HEIGHT = len(CARD_NUMBERS)

# Copies of each number per suit in the standard deck
CARD_COPIES: dict[int, int] = {1: 3, 2: 2, 3: 2, 4: 2, 5: 1}

MIN_PLAYERS = 2
MAX_PLAYERS = 5
DEFAULT_MAX_HINT_TOKENS = 8
DEFAULT_MAX_FUSE_TOKENS = 3


class GameStatus(Enum):
    """Lifecycle status of a game."""
    ACTIVE = "active"
    LAST_ROUND = "last_round"
    WON = "won"
    LOST = "lost"
    FINISHED = "finished"

    @property
    def is_terminal(self) -> bool:
        return self in {GameStatus.WON, GameStatus.LOST, GameStatus.FINISHED}


class EndReason(Enum):
    """Why a game reached a terminal status."""
    ALL_FIREWORKS_COMPLETED = "all_fireworks_completed"
    FUSE_LIMIT_REACHED = "fuse_limit_reached"
    FINAL_ROUND_COMPLETE = "final_round_complete"
    INDISPENSABLE_CARD_DISCARDED = "indispensable_card_discarded"


class PendingAction(Enum):
    """Kind of action being drafted through the selection workflow."""
    PLAY = "play"
    DISCARD = "discard"
    HINT_COLOR = "hint-color"
    HINT_NUMBER = "hint-number"

    @property
    def is_hint(self) -> bool:
        return self in {PendingAction.HINT_COLOR, PendingAction.HINT_NUMBER}


class HintType(Enum):
    COLOR = "color"
    NUMBER = "number"


def hand_size_for(num_players: int) -> int:
    """Five cards for up to three players, four otherwise."""
    return 5 if num_players <= 3 else 4


def normalize_player_name(name: str) -> str:
    """Key used to compare player names: trimmed, single-spaced, lowercase."""
    return " ".join(name.split()).lower()


@dataclass
class CardHints:
    """What is publicly known about a card from the hints it received."""
    color: Suit | None = None
    number: int | None = None
    not_colors: list[Suit] = field(default_factory=list)
    not_numbers: list[int] = field(default_factory=list)
    recently_hinted: bool = False


@dataclass
class Card:
    """
    A physical card. Identity never changes once dealt; only hints do.
    """
    card_id: str
    suit: Suit
    number: int
    hints: CardHints = field(default_factory=CardHints)


@dataclass
class Player:
    """A seat at the table and the ordered card ids in that player's hand."""
    player_id: str
    name: str
    cards: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GameSettings:
    """
    Per-game configuration. Fixed at setup, never mutated afterwards.
    """
    include_multicolor: bool = False
    multicolor_short_deck: bool = False
    multicolor_wild_hints: bool = False
    endless_mode: bool = False
    active_suits: tuple[Suit, ...] = BASE_SUITS
    max_hint_tokens: int = DEFAULT_MAX_HINT_TOKENS
    max_fuse_tokens: int = DEFAULT_MAX_FUSE_TOKENS
    hand_size: int = 5

    def copies_of(self, suit: Suit, number: int) -> int:
        """Total copies of a suit/number in this game's deck."""
        if suit == WILD_SUIT and self.multicolor_short_deck:
            return 1
        return CARD_COPIES[number]


@dataclass
class GameUiState:
    """
    Selection-in-progress draft. Synced with the snapshot so a draft
    survives a resync, but it is never a gameplay rule input.
    """
    pending_action: PendingAction | None = None
    selected_card_id: str | None = None
    selected_target_player_id: str | None = None
    selected_hint_suit: Suit | None = None
    selected_hint_number: int | None = None
    highlighted_card_ids: list[str] = field(default_factory=list)


@dataclass
class LastRoundState:
    """Countdown of committed actions left once the draw deck ran out."""
    turns_remaining: int


# =============================================================================
# Log entries
# =============================================================================

@dataclass
class HintLog:
    log_type: ClassVar[str] = "hint"
    log_id: str
    turn: int
    actor_id: str
    actor_name: str
    target_id: str
    target_name: str
    hint_type: HintType
    suit: Suit | None
    number: int | None
    touched_card_ids: list[str] = field(default_factory=list)


@dataclass
class PlayLog:
    log_type: ClassVar[str] = "play"
    log_id: str
    turn: int
    actor_id: str
    actor_name: str
    card_id: str
    suit: Suit
    number: int
    success: bool
    gained_hint: bool
    fuse_tokens_used: int


@dataclass
class DiscardLog:
    log_type: ClassVar[str] = "discard"
    log_id: str
    turn: int
    actor_id: str
    actor_name: str
    card_id: str
    suit: Suit
    number: int
    gained_hint: bool


@dataclass
class DrawLog:
    log_type: ClassVar[str] = "draw"
    log_id: str
    turn: int
    actor_id: str
    actor_name: str
    card_id: str
    remaining_deck: int


@dataclass
class StatusLog:
    log_type: ClassVar[str] = "status"
    log_id: str
    turn: int
    status: GameStatus
    reason: EndReason
    score: int


GameLogEntry = Union[HintLog, PlayLog, DiscardLog, DrawLog, StatusLog]


def empty_fireworks() -> dict[Suit, list[str]]:
    return {suit: [] for suit in SUITS}


def empty_counts() -> dict[Suit, dict[int, int]]:
    return {suit: {number: 0 for number in CARD_NUMBERS} for suit in SUITS}


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    A card's zone is derived from which collection holds its id:
    a hand, draw_deck, discard_pile or one of the fireworks piles.
    """
    players: list[Player] = field(default_factory=list)
    current_turn_player_index: int = 0
    cards: dict[str, Card] = field(default_factory=dict)
    draw_deck: list[str] = field(default_factory=list)
    discard_pile: list[str] = field(default_factory=list)
    fireworks: dict[Suit, list[str]] = field(default_factory=empty_fireworks)
    hint_tokens: int = DEFAULT_MAX_HINT_TOKENS
    fuse_tokens_used: int = 0
    status: GameStatus = GameStatus.ACTIVE
    last_round: LastRoundState | None = None
    logs: list[GameLogEntry] = field(default_factory=list)
    ui: GameUiState = field(default_factory=GameUiState)
    turn: int = 1
    next_log_id: int = 1
    settings: GameSettings = field(default_factory=GameSettings)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_turn_player_index]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def score(self) -> int:
        """Sum of firework heights over the active suits."""
        return sum(self.firework_height(suit) for suit in self.settings.active_suits)

    @property
    def all_fireworks_complete(self) -> bool:
        return all(
            self.firework_height(suit) == MAX_FIREWORK_HEIGHT
            for suit in self.settings.active_suits
        )

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def get_card(self, card_id: str) -> Card | None:
        return self.cards.get(card_id)

    def firework_height(self, suit: Suit) -> int:
        return len(self.fireworks.get(suit, ()))

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
