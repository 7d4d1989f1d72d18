"""
Game Setup - Creates the initial game state.

This module handles:
- Validating a new-game configuration
- Building the card multiset for the chosen variants
- Shuffling with a seed for determinism
- Assigning stable card ids and dealing starting hands
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field

from ..errors import ConfigurationError
from .shuffle import shuffle_deck
from .state import (
    BASE_SUITS,
    CARD_COPIES,
    CARD_NUMBERS,
    DEFAULT_MAX_FUSE_TOKENS,
    DEFAULT_MAX_HINT_TOKENS,
    MAX_PLAYERS,
    MIN_PLAYERS,
    SUITS,
    WILD_SUIT,
    Card,
    CardHints,
    GameSettings,
    GameState,
    GameStatus,
    GameUiState,
    LastRoundState,
    Player,
    Suit,
    empty_fireworks,
    hand_size_for,
    normalize_player_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CardSeed:
    """Identity of a card before it receives an id."""
    suit: Suit
    number: int


@dataclass
class GameConfig:
    """
    New-game configuration.

    `deck`, when given, is used in order (top of the deck first) and is not
    shuffled. Otherwise the standard deck is built and shuffled, with
    `shuffle_seed` making the order reproducible.
    """
    player_names: list[str] = field(default_factory=lambda: ["Player 1", "Player 2"])
    player_ids: list[str] | None = None
    include_multicolor: bool = False
    multicolor_short_deck: bool = False
    multicolor_wild_hints: bool = False
    endless_mode: bool = False
    max_hint_tokens: int = DEFAULT_MAX_HINT_TOKENS
    max_fuse_tokens: int = DEFAULT_MAX_FUSE_TOKENS
    starting_player_index: int = 0
    deck: list[CardSeed] | None = None
    shuffle_seed: int | float | None = None


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def build_deck(include_multicolor: bool, multicolor_short_deck: bool = False) -> list[CardSeed]:
    """Build the unshuffled card multiset, suit by suit then number by number."""
    suits = SUITS if include_multicolor else BASE_SUITS
    deck = []
    for suit in suits:
        for number in CARD_NUMBERS:
            copies = 1 if suit == WILD_SUIT and multicolor_short_deck else CARD_COPIES[number]
            deck.extend(CardSeed(suit=suit, number=number) for _ in range(copies))
    return deck


def _coerce_deck(deck: list) -> list[CardSeed]:
    """Validate an explicit deck; accepts CardSeeds, (suit, number) pairs or dicts."""
    _require(isinstance(deck, list), "deck must be a list")
    _require(len(deck) > 0, "deck must not be empty")

    seeds = []
    for entry in deck:
        if isinstance(entry, CardSeed):
            raw_suit, raw_number = entry.suit, entry.number
        elif isinstance(entry, dict):
            raw_suit, raw_number = entry.get("suit"), entry.get("number")
        elif isinstance(entry, (tuple, list)) and len(entry) == 2:
            raw_suit, raw_number = entry
        else:
            raise ConfigurationError(f"Invalid card in deck: {entry!r}")

        try:
            suit = raw_suit if isinstance(raw_suit, Suit) else Suit(raw_suit)
        except ValueError:
            raise ConfigurationError(f"Invalid suit in deck: {raw_suit}")
        if isinstance(raw_number, bool) or raw_number not in CARD_NUMBERS:
            raise ConfigurationError(f"Invalid number in deck: {raw_number}")
        seeds.append(CardSeed(suit=suit, number=int(raw_number)))

    return seeds


def _validate_players(config: GameConfig) -> tuple[list[str], list[str]]:
    names = config.player_names
    _require(isinstance(names, list), "playerNames must be a list")
    _require(
        MIN_PLAYERS <= len(names) <= MAX_PLAYERS,
        f"Hanabi supports {MIN_PLAYERS} to {MAX_PLAYERS} players",
    )

    ids = config.player_ids if config.player_ids is not None else [
        f"p{index + 1}" for index in range(len(names))
    ]
    _require(len(ids) == len(names), "playerIds length must match playerNames length")
    _require(all(isinstance(pid, str) and pid for pid in ids), "playerIds must be non-empty strings")
    _require(len(set(ids)) == len(ids), "playerIds must be unique")

    for name in names:
        _require(isinstance(name, str) and name.strip(), "player names must be non-empty strings")
    normalized = {normalize_player_name(name) for name in names}
    _require(len(normalized) == len(names), "playerNames must be unique")

    return list(names), list(ids)


def _validate_variants(config: GameConfig) -> None:
    if config.multicolor_short_deck and not config.include_multicolor:
        raise ConfigurationError("multicolorShortDeck requires includeMulticolor=true")
    if config.multicolor_wild_hints and not config.include_multicolor:
        raise ConfigurationError("multicolorWildHints requires includeMulticolor=true")
    if config.multicolor_wild_hints and config.multicolor_short_deck:
        raise ConfigurationError("multicolorWildHints cannot be combined with multicolorShortDeck")

    _require(_is_positive_int(config.max_hint_tokens), "maxHintTokens must be a positive integer")
    _require(_is_positive_int(config.max_fuse_tokens), "maxFuseTokens must be a positive integer")

    if config.shuffle_seed is not None:
        _require(
            isinstance(config.shuffle_seed, (int, float))
            and not isinstance(config.shuffle_seed, bool)
            and math.isfinite(config.shuffle_seed),
            "shuffleSeed must be a finite number",
        )


def create_initial_state(config: GameConfig | None = None) -> GameState:
    """
    Set up a new game.

    Raises ConfigurationError when a precondition fails; nothing is built
    in that case.
    """
    config = config or GameConfig()
    names, ids = _validate_players(config)
    _validate_variants(config)

    if config.deck is not None:
        ordered_deck = _coerce_deck(config.deck)
        if not config.include_multicolor:
            _require(
                all(seed.suit != WILD_SUIT for seed in ordered_deck),
                "Multicolor cards in deck require includeMulticolor=true",
            )
    else:
        ordered_deck = shuffle_deck(
            build_deck(config.include_multicolor, config.multicolor_short_deck),
            config.shuffle_seed,
        )

    cards: dict[str, Card] = {}
    draw_deck: list[str] = []
    for index, seed in enumerate(ordered_deck):
        card_id = f"c{index + 1:03d}"
        cards[card_id] = Card(card_id=card_id, suit=seed.suit, number=seed.number, hints=CardHints())
        draw_deck.append(card_id)

    players = [Player(player_id=pid, name=name) for pid, name in zip(ids, names)]
    hand_size = hand_size_for(len(players))

    required = len(players) * hand_size
    if len(draw_deck) < required:
        raise ConfigurationError(f"Deck must contain at least {required} cards to deal starting hands")

    # Round-robin: one card to each seat per round
    for _ in range(hand_size):
        for player in players:
            player.cards.append(draw_deck.pop(0))

    start = config.starting_player_index
    _require(
        isinstance(start, int) and not isinstance(start, bool) and 0 <= start < len(players),
        "startingPlayerIndex is out of range",
    )

    settings = GameSettings(
        include_multicolor=config.include_multicolor,
        multicolor_short_deck=config.multicolor_short_deck,
        multicolor_wild_hints=config.multicolor_wild_hints,
        endless_mode=config.endless_mode,
        active_suits=SUITS if config.include_multicolor else BASE_SUITS,
        max_hint_tokens=config.max_hint_tokens,
        max_fuse_tokens=config.max_fuse_tokens,
        hand_size=hand_size,
    )

    # A deal that uses up the whole deck starts straight into the final round
    status = GameStatus.ACTIVE
    last_round = None
    if not draw_deck and not config.endless_mode:
        status = GameStatus.LAST_ROUND
        last_round = LastRoundState(turns_remaining=len(players))

    logger.info(
        "Created game for %d players (%d cards, seed=%s)",
        len(players), len(cards), config.shuffle_seed,
    )

    return GameState(
        players=players,
        current_turn_player_index=start,
        cards=cards,
        draw_deck=draw_deck,
        discard_pile=[],
        fireworks=empty_fireworks(),
        hint_tokens=config.max_hint_tokens,
        fuse_tokens_used=0,
        status=status,
        last_round=last_round,
        logs=[],
        ui=GameUiState(),
        turn=1,
        next_log_id=1,
        settings=settings,
    )
