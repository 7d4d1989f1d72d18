"""
Pytest fixtures for Hanabi tests.

Most tests use explicit decks so that every card id is known up front.
With two players the deal is round-robin, so the first player holds
c001, c003, c005, c007, c009, the second holds c002, c004, ..., c010 and
the draw deck starts at c011.
"""

import pytest

from ..engine_core.game import HanabiGame
from ..engine_core.setup import CardSeed, GameConfig
from ..engine_core.state import Suit

PLAYER_NAMES = ["Ana", "Ben", "Cleo", "Dev", "Eli"]


def deal_order(*hands, rest=()):
    """Deck order that deals `hands` round-robin, followed by `rest`."""
    order = []
    for cards in zip(*hands):
        order.extend(cards)
    order.extend(rest)
    return [CardSeed(Suit(code[0]), int(code[1])) for code in order]


@pytest.fixture
def make_game():
    """Factory for a game dealt from explicit hands, e.g. ("R1", "Y1", ...)."""
    def _make(*hands, rest=(), **options):
        config = GameConfig(
            player_names=PLAYER_NAMES[:len(hands)],
            deck=deal_order(*hands, rest=rest),
            **options,
        )
        return HanabiGame(config)
    return _make


@pytest.fixture
def standard_game(make_game) -> HanabiGame:
    """
    Two players, Ana to act.

    Ana (p1): R1 Y1 G1 B1 W1 as c001 c003 c005 c007 c009
    Ben (p2): R2 Y2 G2 B2 W2 as c002 c004 c006 c008 c010
    Deck:     R3 Y3 G3 B3 W3 R4 as c011..c016
    """
    return make_game(
        ("R1", "Y1", "G1", "B1", "W1"),
        ("R2", "Y2", "G2", "B2", "W2"),
        rest=("R3", "Y3", "G3", "B3", "W3", "R4"),
    )


@pytest.fixture
def two_red_game(make_game) -> HanabiGame:
    """
    Ben holds two red cards, so a red hint touches exactly two of them.

    Ana (p1): R1 Y1 G1 B1 W1 as c001 c003 c005 c007 c009
    Ben (p2): R2 R4 G2 B2 W2 as c002 c004 c006 c008 c010
    """
    return make_game(
        ("R1", "Y1", "G1", "B1", "W1"),
        ("R2", "R4", "G2", "B2", "W2"),
        rest=("Y3", "G3", "B3", "W3"),
    )


@pytest.fixture
def wild_game(make_game) -> HanabiGame:
    """
    Multicolor with wild hints.

    Ana (p1): R1 Y1 G1 B1 W1
    Ben (p2): M1 R2 Y3 G4 B5 as c002 c004 c006 c008 c010
    """
    return make_game(
        ("R1", "Y1", "G1", "B1", "W1"),
        ("M1", "R2", "Y3", "G4", "B5"),
        rest=("R3", "Y2", "G2", "W2"),
        include_multicolor=True,
        multicolor_wild_hints=True,
    )


@pytest.fixture
def seeded_game() -> HanabiGame:
    """A shuffled standard two-player game."""
    return HanabiGame(GameConfig(player_names=["Ana", "Ben"], shuffle_seed=42))
