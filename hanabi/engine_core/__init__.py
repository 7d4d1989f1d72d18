"""
Engine Core - Deterministic Hanabi state management.

The engine is the runtime that:
1. Sets up a game from a configuration (optionally seeded)
2. Owns the committed GameState
3. Applies actions via the reducer, transactionally
4. Validates every state it commits or restores
5. Projects per-player views and wire snapshots
"""

from .state import (
    Card,
    CardHints,
    EndReason,
    GameSettings,
    GameState,
    GameStatus,
    GameUiState,
    HintType,
    PendingAction,
    Player,
    Suit,
)
from .action import Action, ActionType, ActionPayload, ActionResult
from .setup import CardSeed, GameConfig, build_deck, create_initial_state
from .shuffle import SeededRandom, shuffle_deck
from .reducer import Reducer, apply_action
from .validation import StateValidationError, ValidationResult, assert_valid_state, validate_state
from .perspective import PerspectiveState, project_perspective
from .snapshot import deserialize_state, dumps, loads, restore_state, serialize_state
from .game import HanabiGame

__all__ = [
    "Card",
    "CardHints",
    "EndReason",
    "GameSettings",
    "GameState",
    "GameStatus",
    "GameUiState",
    "HintType",
    "PendingAction",
    "Player",
    "Suit",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "CardSeed",
    "GameConfig",
    "build_deck",
    "create_initial_state",
    "SeededRandom",
    "shuffle_deck",
    "Reducer",
    "apply_action",
    "StateValidationError",
    "ValidationResult",
    "assert_valid_state",
    "validate_state",
    "PerspectiveState",
    "project_perspective",
    "deserialize_state",
    "dumps",
    "loads",
    "restore_state",
    "serialize_state",
    "HanabiGame",
]
