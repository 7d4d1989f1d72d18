"""
Hanabi - Authoritative rules engine for the cooperative card game.

A deterministic engine for hosting Hanabi tables. It provides:
- Seeded game setup with the multicolor, short-deck, wild-hint and endless variants
- Transactional action application with full state validation
- Per-player perspective views with card-counting tables
- Versioned wire snapshots for host/client sync
- An HTTP host surface and a small CLI
"""

__version__ = "0.1.0"

from .errors import ConfigurationError, ErrorCode, HanabiError, RuleViolation
from .engine_core import GameConfig, HanabiGame, StateValidationError

__all__ = [
    "ConfigurationError",
    "ErrorCode",
    "HanabiError",
    "RuleViolation",
    "GameConfig",
    "HanabiGame",
    "StateValidationError",
]
