"""
Pydantic Schemas for API - Request/response models for the host surface.

These models define the contract between table clients and the
authoritative host. Game snapshots and perspective views are carried as the
engine's own camelCase JSON documents.

Error Codes:
- TABLE_NOT_FOUND: Table does not exist or was closed
- INVALID_CONFIGURATION: New-game options failed their preconditions
- INVALID_SNAPSHOT: Snapshot is malformed or breaks a game invariant
- UNKNOWN_PLAYER: Perspective requested for a player not at the table
- ACTION_REJECTED: Action broke a game rule; `details.rule_code` says which
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ActionKind(str, Enum):
    """Turn actions a client can submit."""
    PLAY = "play"
    DISCARD = "discard"
    HINT_COLOR = "hint_color"
    HINT_NUMBER = "hint_number"


class ErrorCode(str, Enum):
    """Structured error codes."""
    TABLE_NOT_FOUND = "TABLE_NOT_FOUND"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    INVALID_SNAPSHOT = "INVALID_SNAPSHOT"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    ACTION_REJECTED = "ACTION_REJECTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Request Models
# =============================================================================

class DeckCard(BaseModel):
    """One card of an explicit deck, top of the deck first."""
    suit: str = Field(..., description="R, Y, G, B, W or M")
    number: int = Field(..., description="1 to 5")


class CreateTableRequest(BaseModel):
    """Options for a new game."""
    player_names: list[str] = Field(default_factory=lambda: ["Player 1", "Player 2"])
    player_ids: Optional[list[str]] = Field(None, description="Defaults to p1..pN")
    include_multicolor: bool = False
    multicolor_short_deck: bool = False
    multicolor_wild_hints: bool = False
    endless_mode: bool = False
    max_hint_tokens: int = 8
    max_fuse_tokens: int = 3
    starting_player_index: int = 0
    deck: Optional[list[DeckCard]] = Field(None, description="Explicit deck order (not shuffled)")
    shuffle_seed: Optional[int] = Field(None, description="Seed for a reproducible shuffle")


class RestoreTableRequest(BaseModel):
    """Re-host a game from a snapshot."""
    snapshot: dict[str, Any] = Field(..., description="Complete game snapshot")


class ActionRequest(BaseModel):
    """A turn action tagged with the acting player."""
    action_type: ActionKind
    player_id: str = Field(..., description="Acting player; must hold the turn")
    card_id: Optional[str] = Field(None, description="For play and discard")
    target_player_id: Optional[str] = Field(None, description="For hints")
    suit: Optional[str] = Field(None, description="For color hints")
    number: Optional[int] = Field(None, description="For number hints")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class TableResponse(BaseModel):
    """A table and its full snapshot."""
    table_id: str
    status: str
    current_player_id: str
    score: int
    turn: int
    snapshot: dict[str, Any]
    api_version: str = "v1"


class PerspectiveResponse(BaseModel):
    """One player's view of a table."""
    table_id: str
    viewer_id: str
    perspective: dict[str, Any]
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Outcome of a committed action."""
    success: bool
    table_id: str
    status: str
    current_player_id: str
    score: int
    is_game_over: bool
    state_changes: list[str] = Field(default_factory=list)
    snapshot: dict[str, Any]
    api_version: str = "v1"


class EndTableResponse(BaseModel):
    """Response after closing a table."""
    success: bool
    table_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str
