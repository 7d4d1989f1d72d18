"""
API Service - Business logic layer between the HTTP surface and the engine.

The service:
1. Creates and restores tables (one HanabiGame each)
2. Serializes every action for a table through that table's engine
3. Hands out snapshots and per-player perspectives

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Tables live in memory only.
"""

from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass, field

from ..engine_core import Action, ActionPayload, ActionType, GameConfig, HanabiGame
from ..errors import RuleViolation
from .schemas import (
    ActionKind,
    ActionRequest,
    ActionResponse,
    CreateTableRequest,
    EndTableResponse,
    ErrorCode,
    ErrorResponse,
    PerspectiveResponse,
    RestoreTableRequest,
    TableResponse,
)

logger = logging.getLogger(__name__)

_ACTION_TYPES = {
    ActionKind.PLAY: ActionType.PLAY,
    ActionKind.DISCARD: ActionType.DISCARD,
    ActionKind.HINT_COLOR: ActionType.HINT_COLOR,
    ActionKind.HINT_NUMBER: ActionType.HINT_NUMBER,
}


@dataclass
class TableService:
    """
    Host service for Hanabi tables.

    Usage:
        service = TableService()

        table = service.create_table(CreateTableRequest(player_names=["Ana", "Ben"]))
        response = service.apply_action(table.table_id, ActionRequest(...))
    """
    _tables: dict[str, HanabiGame] = field(default_factory=dict)

    def create_table(self, request: CreateTableRequest) -> TableResponse:
        """
        Start a new game.

        Raises ConfigurationError when the options fail their preconditions.
        """
        config = GameConfig(
            player_names=list(request.player_names),
            player_ids=list(request.player_ids) if request.player_ids is not None else None,
            include_multicolor=request.include_multicolor,
            multicolor_short_deck=request.multicolor_short_deck,
            multicolor_wild_hints=request.multicolor_wild_hints,
            endless_mode=request.endless_mode,
            max_hint_tokens=request.max_hint_tokens,
            max_fuse_tokens=request.max_fuse_tokens,
            starting_player_index=request.starting_player_index,
            deck=(
                [(card.suit, card.number) for card in request.deck]
                if request.deck is not None else None
            ),
            shuffle_seed=request.shuffle_seed,
        )
        return self._register(HanabiGame(config))

    def restore_table(self, request: RestoreTableRequest) -> TableResponse:
        """
        Host a game from a snapshot.

        Raises StateValidationError when the snapshot is rejected.
        """
        return self._register(HanabiGame.from_snapshot(request.snapshot))

    def get_table(self, table_id: str) -> TableResponse | ErrorResponse:
        game = self._tables.get(table_id)
        if game is None:
            return self._not_found(table_id)
        return self._table_response(table_id, game)

    def get_perspective(self, table_id: str, viewer_id: str) -> PerspectiveResponse | ErrorResponse:
        game = self._tables.get(table_id)
        if game is None:
            return self._not_found(table_id)
        try:
            view = game.get_perspective_state(viewer_id)
        except RuleViolation as e:
            return ErrorResponse(error=e.message, error_code=ErrorCode.UNKNOWN_PLAYER)
        return PerspectiveResponse(table_id=table_id, viewer_id=viewer_id, perspective=view.to_dict())

    def apply_action(self, table_id: str, request: ActionRequest) -> ActionResponse | ErrorResponse:
        """Apply an actor-tagged turn action to a table."""
        game = self._tables.get(table_id)
        if game is None:
            return self._not_found(table_id)

        action = Action(
            action_type=_ACTION_TYPES[request.action_type],
            payload=ActionPayload(
                player_id=request.player_id,
                card_id=request.card_id,
                target_player_id=request.target_player_id,
                suit=request.suit,
                number=request.number,
            ),
        )

        result = game.apply(action)
        if not result.success:
            logger.info(
                "Table %s rejected %s from %s: %s",
                table_id, request.action_type.value, request.player_id, result.error,
            )
            return ErrorResponse(
                error=result.error or "Action rejected",
                error_code=ErrorCode.ACTION_REJECTED,
                details={
                    "rule_code": result.error_code.value if result.error_code else None,
                    "violations": result.invariant_violations,
                },
            )

        return ActionResponse(
            success=True,
            table_id=table_id,
            status=game.status.value,
            current_player_id=game.current_player_id,
            score=game.get_score(),
            is_game_over=game.is_game_over(),
            state_changes=result.state_changes,
            snapshot=game.serialize(),
        )

    def end_table(self, table_id: str) -> EndTableResponse:
        """Close a table and release it."""
        removed = self._tables.pop(table_id, None) is not None
        if removed:
            logger.info("Closed table %s", table_id)
        return EndTableResponse(success=removed, table_id=table_id)

    def _register(self, game: HanabiGame) -> TableResponse:
        table_id = uuid.uuid4().hex[:12]
        self._tables[table_id] = game
        logger.info("Opened table %s", table_id)
        return self._table_response(table_id, game)

    def _table_response(self, table_id: str, game: HanabiGame) -> TableResponse:
        snapshot = game.serialize()
        return TableResponse(
            table_id=table_id,
            status=game.status.value,
            current_player_id=game.current_player_id,
            score=game.get_score(),
            turn=snapshot["turn"],
            snapshot=snapshot,
        )

    def _not_found(self, table_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Table {table_id} not found",
            error_code=ErrorCode.TABLE_NOT_FOUND,
        )
