"""
Snapshot Codec - The wire format of a GameState.

A snapshot is the complete, JSON-compatible state of one game, exchanged
between the authoritative host and its clients. Keys are camelCase; card,
player and log identities travel as `id`, and log entries are discriminated
by `type`.

Snapshots written by older builds are accepted: fields added later
(`multicolorWildHints`, `recentlyHinted`, `lastRound`, `ui`, `logs`,
`nextLogId`, missing firework suits) fall back to their neutral values.
"""

import json
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError
from pydantic.alias_generators import to_camel

from .state import (
    SUITS,
    Card,
    CardHints,
    DiscardLog,
    DrawLog,
    EndReason,
    GameLogEntry,
    GameSettings,
    GameState,
    GameStatus,
    GameUiState,
    HintLog,
    HintType,
    LastRoundState,
    PendingAction,
    Player,
    PlayLog,
    StatusLog,
    Suit,
)
from .validation import StateValidationError, assert_valid_state

# Counters and flags are strict: "3", 3.0 and True are rejected, not coerced.
CardNumber = Annotated[StrictInt, Field(ge=1, le=5)]


class WireModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Wire models
# =============================================================================

class CardHintsModel(WireModel):
    color: Optional[Suit] = None
    number: Optional[CardNumber] = None
    not_colors: list[Suit] = Field(default_factory=list)
    not_numbers: list[CardNumber] = Field(default_factory=list)
    recently_hinted: StrictBool = False


class CardModel(WireModel):
    id: str
    suit: Suit
    number: CardNumber
    hints: CardHintsModel = Field(default_factory=CardHintsModel)


class PlayerModel(WireModel):
    id: str
    name: str
    cards: list[str] = Field(default_factory=list)


class SettingsModel(WireModel):
    include_multicolor: StrictBool
    multicolor_short_deck: StrictBool = False
    multicolor_wild_hints: StrictBool = False
    endless_mode: StrictBool = False
    active_suits: list[Suit]
    max_hint_tokens: StrictInt
    max_fuse_tokens: StrictInt
    hand_size: StrictInt


class LastRoundModel(WireModel):
    turns_remaining: StrictInt


class UiModel(WireModel):
    pending_action: Optional[PendingAction] = None
    selected_card_id: Optional[str] = None
    selected_target_player_id: Optional[str] = None
    selected_hint_suit: Optional[Suit] = None
    selected_hint_number: Optional[CardNumber] = None
    highlighted_card_ids: list[str] = Field(default_factory=list)


class HintLogModel(WireModel):
    id: str
    turn: StrictInt
    type: Literal["hint"] = "hint"
    actor_id: str
    actor_name: str
    target_id: str
    target_name: str
    hint_type: HintType
    suit: Optional[Suit] = None
    number: Optional[CardNumber] = None
    touched_card_ids: list[str] = Field(default_factory=list)


class PlayLogModel(WireModel):
    id: str
    turn: StrictInt
    type: Literal["play"] = "play"
    actor_id: str
    actor_name: str
    card_id: str
    suit: Suit
    number: CardNumber
    success: StrictBool
    gained_hint: StrictBool
    fuse_tokens_used: StrictInt


class DiscardLogModel(WireModel):
    id: str
    turn: StrictInt
    type: Literal["discard"] = "discard"
    actor_id: str
    actor_name: str
    card_id: str
    suit: Suit
    number: CardNumber
    gained_hint: StrictBool


class DrawLogModel(WireModel):
    id: str
    turn: StrictInt
    type: Literal["draw"] = "draw"
    actor_id: str
    actor_name: str
    card_id: str
    remaining_deck: StrictInt


class StatusLogModel(WireModel):
    id: str
    turn: StrictInt
    type: Literal["status"] = "status"
    status: GameStatus
    reason: EndReason
    score: StrictInt


LogModel = Annotated[
    Union[HintLogModel, PlayLogModel, DiscardLogModel, DrawLogModel, StatusLogModel],
    Field(discriminator="type"),
]


class SnapshotModel(WireModel):
    """Complete game snapshot as exchanged on the wire."""
    players: list[PlayerModel]
    current_turn_player_index: StrictInt
    cards: dict[str, CardModel]
    draw_deck: list[str]
    discard_pile: list[str]
    fireworks: dict[Suit, list[str]] = Field(default_factory=dict)
    hint_tokens: StrictInt
    fuse_tokens_used: StrictInt
    status: GameStatus
    last_round: Optional[LastRoundModel] = None
    logs: list[LogModel] = Field(default_factory=list)
    ui: UiModel = Field(default_factory=UiModel)
    turn: StrictInt
    next_log_id: Optional[StrictInt] = None
    settings: SettingsModel


# =============================================================================
# Dataclass -> wire
# =============================================================================

def _hints_model(hints: CardHints) -> CardHintsModel:
    return CardHintsModel(
        color=hints.color,
        number=hints.number,
        not_colors=list(hints.not_colors),
        not_numbers=list(hints.not_numbers),
        recently_hinted=hints.recently_hinted,
    )


def _ui_model(ui: GameUiState) -> UiModel:
    return UiModel(
        pending_action=ui.pending_action,
        selected_card_id=ui.selected_card_id,
        selected_target_player_id=ui.selected_target_player_id,
        selected_hint_suit=ui.selected_hint_suit,
        selected_hint_number=ui.selected_hint_number,
        highlighted_card_ids=list(ui.highlighted_card_ids),
    )


def _log_model(entry: GameLogEntry) -> BaseModel:
    common = {"id": entry.log_id, "turn": entry.turn}
    if isinstance(entry, HintLog):
        return HintLogModel(
            **common,
            actor_id=entry.actor_id,
            actor_name=entry.actor_name,
            target_id=entry.target_id,
            target_name=entry.target_name,
            hint_type=entry.hint_type,
            suit=entry.suit,
            number=entry.number,
            touched_card_ids=list(entry.touched_card_ids),
        )
    if isinstance(entry, PlayLog):
        return PlayLogModel(
            **common,
            actor_id=entry.actor_id,
            actor_name=entry.actor_name,
            card_id=entry.card_id,
            suit=entry.suit,
            number=entry.number,
            success=entry.success,
            gained_hint=entry.gained_hint,
            fuse_tokens_used=entry.fuse_tokens_used,
        )
    if isinstance(entry, DiscardLog):
        return DiscardLogModel(
            **common,
            actor_id=entry.actor_id,
            actor_name=entry.actor_name,
            card_id=entry.card_id,
            suit=entry.suit,
            number=entry.number,
            gained_hint=entry.gained_hint,
        )
    if isinstance(entry, DrawLog):
        return DrawLogModel(
            **common,
            actor_id=entry.actor_id,
            actor_name=entry.actor_name,
            card_id=entry.card_id,
            remaining_deck=entry.remaining_deck,
        )
    if isinstance(entry, StatusLog):
        return StatusLogModel(**common, status=entry.status, reason=entry.reason, score=entry.score)
    raise TypeError(f"Unknown log entry: {entry!r}")


def to_model(state: GameState) -> SnapshotModel:
    settings = state.settings
    return SnapshotModel(
        players=[
            PlayerModel(id=p.player_id, name=p.name, cards=list(p.cards))
            for p in state.players
        ],
        current_turn_player_index=state.current_turn_player_index,
        cards={
            card_id: CardModel(
                id=card.card_id, suit=card.suit, number=card.number, hints=_hints_model(card.hints)
            )
            for card_id, card in state.cards.items()
        },
        draw_deck=list(state.draw_deck),
        discard_pile=list(state.discard_pile),
        fireworks={suit: list(state.fireworks.get(suit, [])) for suit in SUITS},
        hint_tokens=state.hint_tokens,
        fuse_tokens_used=state.fuse_tokens_used,
        status=state.status,
        last_round=(
            LastRoundModel(turns_remaining=state.last_round.turns_remaining)
            if state.last_round is not None else None
        ),
        logs=[_log_model(entry) for entry in state.logs],
        ui=_ui_model(state.ui),
        turn=state.turn,
        next_log_id=state.next_log_id,
        settings=SettingsModel(
            include_multicolor=settings.include_multicolor,
            multicolor_short_deck=settings.multicolor_short_deck,
            multicolor_wild_hints=settings.multicolor_wild_hints,
            endless_mode=settings.endless_mode,
            active_suits=list(settings.active_suits),
            max_hint_tokens=settings.max_hint_tokens,
            max_fuse_tokens=settings.max_fuse_tokens,
            hand_size=settings.hand_size,
        ),
    )


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def serialize_state(state: GameState) -> dict[str, Any]:
    """Render a state as a JSON-compatible snapshot dict."""
    return _dump(to_model(state))


def serialize_hints(hints: CardHints) -> dict[str, Any]:
    return _dump(_hints_model(hints))


def serialize_ui(ui: GameUiState) -> dict[str, Any]:
    return _dump(_ui_model(ui))


def serialize_log(entry: GameLogEntry) -> dict[str, Any]:
    return _dump(_log_model(entry))


# =============================================================================
# Wire -> dataclass
# =============================================================================

def _hints_from(model: CardHintsModel) -> CardHints:
    return CardHints(
        color=model.color,
        number=model.number,
        not_colors=list(model.not_colors),
        not_numbers=list(model.not_numbers),
        recently_hinted=model.recently_hinted,
    )


def _log_from(model: BaseModel) -> GameLogEntry:
    if isinstance(model, HintLogModel):
        return HintLog(
            log_id=model.id,
            turn=model.turn,
            actor_id=model.actor_id,
            actor_name=model.actor_name,
            target_id=model.target_id,
            target_name=model.target_name,
            hint_type=model.hint_type,
            suit=model.suit,
            number=model.number,
            touched_card_ids=list(model.touched_card_ids),
        )
    if isinstance(model, PlayLogModel):
        return PlayLog(
            log_id=model.id,
            turn=model.turn,
            actor_id=model.actor_id,
            actor_name=model.actor_name,
            card_id=model.card_id,
            suit=model.suit,
            number=model.number,
            success=model.success,
            gained_hint=model.gained_hint,
            fuse_tokens_used=model.fuse_tokens_used,
        )
    if isinstance(model, DiscardLogModel):
        return DiscardLog(
            log_id=model.id,
            turn=model.turn,
            actor_id=model.actor_id,
            actor_name=model.actor_name,
            card_id=model.card_id,
            suit=model.suit,
            number=model.number,
            gained_hint=model.gained_hint,
        )
    if isinstance(model, DrawLogModel):
        return DrawLog(
            log_id=model.id,
            turn=model.turn,
            actor_id=model.actor_id,
            actor_name=model.actor_name,
            card_id=model.card_id,
            remaining_deck=model.remaining_deck,
        )
    return StatusLog(
        log_id=model.id, turn=model.turn, status=model.status, reason=model.reason, score=model.score
    )


def from_model(model: SnapshotModel) -> GameState:
    """Build a GameState from a parsed snapshot, filling in legacy gaps."""
    logs = [_log_from(entry) for entry in model.logs]
    ui = model.ui
    return GameState(
        players=[Player(player_id=p.id, name=p.name, cards=list(p.cards)) for p in model.players],
        current_turn_player_index=model.current_turn_player_index,
        cards={
            card_id: Card(
                card_id=card.id, suit=card.suit, number=card.number, hints=_hints_from(card.hints)
            )
            for card_id, card in model.cards.items()
        },
        draw_deck=list(model.draw_deck),
        discard_pile=list(model.discard_pile),
        fireworks={suit: list(model.fireworks.get(suit, [])) for suit in SUITS},
        hint_tokens=model.hint_tokens,
        fuse_tokens_used=model.fuse_tokens_used,
        status=model.status,
        last_round=(
            LastRoundState(turns_remaining=model.last_round.turns_remaining)
            if model.last_round is not None else None
        ),
        logs=logs,
        ui=GameUiState(
            pending_action=ui.pending_action,
            selected_card_id=ui.selected_card_id,
            selected_target_player_id=ui.selected_target_player_id,
            selected_hint_suit=ui.selected_hint_suit,
            selected_hint_number=ui.selected_hint_number,
            highlighted_card_ids=list(ui.highlighted_card_ids),
        ),
        turn=model.turn,
        next_log_id=model.next_log_id if model.next_log_id is not None else len(logs) + 1,
        settings=GameSettings(
            include_multicolor=model.settings.include_multicolor,
            multicolor_short_deck=model.settings.multicolor_short_deck,
            multicolor_wild_hints=model.settings.multicolor_wild_hints,
            endless_mode=model.settings.endless_mode,
            active_suits=tuple(model.settings.active_suits),
            max_hint_tokens=model.settings.max_hint_tokens,
            max_fuse_tokens=model.settings.max_fuse_tokens,
            hand_size=model.settings.hand_size,
        ),
    )


def _format_errors(error: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or 'snapshot'}: {err['msg']}"
        for err in error.errors()
    ]


def deserialize_state(payload: dict[str, Any]) -> GameState:
    """
    Parse a snapshot dict into a GameState.

    Checks shape and types only; raises StateValidationError when the payload
    is malformed. Use restore_state to also check the game invariants.
    """
    try:
        model = SnapshotModel.model_validate(payload)
    except ValidationError as e:
        raise StateValidationError(_format_errors(e))
    return from_model(model)


def restore_state(payload: dict[str, Any]) -> GameState:
    """Parse and fully validate a snapshot. Raises StateValidationError."""
    state = deserialize_state(payload)
    assert_valid_state(state)
    return state


def dumps(state: GameState, indent: Optional[int] = None) -> str:
    return json.dumps(serialize_state(state), indent=indent)


def loads(text: str) -> GameState:
    """Parse a JSON snapshot and fully validate it."""
    try:
        model = SnapshotModel.model_validate_json(text)
    except ValidationError as e:
        raise StateValidationError(_format_errors(e))
    state = from_model(model)
    assert_valid_state(state)
    return state
