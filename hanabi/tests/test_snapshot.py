"""
Tests for the wire snapshot codec.

Tests:
- Round trips for fresh, mid-game and finished states
- camelCase wire shape
- Older snapshots with missing fields
- Rejection of malformed or inconsistent payloads
"""

import json

import pytest

from ..engine_core.game import HanabiGame
from ..engine_core.snapshot import (
    deserialize_state,
    dumps,
    loads,
    restore_state,
    serialize_state,
)
from ..engine_core.state import GameStatus, Suit
from ..engine_core.validation import StateValidationError


class TestRoundTrip:
    """deserialize(serialize(state)) == state."""

    def test_fresh_state(self, seeded_game):
        state = seeded_game.get_snapshot()
        assert deserialize_state(serialize_state(state)) == state

    def test_mid_game_state(self, standard_game):
        standard_game.play_card("c001")
        standard_game.give_color_hint("p1", Suit.YELLOW)
        standard_game.discard_card("c003")
        standard_game.begin_number_hint_selection()
        standard_game.select_hint_target("p1")
        state = standard_game.get_snapshot()

        assert deserialize_state(serialize_state(state)) == state

    def test_wild_hint_state(self, wild_game):
        wild_game.give_color_hint("p2", Suit.RED)
        state = wild_game.get_snapshot()

        assert deserialize_state(serialize_state(state)) == state

    def test_finished_state(self, make_game):
        game = make_game(
            ("R2", "Y2", "G2", "B2", "W2"),
            ("R3", "Y3", "G3", "B3", "W3"),
            rest=("R4", "Y4"),
            max_fuse_tokens=1,
        )
        game.play_card("c001")
        state = game.get_snapshot()
        assert state.status == GameStatus.LOST

        assert restore_state(serialize_state(state)) == state

    def test_json_text(self, standard_game):
        standard_game.play_card("c001")
        state = standard_game.get_snapshot()

        assert loads(dumps(state)) == state
        assert loads(dumps(state, indent=2)) == state


class TestWireShape:
    """The snapshot is camelCase JSON."""

    def test_top_level_keys(self, standard_game):
        snapshot = standard_game.serialize()

        for key in (
            "players", "currentTurnPlayerIndex", "cards", "drawDeck", "discardPile",
            "fireworks", "hintTokens", "fuseTokensUsed", "status", "lastRound",
            "logs", "ui", "turn", "nextLogId", "settings",
        ):
            assert key in snapshot

    def test_nested_values(self, standard_game):
        standard_game.give_color_hint("p2", Suit.RED)
        snapshot = standard_game.serialize()

        assert snapshot["players"][0] == {
            "id": "p1",
            "name": "Ana",
            "cards": ["c001", "c003", "c005", "c007", "c009"],
        }
        assert snapshot["cards"]["c002"]["suit"] == "R"
        assert snapshot["cards"]["c002"]["hints"]["color"] == "R"
        assert snapshot["cards"]["c004"]["hints"]["notColors"] == ["R"]
        assert set(snapshot["fireworks"]) == {"R", "Y", "G", "B", "W", "M"}
        assert snapshot["status"] == "active"
        assert snapshot["settings"]["activeSuits"] == ["R", "Y", "G", "B", "W"]

    def test_log_entries(self, standard_game):
        standard_game.give_color_hint("p2", Suit.RED)
        log = standard_game.serialize()["logs"][0]

        assert log["type"] == "hint"
        assert log["id"] == "log-0001"
        assert log["hintType"] == "color"
        assert log["touchedCardIds"] == ["c002"]

    def test_serialized_snapshot_is_json(self, standard_game):
        snapshot = standard_game.serialize()
        assert json.loads(json.dumps(snapshot)) == snapshot


class TestLegacySnapshots:
    """Fields added later fall back to neutral values."""

    def test_missing_optional_fields(self, standard_game):
        standard_game.play_card("c001")
        snapshot = standard_game.serialize()
        for key in ("ui", "lastRound", "nextLogId"):
            del snapshot[key]
        del snapshot["settings"]["multicolorWildHints"]
        del snapshot["fireworks"]["M"]
        for card in snapshot["cards"].values():
            del card["hints"]["recentlyHinted"]

        state = restore_state(snapshot)

        assert state.next_log_id == len(state.logs) + 1
        assert state.fireworks[Suit.MULTICOLOR] == []
        assert not state.settings.multicolor_wild_hints
        assert state.ui.pending_action is None

    def test_missing_logs(self, standard_game):
        snapshot = standard_game.serialize()
        del snapshot["logs"]

        state = restore_state(snapshot)

        assert state.logs == []
        assert state.next_log_id == 1


class TestRejectedSnapshots:
    """Malformed or inconsistent snapshots are rejected whole."""

    def test_missing_required_field(self, standard_game):
        snapshot = standard_game.serialize()
        del snapshot["players"]

        with pytest.raises(StateValidationError) as exc_info:
            deserialize_state(snapshot)

        assert any(error.startswith("players") for error in exc_info.value.errors)

    def test_bad_suit(self, standard_game):
        snapshot = standard_game.serialize()
        snapshot["cards"]["c001"]["suit"] = "X"

        with pytest.raises(StateValidationError):
            restore_state(snapshot)

    def test_broken_invariant(self, standard_game):
        snapshot = standard_game.serialize()
        snapshot["hintTokens"] = 99

        with pytest.raises(StateValidationError) as exc_info:
            restore_state(snapshot)

        assert "hintTokens is out of range" in exc_info.value.errors

    @pytest.mark.parametrize("path,value", [
        (("hintTokens",), "3"),
        (("hintTokens",), 3.0),
        (("hintTokens",), True),
        (("turn",), "2"),
        (("fuseTokensUsed",), False),
        (("cards", "c001", "number"), "1"),
        (("cards", "c001", "hints", "recentlyHinted"), "yes"),
        (("settings", "endlessMode"), 0),
        (("settings", "maxHintTokens"), "8"),
    ])
    def test_mistyped_values_are_not_coerced(self, standard_game, path, value):
        snapshot = standard_game.serialize()
        target = snapshot
        for key in path[:-1]:
            target = target[key]
        target[path[-1]] = value

        with pytest.raises(StateValidationError):
            restore_state(snapshot)

    def test_mistyped_json_values_are_not_coerced(self, standard_game):
        text = dumps(standard_game.get_snapshot()).replace('"hintTokens": 8', '"hintTokens": "8"')
        assert '"hintTokens": "8"' in text

        with pytest.raises(StateValidationError):
            loads(text)

    def test_invalid_json(self):
        with pytest.raises(StateValidationError):
            loads("{not json")

    def test_last_round_status_is_kept(self, make_game):
        game = make_game(
            ("R1", "Y1", "G1", "B1", "W1"),
            ("R2", "Y2", "G2", "B2", "W2"),
        )
        game.play_card("c001")
        snapshot = game.serialize()
        assert snapshot["status"] == "last_round"

        state = restore_state(snapshot)

        assert state.status == GameStatus.LAST_ROUND
        assert state.last_round.turns_remaining == 1


class TestFacadeRestore:
    """Restoring through HanabiGame."""

    def test_from_snapshot(self, standard_game):
        standard_game.play_card("c001")
        restored = HanabiGame.from_snapshot(standard_game.serialize())

        assert restored.get_snapshot() == standard_game.get_snapshot()
        assert restored.current_player_id == "p2"

    def test_replace_state_rejects_bad_payload(self, standard_game):
        before = standard_game.get_snapshot()
        snapshot = standard_game.serialize()
        snapshot["fuseTokensUsed"] = 5

        with pytest.raises(StateValidationError):
            standard_game.replace_state(snapshot)

        assert standard_game.get_snapshot() == before

    def test_replace_state_accepts_host_snapshot(self, standard_game):
        host = HanabiGame.from_snapshot(standard_game.serialize())
        host.play_card("c001")

        standard_game.replace_state(host.serialize())

        assert standard_game.get_snapshot() == host.get_snapshot()
