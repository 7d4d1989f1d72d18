"""
Tests for the command-line interface.
"""

import json

import pytest

from ..cli import main


def run_cli(argv, capsys):
    """Run the CLI and return (exit code, stdout)."""
    try:
        main(argv)
        code = 0
    except SystemExit as e:
        code = e.code
    return code, capsys.readouterr().out


@pytest.fixture
def snapshot_file(tmp_path, capsys):
    """A seeded game written to disk by `hanabi new`."""
    path = tmp_path / "game.json"
    code, out = run_cli(["new", "--seed", "7", "--output", str(path)], capsys)
    assert code == 0
    assert out.strip() == f"Wrote snapshot to {path}"
    return path


class TestNewCommand:
    """Tests for `hanabi new`."""

    def test_prints_snapshot(self, capsys):
        code, out = run_cli(["new", "--seed", "7", "--players", "Ana", "Ben", "Cleo"], capsys)

        assert code == 0
        snapshot = json.loads(out)
        assert [p["name"] for p in snapshot["players"]] == ["Ana", "Ben", "Cleo"]
        assert len(snapshot["drawDeck"]) == 35

    def test_same_seed_same_output(self, capsys):
        _, first = run_cli(["new", "--seed", "3"], capsys)
        _, second = run_cli(["new", "--seed", "3"], capsys)

        assert first == second

    def test_variants(self, capsys):
        code, out = run_cli(["new", "--seed", "1", "--multicolor", "--wild-hints"], capsys)

        assert code == 0
        settings = json.loads(out)["settings"]
        assert settings["includeMulticolor"]
        assert settings["multicolorWildHints"]

    def test_invalid_options(self, capsys):
        code, out = run_cli(["new", "--players", "Solo"], capsys)

        assert code == 1
        assert "Error: Hanabi supports 2 to 5 players" in out

    def test_incompatible_variants(self, capsys):
        code, out = run_cli(["new", "--short-deck"], capsys)

        assert code == 1
        assert "multicolorShortDeck requires includeMulticolor=true" in out


class TestValidateCommand:
    """Tests for `hanabi validate`."""

    def test_valid_snapshot(self, snapshot_file, capsys):
        code, out = run_cli(["validate", str(snapshot_file)], capsys)

        assert code == 0
        assert f"Snapshot is valid: {snapshot_file}" in out
        assert "Players: Player 1, Player 2" in out
        assert "Status: active (turn 1, score 0)" in out

    def test_invalid_snapshot(self, snapshot_file, capsys):
        snapshot = json.loads(snapshot_file.read_text())
        snapshot["hintTokens"] = 42
        snapshot_file.write_text(json.dumps(snapshot))

        code, out = run_cli(["validate", str(snapshot_file)], capsys)

        assert code == 1
        assert f"Invalid snapshot: {snapshot_file}" in out
        assert "  - hintTokens is out of range" in out

    def test_missing_file(self, tmp_path, capsys):
        missing = tmp_path / "nope.json"
        code, out = run_cli(["validate", str(missing)], capsys)

        assert code == 1
        assert f"Error: File not found: {missing}" in out


class TestViewCommand:
    """Tests for `hanabi view`."""

    def test_view(self, snapshot_file, capsys):
        code, out = run_cli(["view", str(snapshot_file), "--viewer", "p2"], capsys)

        assert code == 0
        view = json.loads(out)
        assert view["viewerId"] == "p2"
        assert all(card["suit"] is None for card in view["players"][1]["cards"])
        assert all(card["suit"] is not None for card in view["players"][0]["cards"])

    def test_unknown_viewer(self, snapshot_file, capsys):
        code, out = run_cli(["view", str(snapshot_file), "--viewer", "p9"], capsys)

        assert code == 1
        assert "Error: Unknown perspective player: p9" in out


def test_no_command_prints_help(capsys):
    code, out = run_cli([], capsys)

    assert code == 1
    assert "usage: hanabi" in out
