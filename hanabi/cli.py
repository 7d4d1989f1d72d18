"""
Hanabi CLI - Command-line interface for the engine.

Usage:
    hanabi new [--players NAME ...] [--seed N]   Deal a game, print its snapshot
    hanabi validate <snapshot_file>              Check a snapshot against the rules
    hanabi view <snapshot_file> --viewer ID      Print one player's perspective
"""

import argparse
import json
import logging
import os
import sys

from .engine_core import GameConfig, HanabiGame, StateValidationError, dumps, loads
from .errors import ConfigurationError, RuleViolation


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Hanabi - Authoritative rules engine",
        prog="hanabi",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("HANABI_LOG_LEVEL", "WARNING"),
        help="Logging level (default: $HANABI_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # New command
    new_parser = subparsers.add_parser("new", help="Deal a new game and print its snapshot")
    new_parser.add_argument("--players", nargs="+", default=["Player 1", "Player 2"], help="Player names")
    new_parser.add_argument("--seed", type=int, help="Shuffle seed")
    new_parser.add_argument("--multicolor", action="store_true", help="Add the multicolor suit")
    new_parser.add_argument("--short-deck", action="store_true", help="One multicolor card per number")
    new_parser.add_argument("--wild-hints", action="store_true", help="Multicolor answers every color hint")
    new_parser.add_argument("--endless", action="store_true", help="Lose as soon as 25 is unreachable")
    new_parser.add_argument("--output", "-o", help="Write the snapshot to a file")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a snapshot file")
    validate_parser.add_argument("snapshot_file", help="Path to snapshot JSON")

    # View command
    view_parser = subparsers.add_parser("view", help="Print a player's perspective")
    view_parser.add_argument("snapshot_file", help="Path to snapshot JSON")
    view_parser.add_argument("--viewer", required=True, help="Viewing player id")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "new":
        cmd_new(args)
    elif args.command == "validate":
        cmd_validate(args)
    elif args.command == "view":
        cmd_view(args)
    else:
        parser.print_help()
        sys.exit(1)


def _read_snapshot(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)


def cmd_new(args):
    """Deal a new game."""
    config = GameConfig(
        player_names=args.players,
        include_multicolor=args.multicolor,
        multicolor_short_deck=args.short_deck,
        multicolor_wild_hints=args.wild_hints,
        endless_mode=args.endless,
        shuffle_seed=args.seed,
    )
    try:
        game = HanabiGame(config)
    except ConfigurationError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    text = dumps(game.get_snapshot(), indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"Wrote snapshot to {args.output}")
    else:
        print(text)


def cmd_validate(args):
    """Validate a snapshot."""
    text = _read_snapshot(args.snapshot_file)
    try:
        state = loads(text)
    except StateValidationError as e:
        print(f"Invalid snapshot: {args.snapshot_file}")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)

    print(f"Snapshot is valid: {args.snapshot_file}")
    print(f"Players: {', '.join(p.name for p in state.players)}")
    print(f"Status: {state.status.value} (turn {state.turn}, score {state.score})")


def cmd_view(args):
    """Print a perspective."""
    text = _read_snapshot(args.snapshot_file)
    try:
        game = HanabiGame.from_state(loads(text))
        view = game.get_perspective_state(args.viewer)
    except StateValidationError as e:
        print(f"Invalid snapshot: {args.snapshot_file}")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)
    except RuleViolation as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    print(json.dumps(view.to_dict(), indent=2))


if __name__ == "__main__":
    main()
