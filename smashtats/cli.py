"""
Smashtats CLI - Command-line interface.

Usage:
    smashtats factions                 List the faction catalogue
    smashtats players                  Show the default roster
    smashtats serve [--host] [--port]  Run the REST API
"""

import argparse
import os
import sys

from .logs import configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Smashtats - Smash Up scorekeeper",
        prog="smashtats",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("factions", help="List the faction catalogue")

    players_parser = subparsers.add_parser("players", help="Show the default roster")
    players_parser.add_argument(
        "--names",
        help="Comma-separated names (default: SMASHTATS_DEFAULT_PLAYERS or built-in list)",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Auto-reload on changes")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "factions":
        cmd_factions(args)
    elif args.command == "players":
        cmd_players(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_factions(args):
    """List the faction catalogue."""
    from .games.smash_up.factions import FACTIONS

    print(f"{len(FACTIONS)} factions:")
    for faction in FACTIONS:
        print(f"  - {faction}")


def cmd_players(args):
    """Show the roster the app starts with."""
    from .games.smash_up.setup import parse_player_names, setup_roster

    names = parse_player_names(args.names or os.getenv("SMASHTATS_DEFAULT_PLAYERS"))
    roster = setup_roster(names=names)

    print(f"{len(roster.all_players)} players:")
    for player in roster.all_players:
        print(f"  - {player.name} ({player.player_id})")


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    print(f"Serving Smashtats API on http://{args.host}:{args.port}")
    uvicorn.run(
        "smashtats.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
