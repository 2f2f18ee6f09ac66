"""
Smash Up Setup - Builds the starting roster.

The app starts with a small group of regulars already in the roster.
Their photos are empty until someone picks one on the device.
"""

from __future__ import annotations

from ...roster.player import Player, new_player_id
from ...roster.manager import RosterManager


DEFAULT_PLAYER_NAMES: tuple[str, ...] = ("Dani", "Cami", "Gabi", "Fran", "Rodri")


def parse_player_names(raw: str | None) -> list[str] | None:
    """
    Parse a comma-separated list of names.

    Returns None when nothing usable is given, so callers fall back
    to the defaults.
    """
    if not raw:
        return None
    names = [n.strip() for n in raw.split(",") if n.strip()]
    return names or None


def default_players(names: list[str] | tuple[str, ...] | None = None) -> list[Player]:
    """
    Create the seeded roster.

    Args:
        names: Names to seed with (defaults to DEFAULT_PLAYER_NAMES)

    Returns:
        Fresh players with new ids and empty photos
    """
    if names is None:
        names = DEFAULT_PLAYER_NAMES
    return [Player(player_id=new_player_id(), name=name) for name in names]


def setup_roster(
    names: list[str] | tuple[str, ...] | None = None,
    players: list[Player] | None = None,
) -> RosterManager:
    """
    Set up a roster manager.

    Args:
        names: Seed the roster with these names
        players: Use these players as-is (takes precedence over names)

    Returns:
        RosterManager with an empty selection
    """
    if players is not None:
        return RosterManager(players)
    return RosterManager(default_players(names))
