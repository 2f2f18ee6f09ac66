"""
Roster Module - Known players and the current selection.

The roster is in-memory only:
- Seeded with a default set at startup (or supplied by the caller)
- Edited through create/update/delete
- Selection is cleared for every new game
"""

from .player import Player, create_player, player_key, same_player
from .manager import RosterManager, MIN_PLAYERS, MAX_PLAYERS

__all__ = [
    "Player",
    "create_player",
    "player_key",
    "same_player",
    "RosterManager",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
]
