"""
Smash Up - The shufflebuilding game.

Key mechanics relevant to scorekeeping:
- 2-4 players
- Each player combines two factions into one deck
- Players earn victory points by breaking bases

This module contains:
- The faction catalogue (factions.py)
- The default roster used at startup (setup.py)
"""

from .factions import FACTIONS, NO_FACTION, is_faction, validate_faction, is_complete_pair

__all__ = [
    "FACTIONS",
    "NO_FACTION",
    "is_faction",
    "validate_faction",
    "is_complete_pair",
]
