"""
Session Module - One playthrough at the table.

A session runs from player selection, through faction selection,
to scoring, and ends with "New Game":
- The selection is cleared
- The roster itself is kept

Sessions are EPHEMERAL: nothing is persisted.
"""

from .flow import SessionFlow, SessionStep, Transition

__all__ = [
    "SessionFlow",
    "SessionStep",
    "Transition",
]
