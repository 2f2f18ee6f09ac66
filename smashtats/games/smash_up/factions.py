"""
Smash Up Factions - The faction catalogue.

Each player shuffles two factions together into a single deck.
The catalogue is fixed; an empty string means "not chosen yet".
"""

from ...errors import UnknownFactionError


FACTIONS: tuple[str, ...] = (
    "Pirates",
    "Ninjas",
    "Zombies",
    "Robots",
    "Aliens",
    "Wizards",
)

NO_FACTION = ""


def is_faction(name: str) -> bool:
    """Check if name is in the catalogue."""
    return name in FACTIONS


def validate_faction(name: str) -> str:
    """
    Validate a faction choice.

    Accepts the empty string (unset). Raises UnknownFactionError
    for anything not in the catalogue.
    """
    if name == NO_FACTION or is_faction(name):
        return name
    raise UnknownFactionError(name)


def is_complete_pair(faction1: str, faction2: str) -> bool:
    """Both factions chosen, and not the same one twice."""
    return (
        faction1 != NO_FACTION
        and faction2 != NO_FACTION
        and faction1 != faction2
    )
