"""
Player - A roster entry plus its per-session fields.

Design principles:
- Identity is the player_id; name and photo never change on a record
  (editing a player produces a new record with the same id)
- Session fields (factions, victory points) are changed on a copy and
  written back through the roster manager
- Identity comparison is explicit (player_key / same_player), not __eq__
"""

from __future__ import annotations
from dataclasses import dataclass, replace
import uuid

from ..errors import PlayerValidationError
from ..games.smash_up.factions import NO_FACTION, is_complete_pair


@dataclass(eq=False)
class Player:
    """
    A player known to the roster.

    photo is an opaque image blob; seeded players may have an empty one.
    """
    player_id: str
    name: str
    photo: bytes = b""

    # Session fields
    faction1: str = NO_FACTION
    faction2: str = NO_FACTION
    victory_points: int = 0

    @property
    def has_photo(self) -> bool:
        return len(self.photo) > 0

    @property
    def has_factions(self) -> bool:
        """Both factions chosen (and different)."""
        return is_complete_pair(self.faction1, self.faction2)

    def with_factions(self, faction1: str, faction2: str) -> Player:
        """Return a copy with both factions replaced."""
        return replace(self, faction1=faction1, faction2=faction2)

    def with_victory_points(self, victory_points: int) -> Player:
        """Return a copy with a new score, clamped at zero."""
        return replace(self, victory_points=max(0, victory_points))

    def for_new_session(self) -> Player:
        """Return a copy with session fields reset."""
        return replace(
            self,
            faction1=NO_FACTION,
            faction2=NO_FACTION,
            victory_points=0,
        )


def player_key(player: Player) -> str:
    """Key function for identity-based lookups."""
    return player.player_id


def same_player(a: Player, b: Player) -> bool:
    """Two records describe the same player iff their ids match."""
    return player_key(a) == player_key(b)


def index_of(players: list[Player], player_id: str) -> int | None:
    """Index of the first player with this id, or None."""
    for i, p in enumerate(players):
        if player_key(p) == player_id:
            return i
    return None


def new_player_id() -> str:
    return str(uuid.uuid4())


def create_player(
    name: str,
    photo: bytes | None,
    player_id: str | None = None,
) -> Player:
    """
    Build a player from a create/edit form submission.

    Args:
        name: Display name (must not be blank)
        photo: Image blob from the image picker (must not be empty)
        player_id: Keep an existing id when re-saving an edited player

    Returns:
        New Player with fresh session fields

    Raises:
        PlayerValidationError: name is blank or photo is missing
    """
    name = (name or "").strip()
    if not name:
        raise PlayerValidationError("Player name is required", field="name")
    if not photo:
        raise PlayerValidationError("Player photo is required", field="photo")

    return Player(
        player_id=player_id or new_player_id(),
        name=name,
        photo=bytes(photo),
    )
