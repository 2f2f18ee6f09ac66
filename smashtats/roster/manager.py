"""
Roster Manager - Owns the known players and the current selection.

Two lists:
- all_players: every known player, kept for the process lifetime
- selected_players: the players in the current session (at most 4)

Every mutator:
- Runs to completion before returning (no partial updates)
- Notifies subscribed observers once the state is final

Lookups are by player_id only. Records with the same id but different
fields are the same player.

No persistence - the roster lives in memory only.
"""

from __future__ import annotations
from typing import Callable
import logging

from .player import Player, player_key, index_of
from ..errors import SelectionIndexError
from ..games.smash_up.factions import NO_FACTION, validate_faction

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 4

Observer = Callable[["RosterManager"], None]


class RosterManager:
    """
    In-memory roster and session selection.

    Usage:
        roster = RosterManager(players)

        roster.toggle_selection(player)
        roster.set_factions(0, "Pirates", "Ninjas")
        roster.add_victory_point(0)

    Observers registered with subscribe() are called with the manager
    after each change.
    """

    def __init__(self, players: list[Player] | None = None):
        self.all_players: list[Player] = list(players or [])
        self.selected_players: list[Player] = []
        self._observers: list[Observer] = []

    # =========================================================================
    # Observation
    # =========================================================================

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register a change observer.

        Returns:
            A callable that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self):
        for observer in list(self._observers):
            observer(self)

    # =========================================================================
    # Selection
    # =========================================================================

    def toggle_selection(self, player: Player):
        """
        Select or deselect a player.

        A fifth player is silently ignored.
        """
        index = index_of(self.selected_players, player_key(player))
        if index is not None:
            del self.selected_players[index]
            logger.debug("Deselected player %s", player.player_id)
        elif len(self.selected_players) < MAX_PLAYERS:
            self.selected_players.append(player.for_new_session())
            logger.debug("Selected player %s", player.player_id)
        else:
            logger.info(
                "Ignoring selection of %s: already %d players selected",
                player.player_id, MAX_PLAYERS,
            )
        self._notify()

    def is_selected(self, player: Player) -> bool:
        """Check if a player (by id) is in the current selection."""
        return index_of(self.selected_players, player_key(player)) is not None

    def clear_selection(self):
        """Drop every selected player. The roster is untouched."""
        self.selected_players = []
        logger.debug("Cleared selection")
        self._notify()

    @property
    def selection_size(self) -> int:
        return len(self.selected_players)

    def has_enough_players(self) -> bool:
        """Check if the selection can move on to faction choice."""
        return MIN_PLAYERS <= len(self.selected_players) <= MAX_PLAYERS

    def get_selected(self, index: int) -> Player:
        """Get the selected player at index (no negative indexing)."""
        self._check_index(index)
        return self.selected_players[index]

    def update_selected(self, index: int, new_player: Player):
        """
        Replace the selected player at index.

        Raises:
            SelectionIndexError: index is outside the current selection
        """
        self._check_index(index)
        self.selected_players[index] = new_player
        logger.debug("Updated selected player %d (%s)", index, new_player.player_id)
        self._notify()

    def _check_index(self, index: int):
        if not 0 <= index < len(self.selected_players):
            raise SelectionIndexError(index, len(self.selected_players))

    # =========================================================================
    # Factions
    # =========================================================================

    def reset_faction_choices(self):
        """Unset both factions for every selected player."""
        self.selected_players = [
            p.with_factions(NO_FACTION, NO_FACTION) for p in self.selected_players
        ]
        logger.debug("Reset faction choices")
        self._notify()

    def set_factions(self, index: int, faction1: str, faction2: str):
        """
        Set both factions of the selected player at index.

        Empty strings are allowed while the player is still choosing.

        Raises:
            UnknownFactionError: a name is not in the catalogue
            SelectionIndexError: index is outside the current selection
        """
        validate_faction(faction1)
        validate_faction(faction2)
        player = self.get_selected(index)
        self.update_selected(index, player.with_factions(faction1, faction2))

    def all_factions_chosen(self) -> bool:
        """Check if every selected player has two different factions."""
        return all(p.has_factions for p in self.selected_players)

    def taken_factions(self, index: int) -> list[str]:
        """
        Factions already chosen by the other selected players.

        Informational: nothing stops two players picking the same faction.
        """
        self._check_index(index)
        own = {self.selected_players[index].faction1, self.selected_players[index].faction2}
        taken = []
        for i, p in enumerate(self.selected_players):
            if i == index:
                continue
            for faction in (p.faction1, p.faction2):
                if faction != NO_FACTION and faction not in own and faction not in taken:
                    taken.append(faction)
        return taken

    # =========================================================================
    # Scoring
    # =========================================================================

    def add_victory_point(self, index: int) -> int:
        """Add one VP to the selected player at index. Returns the new total."""
        player = self.get_selected(index)
        updated = player.with_victory_points(player.victory_points + 1)
        self.update_selected(index, updated)
        return updated.victory_points

    def remove_victory_point(self, index: int) -> int:
        """
        Remove one VP from the selected player at index.

        No-op at zero. Returns the new total.
        """
        player = self.get_selected(index)
        if player.victory_points <= 0:
            logger.info("Ignoring VP decrement for %s: already at 0", player.player_id)
            return 0
        updated = player.with_victory_points(player.victory_points - 1)
        self.update_selected(index, updated)
        return updated.victory_points

    # =========================================================================
    # Roster
    # =========================================================================

    def find_player(self, player_id: str) -> Player | None:
        """Get a known player by id."""
        index = index_of(self.all_players, player_id)
        return self.all_players[index] if index is not None else None

    def add_player(self, player: Player):
        """Append a player to the roster."""
        self.all_players.append(player)
        logger.debug("Added player %s (%s)", player.player_id, player.name)
        self._notify()

    def update_player(self, updated_player: Player):
        """
        Replace a known player everywhere it appears.

        Unknown ids are ignored.
        """
        player_id = player_key(updated_player)
        index = index_of(self.all_players, player_id)
        if index is None:
            logger.debug("Ignoring update for unknown player %s", player_id)
            return

        self.all_players[index] = updated_player
        selected_index = index_of(self.selected_players, player_id)
        if selected_index is not None:
            self.selected_players[selected_index] = updated_player
        logger.debug("Updated player %s", player_id)
        self._notify()

    def delete_player(self, player: Player):
        """Remove a player from the roster and the selection."""
        player_id = player_key(player)
        self.all_players = [p for p in self.all_players if player_key(p) != player_id]
        self.selected_players = [
            p for p in self.selected_players if player_key(p) != player_id
        ]
        logger.debug("Deleted player %s", player_id)
        self._notify()
