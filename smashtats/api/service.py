"""
API Service - Business logic layer between API and roster.

The service:
1. Translates API requests to roster/session calls
2. Owns the single in-memory table (one roster, one session flow)
3. Formats responses for mobile

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Responses
    FactionsResponse,
    PlayerListResponse,
    GameStateResponse,
    ToggleSelectionResponse,
    ScoreResponse,
    TransitionResponse,
    DeletePlayerResponse,
    # Shared
    PlayerInfo,
    SelectedPlayerInfo,
    # Enums
    SessionStepName,
    TransitionName,
)
from ..errors import PlayerNotFoundError, StepNotAllowedError
from ..games.smash_up.factions import FACTIONS
from ..games.smash_up.setup import setup_roster
from ..roster import Player, RosterManager, MIN_PLAYERS, MAX_PLAYERS, create_player
from ..session import SessionFlow, SessionStep, Transition

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service for mobile app.

    Usage:
        service = APIService()

        # Build the roster
        player = service.create_player("Ana", photo_bytes)

        # Pick players, then factions
        service.toggle_selection(player.player_id)
        service.apply_transition(TransitionName.CHOOSE_FACTIONS)
        service.set_factions(0, "Pirates", "Ninjas")

        # Score
        service.apply_transition(TransitionName.START_GAME)
        service.increment_points(0)

    Mutating calls are offered in one session step only:
    - SELECTING_PLAYERS: create, update, delete, toggle
    - SELECTING_FACTIONS: set_factions
    - SCORING: increment_points, decrement_points
    Anywhere else they raise StepNotAllowedError.
    """
    roster: RosterManager = field(default_factory=setup_roster)
    flow: SessionFlow | None = None

    # Bumped by the roster observer on every change
    revision: int = 0

    def __post_init__(self):
        if self.flow is None:
            self.flow = SessionFlow(self.roster)
        self._unsubscribe = self.roster.subscribe(self._on_roster_changed)

    def _on_roster_changed(self, roster: RosterManager):
        self.revision += 1

    def _require_step(self, operation: str, *steps: SessionStep):
        """
        Reject an operation the current step does not offer.

        Raises:
            StepNotAllowedError: flow is in another step
        """
        if self.flow.step not in steps:
            logger.info("Rejecting %s during %s", operation, self.flow.step.value)
            raise StepNotAllowedError(
                operation, self.flow.step.value, [s.value for s in steps]
            )

    # =========================================================================
    # Factions
    # =========================================================================

    def list_factions(self) -> FactionsResponse:
        return FactionsResponse(factions=list(FACTIONS), count=len(FACTIONS))

    # =========================================================================
    # Roster
    # =========================================================================

    def list_players(self) -> PlayerListResponse:
        """All known players, in roster order."""
        players = [self._player_info(p) for p in self.roster.all_players]
        return PlayerListResponse(players=players, count=len(players))

    def get_player(self, player_id: str) -> Player:
        """
        Get a known player.

        Raises:
            PlayerNotFoundError: unknown id
        """
        player = self.roster.find_player(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    def get_player_info(self, player_id: str) -> PlayerInfo:
        return self._player_info(self.get_player(player_id))

    def get_photo(self, player_id: str) -> bytes:
        return self.get_player(player_id).photo

    def create_player(self, name: str, photo: bytes | None) -> PlayerInfo:
        """
        Validate a new player submission and add it to the roster.

        Raises:
            PlayerValidationError: empty name or missing photo
        """
        self._require_step("create_player", SessionStep.SELECTING_PLAYERS)
        player = create_player(name, photo)
        self.roster.add_player(player)
        logger.info("Created player %s (%s)", player.player_id, player.name)
        return self._player_info(player)

    def update_player(
        self,
        player_id: str,
        name: str | None = None,
        photo: bytes | None = None,
    ) -> PlayerInfo:
        """
        Re-save an edited player under the same id.

        Fields left as None keep their current value. The result must
        still pass creation validation.

        Raises:
            PlayerNotFoundError: unknown id
            PlayerValidationError: resulting name or photo is empty
        """
        self._require_step("update_player", SessionStep.SELECTING_PLAYERS)
        existing = self.get_player(player_id)
        updated = create_player(
            name if name is not None else existing.name,
            photo if photo else existing.photo,
            player_id=existing.player_id,
        )
        self.roster.update_player(updated)
        return self._player_info(updated)

    def delete_player(self, player_id: str) -> DeletePlayerResponse:
        """Delete a player. Unknown ids are a harmless no-op."""
        self._require_step("delete_player", SessionStep.SELECTING_PLAYERS)
        existing = self.roster.find_player(player_id)
        if existing is None:
            return DeletePlayerResponse(success=True, player_id=player_id, deleted=False)
        self.roster.delete_player(existing)
        logger.info("Deleted player %s", player_id)
        return DeletePlayerResponse(success=True, player_id=player_id, deleted=True)

    # =========================================================================
    # Selection & Factions
    # =========================================================================

    def toggle_selection(self, player_id: str) -> ToggleSelectionResponse:
        """Select or deselect a known player."""
        self._require_step("toggle_selection", SessionStep.SELECTING_PLAYERS)
        player = self.get_player(player_id)
        self.roster.toggle_selection(player)
        return ToggleSelectionResponse(
            player_id=player_id,
            is_selected=self.roster.is_selected(player),
            game=self.get_game_state(),
        )

    def set_factions(self, index: int, faction1: str, faction2: str) -> SelectedPlayerInfo:
        """
        Set the factions of the selected player at index.

        Raises:
            UnknownFactionError: unknown faction name
            SelectionIndexError: index out of range
        """
        self._require_step("set_factions", SessionStep.SELECTING_FACTIONS)
        self.roster.set_factions(index, faction1, faction2)
        return self._selected_info(index)

    # =========================================================================
    # Scoring
    # =========================================================================

    def increment_points(self, index: int) -> ScoreResponse:
        self._require_step("increment_points", SessionStep.SCORING)
        player = self.roster.get_selected(index)
        total = self.roster.add_victory_point(index)
        return ScoreResponse(index=index, player_id=player.player_id, victory_points=total)

    def decrement_points(self, index: int) -> ScoreResponse:
        self._require_step("decrement_points", SessionStep.SCORING)
        player = self.roster.get_selected(index)
        before = player.victory_points
        total = self.roster.remove_victory_point(index)
        return ScoreResponse(
            index=index,
            player_id=player.player_id,
            victory_points=total,
            changed=total != before,
        )

    # =========================================================================
    # Session
    # =========================================================================

    def apply_transition(self, name: TransitionName) -> TransitionResponse | None:
        """
        Run a session transition.

        Returns:
            TransitionResponse, or None when the transition is not available
        """
        if not self.flow.apply(Transition(name.value)):
            return None
        return TransitionResponse(transition=name, game=self.get_game_state())

    def get_game_state(self) -> GameStateResponse:
        """Current step, selection and gates."""
        flow = self.flow
        return GameStateResponse(
            step=SessionStepName(flow.step.value),
            selected_players=[
                self._selected_info(i) for i in range(self.roster.selection_size)
            ],
            selection_size=self.roster.selection_size,
            min_players=MIN_PLAYERS,
            max_players=MAX_PLAYERS,
            can_choose_factions=flow.can_choose_factions(),
            can_go_back=flow.can_go_back(),
            can_start_game=flow.can_start_game(),
            can_start_new_game=flow.can_start_new_game(),
            available_transitions=[
                TransitionName(t.value) for t in flow.available_transitions()
            ],
            players_missing_factions=(
                flow.players_missing_factions() if flow.can_go_back() else []
            ),
            revision=self.revision,
        )

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def _player_info(self, player: Player) -> PlayerInfo:
        return PlayerInfo(
            player_id=player.player_id,
            name=player.name,
            has_photo=player.has_photo,
            photo_url=self._photo_url(player),
            faction1=player.faction1,
            faction2=player.faction2,
            victory_points=player.victory_points,
            is_selected=self.roster.is_selected(player),
        )

    def _selected_info(self, index: int) -> SelectedPlayerInfo:
        player = self.roster.get_selected(index)
        return SelectedPlayerInfo(
            index=index,
            player_id=player.player_id,
            name=player.name,
            has_photo=player.has_photo,
            photo_url=self._photo_url(player),
            faction1=player.faction1,
            faction2=player.faction2,
            victory_points=player.victory_points,
            is_selected=True,
            has_factions=player.has_factions,
            taken_factions=self.roster.taken_factions(index),
        )

    @staticmethod
    def _photo_url(player: Player) -> str | None:
        if not player.has_photo:
            return None
        return f"/api/v1/players/{player.player_id}/photo"
