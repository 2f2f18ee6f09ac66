"""
Tests for API service layer.

Tests:
- Roster operations via the service
- Session lifecycle via the service
- Error handling
"""

import pytest

from ..api.schemas import SessionStepName, TransitionName
from ..api.service import APIService
from ..errors import (
    PlayerNotFoundError,
    PlayerValidationError,
    SelectionIndexError,
    StepNotAllowedError,
)
from .conftest import PHOTO


def start_scoring(service):
    """Seat A and B with factions and move to scoring."""
    service.toggle_selection("a")
    service.toggle_selection("b")
    service.apply_transition(TransitionName.CHOOSE_FACTIONS)
    service.set_factions(0, "Pirates", "Ninjas")
    service.set_factions(1, "Zombies", "Robots")
    service.apply_transition(TransitionName.START_GAME)


class TestRosterService:
    """Tests for player management."""

    def test_list_players(self, service):
        response = service.list_players()

        assert response.count == 5
        assert [p.player_id for p in response.players] == ["a", "b", "c", "d", "e"]
        assert all(p.has_photo for p in response.players)
        assert response.players[0].photo_url == "/api/v1/players/a/photo"

    def test_default_service_seeds_roster(self):
        """A bare service starts with the default roster."""
        response = APIService().list_players()

        assert [p.name for p in response.players] == ["Dani", "Cami", "Gabi", "Fran", "Rodri"]
        assert not any(p.has_photo for p in response.players)
        assert all(p.photo_url is None for p in response.players)

    def test_create_player(self, service):
        info = service.create_player("Ana", PHOTO)

        assert info.name == "Ana"
        assert info.has_photo
        assert service.list_players().count == 6
        assert service.get_photo(info.player_id) == PHOTO

    def test_create_player_rejected(self, service):
        """Invalid submissions never reach the roster."""
        with pytest.raises(PlayerValidationError):
            service.create_player("", PHOTO)
        with pytest.raises(PlayerValidationError):
            service.create_player("Ana", None)

        assert service.list_players().count == 5

    def test_update_player_keeps_photo(self, service):
        info = service.update_player("a", name="Alma")

        assert info.player_id == "a"
        assert info.name == "Alma"
        assert service.get_photo("a") == PHOTO

    def test_update_player_new_photo(self, service):
        service.update_player("a", photo=b"other-image")

        assert service.get_photo("a") == b"other-image"
        assert service.get_player("a").name == "A"

    def test_update_propagates_to_selection(self, service):
        service.toggle_selection("a")

        service.update_player("a", name="Alma")

        assert service.get_game_state().selected_players[0].name == "Alma"

    def test_update_blank_name_rejected(self, service):
        with pytest.raises(PlayerValidationError):
            service.update_player("a", name="  ")

        assert service.get_player("a").name == "A"

    def test_update_unknown(self, service):
        with pytest.raises(PlayerNotFoundError):
            service.update_player("zzz", name="Ghost")

    def test_delete_player(self, service):
        service.toggle_selection("a")

        response = service.delete_player("a")

        assert response.deleted
        assert service.list_players().count == 4
        assert service.get_game_state().selection_size == 0

    def test_delete_unknown_is_not_an_error(self, service):
        response = service.delete_player("zzz")

        assert response.success
        assert not response.deleted

    def test_get_unknown_player(self, service):
        with pytest.raises(PlayerNotFoundError) as exc_info:
            service.get_player_info("zzz")
        assert exc_info.value.player_id == "zzz"


class TestSessionService:
    """Tests for selection, factions, scoring and transitions."""

    def test_toggle_selection(self, service):
        response = service.toggle_selection("a")

        assert response.is_selected
        assert response.game.selection_size == 1
        assert service.list_players().players[0].is_selected

    def test_fifth_toggle_reports_not_selected(self, service):
        for pid in "abcd":
            service.toggle_selection(pid)

        response = service.toggle_selection("e")

        assert not response.is_selected
        assert response.game.selection_size == 4

    def test_game_state_gates(self, service):
        state = service.get_game_state()
        assert state.step == SessionStepName.SELECTING_PLAYERS
        assert not state.can_choose_factions
        assert state.available_transitions == []

        service.toggle_selection("a")
        service.toggle_selection("b")

        state = service.get_game_state()
        assert state.can_choose_factions
        assert state.available_transitions == [TransitionName.CHOOSE_FACTIONS]

    def test_refused_transition(self, service):
        assert service.apply_transition(TransitionName.START_GAME) is None
        assert service.get_game_state().step == SessionStepName.SELECTING_PLAYERS

    def test_full_session(self, service):
        service.toggle_selection("a")
        service.toggle_selection("b")
        response = service.apply_transition(TransitionName.CHOOSE_FACTIONS)
        assert response.game.step == SessionStepName.SELECTING_FACTIONS
        assert response.game.players_missing_factions == ["A", "B"]

        info = service.set_factions(0, "Pirates", "Ninjas")
        assert info.has_factions
        service.set_factions(1, "Zombies", "Robots")
        assert service.get_game_state().selected_players[1].taken_factions == ["Pirates", "Ninjas"]

        response = service.apply_transition(TransitionName.START_GAME)
        assert response.game.step == SessionStepName.SCORING

        for _ in range(3):
            score = service.increment_points(0)
        assert score.victory_points == 3
        assert score.player_id == "a"

        response = service.apply_transition(TransitionName.NEW_GAME)
        assert response.game.selection_size == 0
        assert service.list_players().count == 5

    def test_decrement_at_zero(self, service):
        start_scoring(service)

        score = service.decrement_points(0)

        assert score.victory_points == 0
        assert not score.changed

    def test_index_out_of_range(self, service):
        start_scoring(service)

        with pytest.raises(SelectionIndexError):
            service.increment_points(2)

    def test_revision_bumps_on_change(self, service):
        before = service.get_game_state().revision

        service.toggle_selection("a")
        service.toggle_selection("b")
        service.toggle_selection("a")

        assert service.get_game_state().revision == before + 3


class TestStepGating:
    """Mutating calls outside the step that offers them are rejected."""

    @pytest.mark.parametrize("call", [
        lambda s: s.toggle_selection("c"),
        lambda s: s.toggle_selection("b"),
        lambda s: s.create_player("Ana", PHOTO),
        lambda s: s.update_player("a", name="Alma"),
        lambda s: s.delete_player("a"),
        lambda s: s.set_factions(0, "Aliens", "Wizards"),
    ])
    def test_rejected_during_scoring(self, service, call):
        """Scores, factions and the roster survive a rejected call."""
        start_scoring(service)
        service.increment_points(0)

        with pytest.raises(StepNotAllowedError) as exc_info:
            call(service)

        assert exc_info.value.step == "scoring"
        state = service.get_game_state()
        assert state.step == SessionStepName.SCORING
        assert state.selection_size == 2
        assert state.selected_players[0].name == "A"
        assert state.selected_players[0].victory_points == 1
        assert state.selected_players[0].faction1 == "Pirates"
        assert service.list_players().count == 5

    def test_set_factions_rejected_while_selecting_players(self, service):
        service.toggle_selection("a")

        with pytest.raises(StepNotAllowedError) as exc_info:
            service.set_factions(0, "Aliens", "Wizards")

        assert exc_info.value.allowed == ["selecting_factions"]
        assert service.get_game_state().selected_players[0].faction1 == ""

    @pytest.mark.parametrize("call", [
        lambda s: s.increment_points(0),
        lambda s: s.decrement_points(0),
    ])
    def test_points_rejected_before_scoring(self, service, call):
        service.toggle_selection("a")
        service.toggle_selection("b")
        with pytest.raises(StepNotAllowedError):
            call(service)

        service.apply_transition(TransitionName.CHOOSE_FACTIONS)
        with pytest.raises(StepNotAllowedError):
            call(service)

        assert service.get_game_state().selected_players[0].victory_points == 0

    @pytest.mark.parametrize("call", [
        lambda s: s.toggle_selection("c"),
        lambda s: s.create_player("Ana", PHOTO),
        lambda s: s.update_player("a", name="Alma"),
        lambda s: s.delete_player("c"),
    ])
    def test_roster_rejected_while_selecting_factions(self, service, call):
        service.toggle_selection("a")
        service.toggle_selection("b")
        service.apply_transition(TransitionName.CHOOSE_FACTIONS)
        service.set_factions(0, "Pirates", "Ninjas")

        with pytest.raises(StepNotAllowedError):
            call(service)

        state = service.get_game_state()
        assert state.selection_size == 2
        assert state.selected_players[0].faction1 == "Pirates"
        assert service.list_players().count == 5

    def test_rejection_does_not_bump_revision(self, service):
        start_scoring(service)
        before = service.get_game_state().revision

        with pytest.raises(StepNotAllowedError):
            service.toggle_selection("c")

        assert service.get_game_state().revision == before

    def test_roster_edits_allowed_after_new_game(self, service):
        start_scoring(service)
        service.apply_transition(TransitionName.NEW_GAME)

        info = service.update_player("a", name="Alma")

        assert info.name == "Alma"
        assert service.toggle_selection("c").is_selected


class TestMultipleServices:
    """Each service owns an independent table."""

    def test_services_are_independent(self):
        first = APIService()
        second = APIService()

        player_id = first.list_players().players[0].player_id
        first.toggle_selection(player_id)

        assert first.get_game_state().selection_size == 1
        assert second.get_game_state().selection_size == 0
