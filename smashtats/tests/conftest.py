"""
Pytest fixtures for Smashtats tests.
"""

import pytest

from ..roster.player import Player
from ..roster.manager import RosterManager
from ..session.flow import SessionFlow
from ..api.service import APIService


PHOTO = b"\x89PNG\r\n\x1a\nfake-image-data"


def make_player(player_id: str, name: str | None = None) -> Player:
    return Player(player_id=player_id, name=name or player_id.upper(), photo=PHOTO)


@pytest.fixture
def players() -> list[Player]:
    """Five roster players, one more than a table can seat."""
    return [make_player(pid) for pid in ("a", "b", "c", "d", "e")]


@pytest.fixture
def roster(players: list[Player]) -> RosterManager:
    """Roster with five players and nobody selected."""
    return RosterManager(players)


@pytest.fixture
def two_selected(roster: RosterManager, players: list[Player]) -> RosterManager:
    """Roster with A and B selected."""
    roster.toggle_selection(players[0])
    roster.toggle_selection(players[1])
    return roster


@pytest.fixture
def flow(roster: RosterManager) -> SessionFlow:
    return SessionFlow(roster)


@pytest.fixture
def service(players: list[Player]) -> APIService:
    """API service over the five-player roster."""
    return APIService(roster=RosterManager(players))
