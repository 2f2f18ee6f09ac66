"""
Tests for player records and the faction catalogue.

Tests:
- Identity by id
- Copy-on-edit helpers
- Create validation
- Faction validation
"""

import pytest

from ..errors import PlayerValidationError, UnknownFactionError
from ..games.smash_up.factions import FACTIONS, validate_faction, is_complete_pair, is_faction
from ..roster.player import Player, create_player, player_key, same_player, index_of
from .conftest import PHOTO, make_player


class TestPlayerIdentity:
    """Players are the same iff their ids match."""

    def test_same_id_different_fields(self):
        """Records with the same id are the same player."""
        a = Player(player_id="p1", name="Dani", photo=b"1")
        b = Player(player_id="p1", name="Daniela", photo=b"2", victory_points=7)

        assert same_player(a, b)
        assert player_key(a) == player_key(b) == "p1"

    def test_different_ids(self):
        """Records with different ids differ even with equal fields."""
        a = Player(player_id="p1", name="Dani")
        b = Player(player_id="p2", name="Dani")

        assert not same_player(a, b)

    def test_index_of(self):
        """index_of finds by id."""
        players = [make_player("a"), make_player("b")]

        assert index_of(players, "b") == 1
        assert index_of(players, "zzz") is None


class TestPlayerCopies:
    """Edits return copies."""

    def test_with_factions(self):
        """with_factions leaves the original untouched."""
        player = make_player("a")
        updated = player.with_factions("Pirates", "Ninjas")

        assert updated.faction1 == "Pirates"
        assert updated.faction2 == "Ninjas"
        assert player.faction1 == ""
        assert same_player(player, updated)

    def test_with_victory_points_clamps(self):
        """Victory points never go negative."""
        player = make_player("a")

        assert player.with_victory_points(-3).victory_points == 0
        assert player.with_victory_points(4).victory_points == 4

    def test_has_factions(self):
        """has_factions needs two different factions."""
        player = make_player("a")

        assert not player.has_factions
        assert not player.with_factions("Pirates", "").has_factions
        assert not player.with_factions("Pirates", "Pirates").has_factions
        assert player.with_factions("Pirates", "Robots").has_factions

    def test_for_new_session(self):
        """Session fields reset, identity kept."""
        player = make_player("a").with_factions("Aliens", "Wizards").with_victory_points(9)
        fresh = player.for_new_session()

        assert fresh.faction1 == fresh.faction2 == ""
        assert fresh.victory_points == 0
        assert fresh.name == player.name

    def test_has_photo(self):
        assert make_player("a").has_photo
        assert not Player(player_id="x", name="X").has_photo


class TestCreatePlayer:
    """Create-form validation."""

    def test_create_valid(self):
        """A valid submission gets a fresh id and clean session fields."""
        player = create_player("  Ana ", PHOTO)

        assert player.name == "Ana"
        assert player.photo == PHOTO
        assert player.player_id
        assert player.victory_points == 0
        assert player.faction1 == player.faction2 == ""

    def test_ids_are_unique(self):
        a = create_player("Ana", PHOTO)
        b = create_player("Ana", PHOTO)

        assert a.player_id != b.player_id

    def test_keep_existing_id(self):
        """Re-saving an edited player keeps its id."""
        player = create_player("Ana", PHOTO, player_id="p1")

        assert player.player_id == "p1"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, name):
        with pytest.raises(PlayerValidationError) as exc_info:
            create_player(name, PHOTO)
        assert exc_info.value.field == "name"

    @pytest.mark.parametrize("photo", [b"", None])
    def test_missing_photo_rejected(self, photo):
        with pytest.raises(PlayerValidationError) as exc_info:
            create_player("Ana", photo)
        assert exc_info.value.field == "photo"

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            create_player("", None)


class TestFactions:
    """Faction catalogue."""

    def test_catalogue(self):
        assert FACTIONS == ("Pirates", "Ninjas", "Zombies", "Robots", "Aliens", "Wizards")
        assert is_faction("Zombies")
        assert not is_faction("Dinosaurs")

    def test_validate_accepts_unset(self):
        assert validate_faction("") == ""
        assert validate_faction("Robots") == "Robots"

    def test_validate_rejects_unknown(self):
        with pytest.raises(UnknownFactionError) as exc_info:
            validate_faction("Dinosaurs")
        assert exc_info.value.faction == "Dinosaurs"

    def test_complete_pair(self):
        assert is_complete_pair("Pirates", "Ninjas")
        assert not is_complete_pair("Pirates", "Pirates")
        assert not is_complete_pair("", "Ninjas")
