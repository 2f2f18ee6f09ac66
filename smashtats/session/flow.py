"""
Session Flow - The setup/scoring state machine.

Steps:
    SELECTING_PLAYERS --choose_factions--> SELECTING_FACTIONS
    SELECTING_FACTIONS --back-->           SELECTING_PLAYERS   (factions reset)
    SELECTING_FACTIONS --start_game-->     SCORING
    SCORING --new_game-->                  SELECTING_PLAYERS   (selection cleared)

Each transition has a gating predicate. A transition whose predicate is
false is simply not available: calling it returns False and changes
nothing. It is not an error.
"""

from __future__ import annotations
from enum import Enum
import logging

from ..roster.manager import RosterManager

logger = logging.getLogger(__name__)


class SessionStep(Enum):
    """Where the group is in the session."""
    SELECTING_PLAYERS = "selecting_players"
    SELECTING_FACTIONS = "selecting_factions"
    SCORING = "scoring"


class Transition(Enum):
    """User actions that move between steps."""
    CHOOSE_FACTIONS = "choose_factions"
    BACK = "back"
    START_GAME = "start_game"
    NEW_GAME = "new_game"


class SessionFlow:
    """
    Drives one table through player selection, faction selection and scoring.

    Usage:
        flow = SessionFlow(roster)

        roster.toggle_selection(a)
        roster.toggle_selection(b)
        if flow.can_choose_factions():
            flow.choose_factions()

        # ... factions set on the roster ...
        flow.start_game()
    """

    def __init__(self, roster: RosterManager, step: SessionStep = SessionStep.SELECTING_PLAYERS):
        self.roster = roster
        self.step = step

    # =========================================================================
    # Gating predicates
    # =========================================================================

    def can_choose_factions(self) -> bool:
        return (
            self.step == SessionStep.SELECTING_PLAYERS
            and self.roster.has_enough_players()
        )

    def can_go_back(self) -> bool:
        return self.step == SessionStep.SELECTING_FACTIONS

    def can_start_game(self) -> bool:
        return (
            self.step == SessionStep.SELECTING_FACTIONS
            and self.roster.has_enough_players()
            and self.roster.all_factions_chosen()
        )

    def can_start_new_game(self) -> bool:
        return self.step == SessionStep.SCORING

    def is_available(self, transition: Transition) -> bool:
        """Check if a transition is offered right now."""
        checks = {
            Transition.CHOOSE_FACTIONS: self.can_choose_factions,
            Transition.BACK: self.can_go_back,
            Transition.START_GAME: self.can_start_game,
            Transition.NEW_GAME: self.can_start_new_game,
        }
        return checks[transition]()

    def available_transitions(self) -> list[Transition]:
        """All transitions currently offered to the user."""
        return [t for t in Transition if self.is_available(t)]

    def players_missing_factions(self) -> list[str]:
        """Names of selected players still missing a valid faction pair."""
        return [p.name for p in self.roster.selected_players if not p.has_factions]

    # =========================================================================
    # Transitions
    # =========================================================================

    def choose_factions(self) -> bool:
        """Move from player selection to faction selection."""
        if not self.can_choose_factions():
            return self._refuse(Transition.CHOOSE_FACTIONS)
        self.step = SessionStep.SELECTING_FACTIONS
        return True

    def back(self) -> bool:
        """Return to player selection, dropping faction choices."""
        if not self.can_go_back():
            return self._refuse(Transition.BACK)
        self.step = SessionStep.SELECTING_PLAYERS
        self.roster.reset_faction_choices()
        return True

    def start_game(self) -> bool:
        """Move from faction selection to scoring."""
        if not self.can_start_game():
            return self._refuse(Transition.START_GAME)
        self.step = SessionStep.SCORING
        return True

    def new_game(self) -> bool:
        """Leave scoring and start over with an empty selection."""
        if not self.can_start_new_game():
            return self._refuse(Transition.NEW_GAME)
        self.step = SessionStep.SELECTING_PLAYERS
        self.roster.clear_selection()
        return True

    def apply(self, transition: Transition) -> bool:
        """Run a transition by name."""
        handlers = {
            Transition.CHOOSE_FACTIONS: self.choose_factions,
            Transition.BACK: self.back,
            Transition.START_GAME: self.start_game,
            Transition.NEW_GAME: self.new_game,
        }
        return handlers[transition]()

    def _refuse(self, transition: Transition) -> bool:
        logger.info(
            "Transition %s not available from %s", transition.value, self.step.value
        )
        return False
