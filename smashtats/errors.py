"""
Errors raised by the roster and session layers.

All of them are local and recoverable: the state is left untouched
when one is raised.
"""


class SmashtatsError(Exception):
    """Base class for Smashtats errors."""


class PlayerValidationError(SmashtatsError, ValueError):
    """A player submission is incomplete (empty name or missing photo)."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class UnknownFactionError(SmashtatsError, ValueError):
    """A faction name is not part of the catalogue."""

    def __init__(self, faction: str):
        super().__init__(f"Unknown faction: {faction!r}")
        self.faction = faction


class SelectionIndexError(SmashtatsError, IndexError):
    """An index into the selected players is out of range."""

    def __init__(self, index: int, size: int):
        super().__init__(
            f"Selected player index {index} out of range (0..{size - 1})"
            if size else f"Selected player index {index} out of range (no players selected)"
        )
        self.index = index
        self.size = size


class PlayerNotFoundError(SmashtatsError, LookupError):
    """No player with this id is in the roster."""

    def __init__(self, player_id: str):
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id


class StepNotAllowedError(SmashtatsError):
    """An operation was requested outside the session step that offers it."""

    def __init__(self, operation: str, step: str, allowed: list[str]):
        super().__init__(
            f"{operation} not allowed during {step} (allowed: {', '.join(allowed)})"
        )
        self.operation = operation
        self.step = step
        self.allowed = allowed
