"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the mobile app and the
scorekeeper. Photos are never inlined in JSON: clients fetch them from
GET /api/v1/players/{player_id}/photo when has_photo is true.

Error Codes:
- PLAYER_NOT_FOUND: No player with this id
- VALIDATION_ERROR: Submission rejected (empty name, missing photo)
- INVALID_FACTION: Faction name not in the catalogue
- INDEX_OUT_OF_RANGE: Selected player index outside the selection
- TRANSITION_NOT_AVAILABLE: Session step change not offered right now
- STEP_NOT_ALLOWED: Operation not offered in the current session step
- INTERNAL_ERROR: Unexpected server failure
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStepName(str, Enum):
    """Session step values."""
    SELECTING_PLAYERS = "selecting_players"
    SELECTING_FACTIONS = "selecting_factions"
    SCORING = "scoring"


class TransitionName(str, Enum):
    """Session transitions."""
    CHOOSE_FACTIONS = "choose_factions"
    BACK = "back"
    START_GAME = "start_game"
    NEW_GAME = "new_game"


class ErrorCode(str, Enum):
    """Structured error codes."""
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_FACTION = "INVALID_FACTION"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    TRANSITION_NOT_AVAILABLE = "TRANSITION_NOT_AVAILABLE"
    STEP_NOT_ALLOWED = "STEP_NOT_ALLOWED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    has_photo: bool = False
    photo_url: Optional[str] = None
    faction1: str = ""
    faction2: str = ""
    victory_points: int = Field(0, ge=0)
    is_selected: bool = False

    model_config = {"from_attributes": True}


class SelectedPlayerInfo(PlayerInfo):
    """A player in the current session, addressed by position."""
    index: int = Field(..., ge=0, description="Position in the selection")
    has_factions: bool = False
    taken_factions: list[str] = Field(
        default_factory=list,
        description="Factions already chosen by the other selected players",
    )


# =============================================================================
# Request Models
# =============================================================================

class SetFactionsRequest(BaseModel):
    """Request to set a selected player's two factions. Empty means unset."""
    faction1: str = Field("", description="First faction, or empty")
    faction2: str = Field("", description="Second faction, or empty")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class FactionsResponse(BaseModel):
    """The faction catalogue."""
    factions: list[str]
    count: int


class PlayerListResponse(BaseModel):
    """Every known player."""
    players: list[PlayerInfo] = Field(default_factory=list)
    count: int = 0


class DeletePlayerResponse(BaseModel):
    """Response after deleting a player. Deleting an unknown id is not an error."""
    success: bool
    player_id: str
    deleted: bool = False


class GameStateResponse(BaseModel):
    """Complete session state for display."""
    step: SessionStepName
    selected_players: list[SelectedPlayerInfo] = Field(default_factory=list)
    selection_size: int = 0
    min_players: int = 2
    max_players: int = 4

    # Gates
    can_choose_factions: bool = False
    can_go_back: bool = False
    can_start_game: bool = False
    can_start_new_game: bool = False
    available_transitions: list[TransitionName] = Field(default_factory=list)
    players_missing_factions: list[str] = Field(default_factory=list)

    revision: int = Field(0, description="Bumped on every state change")
    api_version: str = "v1"


class ToggleSelectionResponse(BaseModel):
    """Response after toggling a player's selection."""
    player_id: str
    is_selected: bool
    game: GameStateResponse


class ScoreResponse(BaseModel):
    """Response after changing a player's victory points."""
    index: int
    player_id: str
    victory_points: int = Field(..., ge=0)
    changed: bool = True


class TransitionResponse(BaseModel):
    """Response after a session transition."""
    transition: TransitionName
    game: GameStateResponse


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field("healthy", description="healthy, degraded, unhealthy")
    service: str = "smashtats"
    version: str = "0.1.0"
    environment: Optional[str] = None
