"""
API Module - Mobile app interface.

Exposes the scorekeeper via REST API for mobile consumption.
The mobile app:
1. Lists, creates and edits players (with photos)
2. Toggles players into the session
3. Sets each player's factions
4. Tracks victory points
5. Starts a new game

All state is in memory for the process lifetime. No user accounts.
"""

from .schemas import (
    # Requests
    SetFactionsRequest,
    # Responses
    FactionsResponse,
    PlayerListResponse,
    GameStateResponse,
    ToggleSelectionResponse,
    ScoreResponse,
    TransitionResponse,
    DeletePlayerResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    PlayerInfo,
    SelectedPlayerInfo,
    # Enums
    ErrorCode,
    SessionStepName,
    TransitionName,
)
from .service import APIService

__all__ = [
    # Requests
    "SetFactionsRequest",
    # Responses
    "FactionsResponse",
    "PlayerListResponse",
    "GameStateResponse",
    "ToggleSelectionResponse",
    "ScoreResponse",
    "TransitionResponse",
    "DeletePlayerResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "PlayerInfo",
    "SelectedPlayerInfo",
    # Enums
    "ErrorCode",
    "SessionStepName",
    "TransitionName",
    # Service
    "APIService",
]
