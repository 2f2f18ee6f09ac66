"""
FastAPI Application - REST API for mobile app.

Endpoints:
    GET    /api/v1/factions                               Faction catalogue
    GET    /api/v1/players                                List roster
    POST   /api/v1/players                                Create player (multipart)
    GET    /api/v1/players/{id}                           Get player
    PUT    /api/v1/players/{id}                           Edit player (multipart)
    DELETE /api/v1/players/{id}                           Delete player
    GET    /api/v1/players/{id}/photo                     Player photo bytes
    POST   /api/v1/players/{id}/toggle                    Toggle selection
    GET    /api/v1/game                                   Session state
    PUT    /api/v1/game/players/{index}/factions          Set factions
    POST   /api/v1/game/players/{index}/points/increment  +1 VP
    POST   /api/v1/game/players/{index}/points/decrement  -1 VP
    POST   /api/v1/game/transitions/{name}                Change session step
    WS     /api/v1/game/ws                                Real-time updates

All responses are JSON with explicit Pydantic schemas, except the photo.
Photos are uploaded as multipart/form-data.

Configuration (environment):
    SMASHTATS_ENV              development / production
    ALLOWED_ORIGINS            Comma-separated CORS origins
    SMASHTATS_DEFAULT_PLAYERS  Comma-separated names to seed the roster
    SMASHTATS_LOG_LEVEL        Logging level
"""

from typing import Annotated, Optional, Union
import json
import logging
import os

from fastapi import FastAPI, File, Form, Request, UploadFile, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .. import __version__
from ..errors import (
    PlayerNotFoundError,
    PlayerValidationError,
    SelectionIndexError,
    StepNotAllowedError,
    UnknownFactionError,
)
from ..logs import configure_logging
from .schemas import (
    # Request models
    SetFactionsRequest,
    # Response models
    ErrorResponse,
    FactionsResponse,
    PlayerListResponse,
    PlayerInfo,
    SelectedPlayerInfo,
    DeletePlayerResponse,
    GameStateResponse,
    ToggleSelectionResponse,
    ScoreResponse,
    TransitionResponse,
    HealthResponse,
    # Enums
    ErrorCode,
    TransitionName,
)
from .service import APIService

# Environment configuration
SMASHTATS_ENV = os.getenv("SMASHTATS_ENV", "development")
SMASHTATS_DEFAULT_PLAYERS = os.getenv("SMASHTATS_DEFAULT_PLAYERS", None)
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    configure_logging()

    app = FastAPI(
        title="Smashtats API",
        description="""
Smash Up scorekeeper - pick players, choose factions, track victory points.

## Session Flow

1. `selecting_players`: toggle 2-4 players, then `choose_factions`
2. `selecting_factions`: set two different factions each, then `start_game`
   (or `back`, which clears faction choices)
3. `scoring`: increment/decrement victory points, then `new_game`

## Error Codes

| Code | Description |
|------|-------------|
| `PLAYER_NOT_FOUND` | Player does not exist |
| `VALIDATION_ERROR` | Name or photo missing |
| `INVALID_FACTION` | Faction not in the catalogue |
| `INDEX_OUT_OF_RANGE` | No selected player at that index |
| `TRANSITION_NOT_AVAILABLE` | Step change not offered right now |
| `STEP_NOT_ALLOWED` | Operation not offered in the current step |
| `INTERNAL_ERROR` | Unexpected server failure |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # CORS for mobile app
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    if service is None:
        from ..games.smash_up.setup import parse_player_names, setup_roster
        roster = setup_roster(names=parse_player_names(SMASHTATS_DEFAULT_PLAYERS))
        service = APIService(roster=roster)
    api_service = service

    # WebSocket connections
    ws_connections: list[WebSocket] = []

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(PlayerNotFoundError)
    async def player_not_found_handler(request: Request, exc: PlayerNotFoundError):
        return make_error_response(
            ErrorCode.PLAYER_NOT_FOUND,
            str(exc),
            status_code=404,
            details={"player_id": exc.player_id},
        )

    @app.exception_handler(PlayerValidationError)
    async def validation_handler(request: Request, exc: PlayerValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            str(exc),
            details={"field": exc.field},
        )

    @app.exception_handler(UnknownFactionError)
    async def faction_handler(request: Request, exc: UnknownFactionError):
        return make_error_response(
            ErrorCode.INVALID_FACTION,
            str(exc),
            details={"faction": exc.faction},
        )

    @app.exception_handler(SelectionIndexError)
    async def index_handler(request: Request, exc: SelectionIndexError):
        return make_error_response(
            ErrorCode.INDEX_OUT_OF_RANGE,
            str(exc),
            status_code=404,
            details={"index": exc.index, "selection_size": exc.size},
        )

    @app.exception_handler(StepNotAllowedError)
    async def step_handler(request: Request, exc: StepNotAllowedError):
        return make_error_response(
            ErrorCode.STEP_NOT_ALLOWED,
            str(exc),
            status_code=409,
            details={
                "operation": exc.operation,
                "step": exc.step,
                "allowed_steps": exc.allowed,
            },
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return make_error_response(
            ErrorCode.INTERNAL_ERROR,
            "Internal server error",
            status_code=500,
        )

    async def broadcast(message: dict):
        """Broadcast a message to all WebSocket connections."""
        dead_connections = []
        for ws in ws_connections:
            try:
                await ws.send_json(message)
            except (WebSocketDisconnect, RuntimeError):
                dead_connections.append(ws)
        for ws in dead_connections:
            ws_connections.remove(ws)

    async def broadcast_state():
        await broadcast({
            "type": "state_update",
            "payload": api_service.get_game_state().model_dump(mode="json"),
        })

    async def read_photo(photo: Optional[UploadFile]) -> Optional[bytes]:
        if photo is None:
            return None
        return await photo.read()

    # =========================================================================
    # Factions
    # =========================================================================

    @app.get(
        "/api/v1/factions",
        response_model=FactionsResponse,
        tags=["Factions"],
        summary="List the faction catalogue",
    )
    async def list_factions() -> FactionsResponse:
        return api_service.list_factions()

    # =========================================================================
    # Player Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/players",
        response_model=PlayerListResponse,
        tags=["Players"],
        summary="List all known players",
    )
    async def list_players() -> PlayerListResponse:
        return api_service.list_players()

    @app.post(
        "/api/v1/players",
        response_model=PlayerInfo,
        status_code=201,
        responses={400: {"model": ErrorResponse, "description": "Name or photo missing"}},
        tags=["Players"],
        summary="Create a player",
    )
    async def create_player(
        name: Annotated[str, Form(description="Display name")] = "",
        photo: Annotated[Optional[UploadFile], File(description="Avatar photo")] = None,
    ) -> PlayerInfo:
        """
        Create a new player from the create-player form.

        Both `name` and `photo` are required; the submission is rejected
        with `VALIDATION_ERROR` otherwise.
        """
        player = api_service.create_player(name, await read_photo(photo))
        await broadcast_state()
        return player

    @app.get(
        "/api/v1/players/{player_id}",
        response_model=PlayerInfo,
        responses={404: {"model": ErrorResponse}},
        tags=["Players"],
        summary="Get a player",
    )
    async def get_player(player_id: str) -> PlayerInfo:
        return api_service.get_player_info(player_id)

    @app.put(
        "/api/v1/players/{player_id}",
        response_model=PlayerInfo,
        responses={
            400: {"model": ErrorResponse, "description": "Name or photo missing"},
            404: {"model": ErrorResponse, "description": "Player not found"},
        },
        tags=["Players"],
        summary="Edit a player",
    )
    async def update_player(
        player_id: str,
        name: Annotated[Optional[str], Form(description="New display name")] = None,
        photo: Annotated[Optional[UploadFile], File(description="New avatar photo")] = None,
    ) -> PlayerInfo:
        """
        Re-save a player under the same id.

        Omitted fields keep their current value. The change is applied
        to the roster and, if the player is selected, to the session.
        """
        player = api_service.update_player(player_id, name, await read_photo(photo))
        await broadcast_state()
        return player

    @app.delete(
        "/api/v1/players/{player_id}",
        response_model=DeletePlayerResponse,
        tags=["Players"],
        summary="Delete a player",
    )
    async def delete_player(player_id: str) -> DeletePlayerResponse:
        """Delete a player from the roster and the session. Unknown ids are ignored."""
        response = api_service.delete_player(player_id)
        if response.deleted:
            await broadcast_state()
        return response

    @app.get(
        "/api/v1/players/{player_id}/photo",
        responses={
            200: {"content": {"application/octet-stream": {}}},
            404: {"model": ErrorResponse},
        },
        tags=["Players"],
        summary="Get a player's photo",
    )
    async def get_photo(player_id: str) -> Response:
        photo = api_service.get_photo(player_id)
        if not photo:
            return make_error_response(
                ErrorCode.PLAYER_NOT_FOUND,
                f"Player {player_id} has no photo",
                status_code=404,
                details={"player_id": player_id},
            )
        return Response(content=photo, media_type="application/octet-stream")

    @app.post(
        "/api/v1/players/{player_id}/toggle",
        response_model=ToggleSelectionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Session"],
        summary="Select or deselect a player",
    )
    async def toggle_selection(player_id: str) -> ToggleSelectionResponse:
        """
        Toggle a player's selection for the current session.

        Selecting a fifth player is ignored: `is_selected` stays false.
        """
        response = api_service.toggle_selection(player_id)
        await broadcast_state()
        return response

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/game",
        response_model=GameStateResponse,
        tags=["Session"],
        summary="Get the session state",
    )
    async def get_game_state() -> GameStateResponse:
        return api_service.get_game_state()

    @app.put(
        "/api/v1/game/players/{index}/factions",
        response_model=SelectedPlayerInfo,
        responses={
            400: {"model": ErrorResponse, "description": "Unknown faction"},
            404: {"model": ErrorResponse, "description": "Index out of range"},
        },
        tags=["Session"],
        summary="Set a selected player's factions",
    )
    async def set_factions(index: int, body: SetFactionsRequest) -> SelectedPlayerInfo:
        """
        Set both factions of the selected player at `index`.

        **Request Body:**
        ```json
        {"faction1": "Pirates", "faction2": "Ninjas"}
        ```
        """
        player = api_service.set_factions(index, body.faction1, body.faction2)
        await broadcast_state()
        return player

    @app.post(
        "/api/v1/game/players/{index}/points/increment",
        response_model=ScoreResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Scoring"],
        summary="Add one victory point",
    )
    async def increment_points(index: int) -> ScoreResponse:
        response = api_service.increment_points(index)
        await broadcast_state()
        return response

    @app.post(
        "/api/v1/game/players/{index}/points/decrement",
        response_model=ScoreResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Scoring"],
        summary="Remove one victory point",
    )
    async def decrement_points(index: int) -> ScoreResponse:
        """Remove one victory point. At zero nothing changes (`changed=false`)."""
        response = api_service.decrement_points(index)
        if response.changed:
            await broadcast_state()
        return response

    @app.post(
        "/api/v1/game/transitions/{name}",
        response_model=TransitionResponse,
        responses={409: {"model": ErrorResponse, "description": "Transition not available"}},
        tags=["Session"],
        summary="Move to another session step",
    )
    async def apply_transition(name: TransitionName) -> Union[TransitionResponse, JSONResponse]:
        """
        Apply a session transition.

        Check `available_transitions` in the game state to know which
        ones are offered.
        """
        response = api_service.apply_transition(name)
        if response is None:
            game = api_service.get_game_state()
            return make_error_response(
                ErrorCode.TRANSITION_NOT_AVAILABLE,
                f"Transition {name.value} not available from {game.step.value}",
                status_code=409,
                details={
                    "step": game.step.value,
                    "available_transitions": [t.value for t in game.available_transitions],
                },
            )
        await broadcast_state()
        return response

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/game/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Session state changed
        - pong: Reply to ping
        - error: Message could not be parsed

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()
        ws_connections.append(websocket)

        try:
            await websocket.send_json({
                "type": "state_update",
                "payload": api_service.get_game_state().model_dump(mode="json"),
            })

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})

        except WebSocketDisconnect:
            logger.debug("WebSocket client disconnected")
        finally:
            if websocket in ws_connections:
                ws_connections.remove(websocket)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="smashtats",
            version=__version__,
            environment=SMASHTATS_ENV,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Smashtats API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn smashtats.api.app:app
app = create_app()
