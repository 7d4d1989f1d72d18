"""
FastAPI Application - REST API for authoritative Hanabi hosting.

Endpoints:
    POST   /api/v1/tables                           Start a new game
    POST   /api/v1/tables/restore                   Re-host a game from a snapshot
    GET    /api/v1/tables/{id}/snapshot             Full snapshot (host view)
    GET    /api/v1/tables/{id}/perspective/{viewer} One player's view
    POST   /api/v1/tables/{id}/actions              Apply an actor-tagged action
    DELETE /api/v1/tables/{id}                      Close a table
    GET    /health                                  Health check

All responses are JSON with explicit Pydantic schemas.
"""

import logging
import os
from typing import Optional, Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..errors import ConfigurationError
from ..engine_core import StateValidationError
from .schemas import (
    ActionRequest,
    ActionResponse,
    CreateTableRequest,
    EndTableResponse,
    ErrorCode,
    ErrorResponse,
    HealthResponse,
    PerspectiveResponse,
    RestoreTableRequest,
    TableResponse,
)
from .service import TableService

# Environment configuration
HANABI_ENV = os.getenv("HANABI_ENV", "development")
HANABI_LOG_LEVEL = os.getenv("HANABI_LOG_LEVEL", "WARNING")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    ErrorCode.TABLE_NOT_FOUND: 404,
    ErrorCode.UNKNOWN_PLAYER: 404,
    ErrorCode.ACTION_REJECTED: 409,
}


def create_app(service: Optional[TableService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional TableService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    logging.getLogger("hanabi").setLevel(HANABI_LOG_LEVEL.upper())

    app = FastAPI(
        title="Hanabi Engine API",
        description="""
Authoritative host for Hanabi tables.

The host owns each table's engine. Clients submit actions tagged with the
acting player and read back either the full snapshot or their own
perspective, where their own cards are hidden.

## Error Codes

| Code | Description |
|------|-------------|
| `TABLE_NOT_FOUND` | Table does not exist |
| `INVALID_CONFIGURATION` | New-game options are invalid |
| `INVALID_SNAPSHOT` | Snapshot is malformed or inconsistent |
| `UNKNOWN_PLAYER` | Viewer is not seated at the table |
| `ACTION_REJECTED` | Action broke a rule (see `details.rule_code`) |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    table_service = service or TableService()

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

    def from_error(error: ErrorResponse) -> JSONResponse:
        return make_error_response(
            error.error_code,
            error.error,
            status_code=_STATUS_BY_CODE.get(error.error_code, 400),
            details=error.details,
        )

    # =========================================================================
    # Table Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/tables",
        response_model=TableResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid game options"}},
        tags=["Tables"],
        summary="Start a new game",
    )
    async def create_table(request: CreateTableRequest) -> Union[TableResponse, JSONResponse]:
        """Deal a new game. Pass `shuffle_seed` for a reproducible deck."""
        try:
            return table_service.create_table(request)
        except ConfigurationError as e:
            return make_error_response(ErrorCode.INVALID_CONFIGURATION, e.message)

    @app.post(
        "/api/v1/tables/restore",
        response_model=TableResponse,
        responses={400: {"model": ErrorResponse, "description": "Snapshot rejected"}},
        tags=["Tables"],
        summary="Re-host a game from a snapshot",
    )
    async def restore_table(request: RestoreTableRequest) -> Union[TableResponse, JSONResponse]:
        """Validate a snapshot and host it as a new table."""
        try:
            return table_service.restore_table(request)
        except StateValidationError as e:
            logger.warning("Rejected snapshot: %s", "; ".join(e.errors))
            return make_error_response(
                ErrorCode.INVALID_SNAPSHOT,
                str(e),
                details={"errors": e.errors},
            )

    @app.get(
        "/api/v1/tables/{table_id}/snapshot",
        response_model=TableResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Tables"],
        summary="Get the full snapshot",
    )
    async def get_snapshot(table_id: str) -> Union[TableResponse, JSONResponse]:
        response = table_service.get_table(table_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/tables/{table_id}/perspective/{viewer_id}",
        response_model=PerspectiveResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Tables"],
        summary="Get one player's view",
    )
    async def get_perspective(table_id: str, viewer_id: str) -> Union[PerspectiveResponse, JSONResponse]:
        """The viewer's own cards come back with suit and number hidden."""
        response = table_service.get_perspective(table_id, viewer_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/tables/{table_id}/actions",
        response_model=ActionResponse,
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Action broke a rule"},
        },
        tags=["Actions"],
        summary="Apply a turn action",
    )
    async def apply_action(table_id: str, request: ActionRequest) -> Union[ActionResponse, JSONResponse]:
        """
        Apply a play, discard or hint for `player_id`.

        Rejected actions leave the table unchanged.
        """
        response = table_service.apply_action(table_id, request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.delete(
        "/api/v1/tables/{table_id}",
        response_model=EndTableResponse,
        tags=["Tables"],
        summary="Close a table",
    )
    async def end_table(table_id: str) -> EndTableResponse:
        return table_service.end_table(table_id)

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
            service="hanabi-engine",
            version=__version__,
            environment=HANABI_ENV,
        )

    return app


# For running directly: uvicorn hanabi.api.app:app
app = create_app()
