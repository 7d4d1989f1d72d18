"""
API Module - Authoritative host interface.

Exposes the engine via a REST API. A host:
1. Starts or restores tables
2. Applies actor-tagged actions in arrival order
3. Serves full snapshots and per-player perspectives

All tables are in memory. Room discovery, presence and transport are
left to the embedding application.
"""

from .schemas import (
    # Requests
    ActionRequest,
    CreateTableRequest,
    RestoreTableRequest,
    # Responses
    ActionResponse,
    EndTableResponse,
    ErrorResponse,
    HealthResponse,
    PerspectiveResponse,
    TableResponse,
    # Enums
    ActionKind,
    ErrorCode,
)
from .service import TableService
from .app import create_app

__all__ = [
    # Requests
    "ActionRequest",
    "CreateTableRequest",
    "RestoreTableRequest",
    # Responses
    "ActionResponse",
    "EndTableResponse",
    "ErrorResponse",
    "HealthResponse",
    "PerspectiveResponse",
    "TableResponse",
    # Enums
    "ActionKind",
    "ErrorCode",
    # Service
    "TableService",
    "create_app",
]
