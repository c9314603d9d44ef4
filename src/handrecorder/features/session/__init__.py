"""Session feature: service layer, schemas, and API router."""

from .router import create_session_routers
from .schemas import (
    ActionPayload,
    HandRecord,
    HandStatePayload,
    InputResult,
    SaveOutcomePayload,
    StepPayload,
    StoredHandPayload,
    TableViewPayload,
)
from .service import HandConfig, RecorderSessionManager

__all__ = [
    "ActionPayload",
    "HandConfig",
    "HandRecord",
    "HandStatePayload",
    "InputResult",
    "RecorderSessionManager",
    "SaveOutcomePayload",
    "StepPayload",
    "StoredHandPayload",
    "TableViewPayload",
    "create_session_routers",
]
