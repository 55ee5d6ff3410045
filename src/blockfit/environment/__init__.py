"""Generation orchestration, the worker process and the play session."""

from .messages import ErrorResponse, GenerateRequest, ResultResponse, ShutdownRequest, parse_response
from .worker import handle_message, worker_main
from .orchestrator import GenerationOrchestrator, GenerationStatus
from .session import Hint, PuzzleSession

__all__ = [
    "GenerationOrchestrator",
    "GenerationStatus",
    "PuzzleSession",
    "Hint",
    # Worker
    "handle_message",
    "worker_main",
    # Protocol
    "GenerateRequest",
    "ShutdownRequest",
    "ResultResponse",
    "ErrorResponse",
    "parse_response",
]
