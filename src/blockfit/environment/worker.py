"""
Generation worker.

``worker_main`` runs in a child process and serves requests from a pipe one
at a time. ``handle_message`` holds all request handling so it can also be
called in-process.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from ..config import EngineSettings
from ..engine.generator import generate_puzzle
from ..engine.models import LevelConfig
from ..errors import GenerationFailed
from .messages import ErrorResponse, GenerateRequest, ResultResponse

logger = logging.getLogger(__name__)


def _request_seq(message: Any) -> int:
    if isinstance(message, dict) and isinstance(message.get("seq"), int):
        return message["seq"]
    return -1


def _format_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}"
        for err in exc.errors()
    )


def handle_message(message: Any) -> Dict[str, Any]:
    """
    Process one GENERATE request.

    Args:
        message: The raw request dict

    Returns:
        A RESULT or ERROR response dict carrying the request's sequence number
    """
    seq = _request_seq(message)

    try:
        request = GenerateRequest.model_validate(message)
        config = LevelConfig.model_validate(request.config)
        settings = EngineSettings.model_validate(request.settings)
    except ValidationError as exc:
        logger.warning("Rejected request %d: %s", seq, _format_errors(exc))
        return ErrorResponse(
            seq=seq,
            kind="INVALID_CONFIG",
            reason=f"Invalid config: {_format_errors(exc)}",
        ).model_dump()

    try:
        puzzle = generate_puzzle(config, seed=request.seed, settings=settings)
    except GenerationFailed as exc:
        return ErrorResponse(seq=seq, kind="GENERATION_EXHAUSTED", reason=exc.reason).model_dump()
    except Exception as exc:
        # Reported to the caller, which treats it like a crashed worker
        logger.exception("Unexpected error while generating request %d", seq)
        return ErrorResponse(seq=seq, kind="INTERNAL", reason=f"{type(exc).__name__}: {exc}").model_dump()

    return ResultResponse(seq=seq, puzzle=puzzle).model_dump()


def worker_main(conn) -> None:
    """Serve requests from ``conn`` until SHUTDOWN or the pipe closes."""
    try:
        while True:
            try:
                message = conn.recv()
            except EOFError:
                break
            if isinstance(message, dict) and message.get("type") == "SHUTDOWN":
                break
            response = handle_message(message)
            try:
                conn.send(response)
            except (BrokenPipeError, OSError):
                break
    finally:
        conn.close()
