"""
Worker message protocol.

Requests and responses cross the process boundary as plain dicts and are
validated on each side, so a malformed payload surfaces as an error instead
of a crash.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..engine.models import GeneratedPuzzle
from ..errors import WorkerFault

ErrorKind = Literal["INVALID_CONFIG", "GENERATION_EXHAUSTED", "INTERNAL"]


class GenerateRequest(BaseModel):
    """Ask the worker for one puzzle."""
    type: Literal["GENERATE"] = "GENERATE"
    seq: int = Field(ge=0)
    config: Dict[str, Any]  # validated as LevelConfig inside the worker
    seed: Optional[int] = None
    settings: Dict[str, Any] = Field(default_factory=dict)


class ShutdownRequest(BaseModel):
    type: Literal["SHUTDOWN"] = "SHUTDOWN"


class ResultResponse(BaseModel):
    """A generated puzzle."""
    type: Literal["RESULT"] = "RESULT"
    seq: int
    puzzle: GeneratedPuzzle


class ErrorResponse(BaseModel):
    """Generation did not produce a puzzle."""
    type: Literal["ERROR"] = "ERROR"
    seq: int
    kind: ErrorKind
    reason: str


WorkerResponse = Annotated[Union[ResultResponse, ErrorResponse], Field(discriminator="type")]

_response_adapter: TypeAdapter = TypeAdapter(WorkerResponse)


def parse_response(payload: Any) -> Union[ResultResponse, ErrorResponse]:
    """
    Validate a payload received from the worker.

    Raises:
        WorkerFault: If the payload is not a well-formed response
    """
    try:
        return _response_adapter.validate_python(payload)
    except ValidationError as exc:
        raise WorkerFault(f"Malformed worker response: {exc.error_count()} validation errors") from exc
