"""Exception hierarchy for puzzle generation and the worker boundary."""

from typing import Optional


class PuzzleError(Exception):
    """Base class for all engine errors."""


class CarveFailure(PuzzleError):
    """The requested target region could not be carved. Retryable."""


class PartitionFailure(PuzzleError):
    """The carved region could not be split into valid pieces. Retryable."""


class InvalidConfig(PuzzleError):
    """Caller supplied out-of-range board or piece parameters."""


class WorkerFault(PuzzleError):
    """The generation worker crashed, timed out or sent malformed data."""


class GenerationFailed(PuzzleError):
    """
    Terminal generation failure surfaced to the player.

    Attributes:
        reason: Human readable cause
        attempts: Number of generation attempts made before giving up
    """

    def __init__(self, reason: str, attempts: int = 0, kind: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.attempts = attempts
        self.kind = kind


RETRYABLE = (CarveFailure, PartitionFailure)
