"""
Generation orchestrator: drives the worker process for the interactive caller.

The caller never blocks on generation unless it asks to (``wait`` /
``generate``). Every request is tagged with a sequence number; responses for
anything but the latest request are discarded, so an old puzzle can never
overwrite a newer one.
"""

import logging
import multiprocessing as mp
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..config import EngineSettings
from ..engine.difficulty import derive_level_config
from ..engine.models import GeneratedPuzzle
from ..errors import GenerationFailed, InvalidConfig, WorkerFault
from .messages import GenerateRequest, ResultResponse, ShutdownRequest, parse_response
from .worker import worker_main

logger = logging.getLogger(__name__)


class GenerationStatus(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    READY = "READY"
    FAILED = "FAILED"


@dataclass
class _PendingRequest:
    seq: int
    level: Optional[int]
    config: Dict[str, Any]
    deadline: float
    retries: int = 0
    derived: bool = True  # config came from the difficulty curve, re-derive on retry
    pregenerate: bool = False  # background request with no caller waiting


def _terminate_process(proc, grace: float = 0.2) -> None:
    """Tear down ``proc`` within a few ``grace`` periods."""
    proc.join(timeout=grace)
    if not proc.is_alive():
        return
    proc.terminate()
    proc.join(timeout=grace)
    if proc.is_alive():
        proc.kill()
        proc.join(timeout=grace)


class GenerationOrchestrator:
    """
    Owns the generation worker and the status of the single live request.

    Attributes:
        settings: Retry, timeout and search bounds
        status: IDLE, LOADING, READY or FAILED
        puzzle: The latest generated puzzle once READY
        failure_reason: User-visible cause once FAILED
        failure_kind: INVALID_CONFIG, GENERATION_EXHAUSTED, INTERNAL or WORKER_FAULT
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        on_puzzle_ready: Optional[Callable[[GeneratedPuzzle], None]] = None,
        on_failed: Optional[Callable[[str], None]] = None,
        start_method: str = "spawn",
    ):
        self.settings = settings or EngineSettings()
        self.on_puzzle_ready = on_puzzle_ready
        self.on_failed = on_failed
        self._ctx = mp.get_context(start_method)
        self._rng = random.Random(self.settings.seed)
        self._process = None
        self._conn = None
        self._seq = 0
        self._pending: Optional[_PendingRequest] = None
        self._pregenerated: Optional[GeneratedPuzzle] = None

        self.status = GenerationStatus.IDLE
        self.puzzle: Optional[GeneratedPuzzle] = None
        self.failure_reason: Optional[str] = None
        self.failure_kind: Optional[str] = None
        self.last_level: Optional[int] = None

    # -- status flags consumed by UI collaborators

    @property
    def loading(self) -> bool:
        return self.status == GenerationStatus.LOADING

    @property
    def failed(self) -> bool:
        return self.status == GenerationStatus.FAILED

    @property
    def latest_seq(self) -> int:
        return self._seq

    @property
    def busy(self) -> bool:
        """True while any request, including a background one, is in flight."""
        return self._pending is not None

    # -- requests

    def request_level(self, level: int) -> int:
        """
        Start generating a level. Returns the request's sequence number.

        Uses a pre-generated puzzle, or promotes an in-flight background
        request, when either matches the level.
        """
        self.last_level = level
        self._begin_loading()

        if self._pregenerated is not None and self._pregenerated.level_number == level:
            puzzle, self._pregenerated = self._pregenerated, None
            self._pending = None
            self._seq += 1
            self._ready(puzzle)
            return self._seq

        pending = self._pending
        if pending is not None and pending.pregenerate and pending.level == level:
            pending.pregenerate = False
            return pending.seq

        try:
            config = derive_level_config(level, self._rng)
        except InvalidConfig as exc:
            self._seq += 1
            self._fail(str(exc), "INVALID_CONFIG")
            return self._seq
        return self._send(config.model_dump(), level)

    def request_config(self, config: Dict[str, Any]) -> int:
        """
        Generate from a raw config dict, validated only by the worker.

        Out-of-range values come back as an INVALID_CONFIG failure.
        """
        level = config.get("level_number", config.get("levelNumber"))
        self.last_level = level if isinstance(level, int) else None
        self._begin_loading()
        return self._send(dict(config), self.last_level, derived=False)

    def pregenerate(self, level: int) -> Optional[int]:
        """Generate a level in the background if the worker is idle."""
        if self._pending is not None:
            return None
        if self._pregenerated is not None and self._pregenerated.level_number == level:
            return None
        self._pregenerated = None
        try:
            config = derive_level_config(level, self._rng)
        except InvalidConfig:
            return None
        return self._send(config.model_dump(), level, pregenerate=True)

    def retry(self) -> Optional[int]:
        """Re-request the last level after a failure (the retry button)."""
        if self.last_level is None:
            return None
        return self.request_level(self.last_level)

    def cancel(self) -> None:
        """Forget the live request; its response will be discarded."""
        self._seq += 1
        self._pending = None
        if self.status == GenerationStatus.LOADING:
            self.status = GenerationStatus.IDLE

    # -- response handling

    def poll(self) -> Optional[GeneratedPuzzle]:
        """
        Handle any responses that have arrived, without blocking.

        The live request's timeout runs from when it was sent, and restarts
        whenever a stale response shows the worker has just finished older work.
        """
        conn = self._conn
        if conn is not None:
            try:
                # a fault while handling replaces the connection
                while self._conn is conn and conn.poll(0):
                    self._handle(conn.recv())
            except (EOFError, OSError) as exc:
                self._fault(f"Generation worker connection lost: {exc}")

        pending = self._pending
        if pending is not None:
            if self._process is None or not self._process.is_alive():
                exitcode = self._process.exitcode if self._process is not None else None
                self._fault(f"Generation worker exited unexpectedly (exit code {exitcode})")
            elif time.monotonic() > pending.deadline:
                self._fault(f"Generation timed out after {self.settings.worker_timeout:.0f}s")

        return self.puzzle if self.status == GenerationStatus.READY else None

    def wait(self, timeout: Optional[float] = None) -> Optional[GeneratedPuzzle]:
        """
        Block until the caller's request resolves.

        Args:
            timeout: Seconds to wait; the per-request worker timeout still applies

        Returns:
            The puzzle if READY, otherwise None (FAILED, or still LOADING on timeout)
        """
        deadline = time.monotonic() + timeout if timeout is not None else None
        self.poll()
        while self.status == GenerationStatus.LOADING:
            remaining = 0.05
            if deadline is not None:
                remaining = min(remaining, deadline - time.monotonic())
                if remaining <= 0:
                    break
            if self._conn is not None:
                try:
                    self._conn.poll(remaining)
                except (EOFError, OSError):
                    pass
            else:
                time.sleep(remaining)
            self.poll()
        return self.puzzle if self.status == GenerationStatus.READY else None

    def generate(self, level: int) -> GeneratedPuzzle:
        """
        Generate a level and wait for it.

        Raises:
            GenerationFailed: If generation ends in the FAILED state
        """
        self.request_level(level)
        puzzle = self.wait()
        if puzzle is None:
            raise GenerationFailed(
                self.failure_reason or "Generation did not complete",
                kind=self.failure_kind,
            )
        return puzzle

    def _handle(self, payload: Any) -> None:
        try:
            response = parse_response(payload)
        except WorkerFault as exc:
            self._fault(str(exc))
            return

        pending = self._pending
        if pending is None or response.seq != pending.seq:
            logger.warning("Discarding stale response for request %d (latest is %d)", response.seq, self._seq)
            if pending is not None:
                # the worker only now starts on the live request
                pending.deadline = time.monotonic() + self.settings.worker_timeout
            return
        self._pending = None

        if isinstance(response, ResultResponse):
            if pending.pregenerate:
                self._pregenerated = response.puzzle
            else:
                self._ready(response.puzzle)
            return

        if pending.pregenerate:
            logger.warning("Background generation of level %s failed: %s", pending.level, response.reason)
            return

        if response.kind == "GENERATION_EXHAUSTED" and pending.retries < self.settings.max_worker_retries:
            logger.warning(
                "Generation of level %s exhausted (retry %d/%d): %s",
                pending.level, pending.retries + 1, self.settings.max_worker_retries, response.reason,
            )
            config = pending.config
            if pending.derived and pending.level is not None:
                config = derive_level_config(pending.level, self._rng).model_dump()
            self._send(config, pending.level, retries=pending.retries + 1, derived=pending.derived)
            return

        self._fail(response.reason, response.kind)

    # -- state transitions

    def _begin_loading(self) -> None:
        self.status = GenerationStatus.LOADING
        self.puzzle = None
        self.failure_reason = None
        self.failure_kind = None

    def _ready(self, puzzle: GeneratedPuzzle) -> None:
        self.puzzle = puzzle
        self.status = GenerationStatus.READY
        logger.info("Level %d ready (%d pieces)", puzzle.level_number, puzzle.piece_count)
        if self.on_puzzle_ready:
            self.on_puzzle_ready(puzzle)

    def _fail(self, reason: str, kind: Optional[str]) -> None:
        self._pending = None
        self.puzzle = None
        self.status = GenerationStatus.FAILED
        self.failure_reason = reason
        self.failure_kind = kind
        logger.error("Generation failed (%s): %s", kind, reason)
        if self.on_failed:
            self.on_failed(reason)

    def _fault(self, reason: str) -> None:
        pending = self._pending
        self._stop_worker()
        if pending is None:
            return
        if pending.pregenerate:
            self._pending = None
            logger.warning("Background generation lost: %s", reason)
            return
        self._fail(reason, "WORKER_FAULT")

    # -- worker process

    def _send(
        self,
        config: Dict[str, Any],
        level: Optional[int],
        *,
        retries: int = 0,
        derived: bool = True,
        pregenerate: bool = False,
    ) -> int:
        self._seq += 1
        request = GenerateRequest(
            seq=self._seq,
            config=config,
            seed=self._rng.randrange(2 ** 32),
            settings=self.settings.model_dump(),
        )
        self._pending = _PendingRequest(
            seq=self._seq,
            level=level,
            config=config,
            deadline=time.monotonic() + self.settings.worker_timeout,
            retries=retries,
            derived=derived,
            pregenerate=pregenerate,
        )
        try:
            self._ensure_worker()
            self._conn.send(request.model_dump())
        except (BrokenPipeError, OSError) as exc:
            self._fault(f"Could not reach generation worker: {exc}")
        return self._seq

    def _ensure_worker(self) -> None:
        if self._process is not None and self._process.is_alive():
            return
        self._stop_worker()
        parent, child = self._ctx.Pipe(duplex=True)
        proc = self._ctx.Process(target=worker_main, args=(child,), daemon=True)
        proc.start()
        child.close()
        self._process, self._conn = proc, parent
        logger.debug("Started generation worker pid=%s", proc.pid)

    def _stop_worker(self) -> None:
        proc, conn = self._process, self._conn
        self._process, self._conn = None, None
        if conn is not None:
            try:
                conn.send(ShutdownRequest().model_dump())
            except (BrokenPipeError, OSError):
                pass
            conn.close()
        if proc is not None:
            _terminate_process(proc)

    def close(self) -> None:
        """Shut the worker down; pending requests are dropped."""
        self._pending = None
        self._stop_worker()

    def __enter__(self) -> "GenerationOrchestrator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
