from __future__ import annotations

import enum
import logging
import time
import uuid
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class TerminalState(enum.Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"
    OVERSIZED = "oversized"
    ERRORED = "errored"


@dataclass(slots=True)
class TransferSession:
    """One download or upload, from start to its single terminal state.

    ``transition_to`` is the only mutation point for ``state``: the first call
    wins and every later call is a no-op returning False. Each terminal helper
    logs only when its transition actually happened, so racing close, abort
    and error notifications still produce a single log line.
    """

    route: str
    total_bytes: int = 0
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    start_ts: float = field(default_factory=time.monotonic)
    bytes_so_far: int = 0
    state: TerminalState | None = None
    end_ts: float | None = None

    @property
    def finished(self) -> bool:
        return self.state is not None

    @property
    def millis(self) -> int:
        end = time.monotonic() if self.end_ts is None else self.end_ts
        return int((end - self.start_ts) * 1000)

    def add(self, n: int) -> int:
        self.bytes_so_far += n
        return self.bytes_so_far

    def transition_to(self, state: TerminalState) -> bool:
        if self.state is not None:
            return False
        self.state = state
        self.end_ts = time.monotonic()
        return True

    def log_start(self, **extra: object) -> None:
        details = " ".join(f"{k}={v}" for k, v in extra.items())
        logger.debug("%s start: id=%s %s", self.route, self.id, details)

    def complete(self) -> bool:
        if not self.transition_to(TerminalState.COMPLETED):
            return False
        logger.debug(
            "%s end: id=%s bytes=%d millis=%d",
            self.route,
            self.id,
            self.bytes_so_far,
            self.millis,
        )
        return True

    def abort(self) -> bool:
        if not self.transition_to(TerminalState.ABORTED):
            return False
        logger.warning(
            "%s abort: id=%s bytes=%d millis=%d",
            self.route,
            self.id,
            self.bytes_so_far,
            self.millis,
        )
        return True

    def oversize(self, limit: int) -> bool:
        if not self.transition_to(TerminalState.OVERSIZED):
            return False
        logger.warning(
            "%s too_large: id=%s bytes=%d max=%d millis=%d",
            self.route,
            self.id,
            self.bytes_so_far,
            limit,
            self.millis,
        )
        return True

    def fail(self, err: BaseException) -> bool:
        if not self.transition_to(TerminalState.ERRORED):
            return False
        logger.error("%s error: id=%s err=%s", self.route, self.id, err)
        return True
