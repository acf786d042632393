"""Progress events emitted by the fragmentation and reconstruction engines."""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class OperationState(Enum):
    """
    States an operation moves through.

    Fragmentation: SPLITTING, PROCESSING, then COMPLETED or FAILED.
    Reconstruction: VALIDATING, PROCESSING, REASSEMBLING, VERIFYING, then
    COMPLETED or FAILED. While PROCESSING, each fragment reports its own
    steps (COMPRESSING, ENCRYPTING, SERIALIZING or DECODING, DECRYPTING,
    DECOMPRESSING) as step events carrying its index.
    """
    IDLE = "idle"
    SPLITTING = "splitting"
    VALIDATING = "validating"
    PROCESSING = "processing"
    COMPRESSING = "compressing"
    ENCRYPTING = "encrypting"
    SERIALIZING = "serializing"
    DECODING = "decoding"
    DECRYPTING = "decrypting"
    DECOMPRESSING = "decompressing"
    REASSEMBLING = "reassembling"
    VERIFYING = "verifying"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ProgressEvent:
    """
    A single progress update: `completed` of `total` units done.

    Step events carry the index of the fragment they describe; phase
    events have index None.
    """
    operation: str
    state: OperationState
    completed: int
    total: int
    message: str = ""
    index: Optional[int] = None

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 1.0

    @property
    def is_terminal(self) -> bool:
        return self.state in (OperationState.COMPLETED, OperationState.FAILED)


ProgressObserver = Callable[[ProgressEvent], None]


class ProgressReporter:
    """
    Append-only progress channel for one operation.

    Safe to call from worker threads; observer calls are serialized.
    """

    def __init__(self, operation: str, total: int, observer: Optional[ProgressObserver] = None):
        self.operation = operation
        self.total = total
        self.state = OperationState.IDLE
        self._observer = observer
        self._completed = 0
        self._lock = threading.Lock()

    @property
    def completed(self) -> int:
        return self._completed

    def transition(self, state: OperationState, message: str = "") -> None:
        with self._lock:
            self.state = state
            self._emit(message)

    def advance(self, message: str = "") -> None:
        with self._lock:
            self._completed += 1
            self._emit(message)

    def step(self, state: OperationState, index: int, message: str = "") -> None:
        """Report a per-fragment step without changing the operation state."""
        with self._lock:
            self._emit(message, state, index)

    def complete(self, message: str = "") -> None:
        self.transition(OperationState.COMPLETED, message)

    def fail(self, reason: str) -> None:
        self.transition(OperationState.FAILED, reason)

    def _emit(
        self,
        message: str,
        state: Optional[OperationState] = None,
        index: Optional[int] = None,
    ) -> None:
        if self._observer is None:
            return
        event = ProgressEvent(
            operation=self.operation,
            state=state or self.state,
            completed=self._completed,
            total=self.total,
            message=message,
            index=index,
        )
        try:
            self._observer(event)
        except Exception as e:
            logger.warning(f"Progress observer raised during {self.operation}: {e}")
