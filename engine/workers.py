"""Thread pool helper for per-fragment work."""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Optional, Sequence, Tuple, TypeVar

from common.exceptions import OperationCancelledError
from engine.progress import ProgressReporter

T = TypeVar("T")
R = TypeVar("R")


def run_indexed(
    work: Callable[[T], R],
    items: Sequence[Tuple[int, T]],
    reporter: ProgressReporter,
    workers: int,
    cancel_event: Optional[threading.Event] = None,
) -> Dict[int, R]:
    """
    Run `work` on every item and collect results by index.

    Each item is a (index, value) pair. Progress advances once per finished
    item. The first failure cancels work that has not started yet and is
    re-raised; cancellation is checked before each item starts.

    Returns:
        Mapping of index to result
    """
    def guarded(value: T) -> R:
        if cancel_event is not None and cancel_event.is_set():
            raise OperationCancelledError(f"{reporter.operation} cancelled")
        return work(value)

    results: Dict[int, R] = {}
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=reporter.operation) as pool:
        futures = {pool.submit(guarded, value): index for index, value in items}
        try:
            for future in as_completed(futures):
                index = futures[future]
                results[index] = future.result()
                reporter.advance(f"{reporter.operation}: piece {index + 1} done")
        except BaseException:
            for future in futures:
                future.cancel()
            raise
    return results
