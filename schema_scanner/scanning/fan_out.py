# ==============================================
# BoundedFanOut
# ==============================================
#
# PURPOSE:
#   Run one worker per item with at most `limit` in flight, and
#   collect whatever succeeds. Used for both levels of a scan:
#   databases in a cluster, collections in a database.
#
#   - The pool size is the counting bound on in-flight workers.
#   - Results and failures are appended under a lock, in
#     completion order.
#   - Leaving the executor block is the join barrier: run()
#     returns only after every worker has finished.
#   - A failing worker is logged and recorded; siblings continue.
#
# ==============================================

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass
class FanOutResult(Generic[T]):
    results: List[T] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)


class BoundedFanOut:
    def __init__(self, limit: int, name: str = "scan"):
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        self.limit = limit
        self.name = name

    def run(
        self,
        items: Iterable[str],
        worker: Callable[[str], T],
        label: Callable[[str], str] = str,
    ) -> FanOutResult[T]:
        """
        Run `worker(item)` for every item.

        Args:
            items: Unit names (database or collection names)
            worker: Builds the result for one unit; may raise
            label: Describes a unit in log messages

        Returns:
            FanOutResult with successful results and the names of failed units
        """
        outcome: FanOutResult[T] = FanOutResult()
        lock = threading.Lock()

        def task(item: str) -> None:
            try:
                result = worker(item)
            except Exception as e:
                logger.error("Error scanning %s: %s", label(item), e)
                logger.debug("Failure details for %s", label(item), exc_info=True)
                with lock:
                    outcome.failures.append(item)
                return

            with lock:
                outcome.results.append(result)

        with ThreadPoolExecutor(max_workers=self.limit, thread_name_prefix=self.name) as executor:
            for item in items:
                executor.submit(task, item)

        return outcome
