"""
Bounded batch scheduler.

Work items are cut into contiguous batches. Every item of a batch is handed
to a thread pool whose size is the in-flight cap, so no more than
``max_in_flight`` operations ever run at once. The scheduler waits for the
whole batch (successes and failures alike) before starting the next one,
which puts a hard ceiling on sockets and memory held at any moment.

An operation returns the value to keep, or None to drop the item. Results
arrive in completion order; callers sort afterwards.

Schedulers nest: an operation may itself run another scheduler (hosts outer,
ports inner during discovery).
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, TypeVar

from .logger import log_event

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


@dataclass
class ScheduleStats:
    items: int = 0
    processed: int = 0
    kept: int = 0
    failed: int = 0
    batches: int = 0
    elapsed_s: float = 0.0


def iter_batches(items: Sequence[T], batch_size: int) -> Iterator[Sequence[T]]:
    for i in range(0, len(items), batch_size):
        yield items[i:i + batch_size]


class BatchScheduler:
    def __init__(
        self,
        max_in_flight: int,
        batch_size: int,
        name: str = "scan",
        progress_level: int = logging.INFO,
    ):
        if max_in_flight < 1:
            raise ValueError("max_in_flight must be >= 1")
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.max_in_flight = max_in_flight
        self.batch_size = batch_size
        self.name = name
        # per-host inner schedulers pass logging.DEBUG
        self.progress_level = progress_level
        self.stats = ScheduleStats()
        self._lock = threading.Lock()

    def _execute(self, item: T, operation: Callable[[T], Optional[R]], collected: List[R]) -> None:
        try:
            result = operation(item)
        except Exception:
            logger.warning("[%s] operation failed for %r", self.name, item, exc_info=True)
            with self._lock:
                self.stats.processed += 1
                self.stats.failed += 1
            return

        with self._lock:
            self.stats.processed += 1
            if result is not None:
                collected.append(result)
                self.stats.kept += 1

    def run(self, items: Sequence[T], operation: Callable[[T], Optional[R]]) -> List[R]:
        items = list(items)
        self.stats = ScheduleStats(items=len(items))
        if not items:
            return []

        total_batches = (len(items) + self.batch_size - 1) // self.batch_size
        workers = min(self.max_in_flight, self.batch_size, len(items))
        accumulated: List[R] = []
        start_all = time.perf_counter()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=self.name) as pool:
            for index, batch in enumerate(iter_batches(items, self.batch_size), start=1):
                batch_start = time.perf_counter()
                collected: List[R] = []

                futures = [pool.submit(self._execute, item, operation, collected) for item in batch]
                # Batch barrier: nothing from the next batch starts before this returns
                wait(futures)

                with self._lock:
                    accumulated.extend(collected)
                    self.stats.batches += 1

                log_event(logger, "batch_done", {
                    "scan": self.name,
                    "batch": index,
                    "batches": total_batches,
                    "kept": len(collected),
                    "elapsed_s": round(time.perf_counter() - batch_start, 4),
                }, level=self.progress_level)

        self.stats.elapsed_s = time.perf_counter() - start_all
        return accumulated
