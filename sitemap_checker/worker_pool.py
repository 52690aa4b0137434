"""
1.0 Worker Pool
Drains a shared URL queue with a fixed number of throttled, pausable workers.

Flow per worker:
1. If the pool is stopping or the queue is empty, the worker is done for good
2. If paused, sleep PAUSE_POLL_SECONDS and check again
3. Pop the next URL (another worker may have taken the last one)
4. Validate the URL (the validator records it in the shared store)
5. Count it in the processed total and the status histogram
6. Report progress
7. Sleep the configured request delay

The pool runs the workers on a ThreadPoolExecutor, joins them all, flushes
the reporter and returns the two record lists. If the join is interrupted
(Ctrl-C), the pool tells the workers to stop and returns without waiting
for the queue to drain.
"""

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from sitemap_checker.config import RANDOM, RunConfig
from sitemap_checker.pause import PAUSE_POLL_SECONDS, PauseToken
from sitemap_checker.progress import (
    UPCOMING_PREVIEW_SIZE,
    LogProgressReporter,
    ProgressReporter,
    ProgressUpdate,
)
from sitemap_checker.status_store import StatusRecord, StatusStore
from sitemap_checker.url_queue import UrlQueue
from sitemap_checker.url_validator import URLValidator

logger = logging.getLogger(__name__)


class WorkerState(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    DRAINING = "draining"
    DONE = "done"


def order_urls(urls: Sequence[str], traversal_order: str, rng: Optional[random.Random] = None) -> List[str]:
    """
    2.0 Apply the traversal order to a copy of the URL list.

    sequential keeps the input order; random is an unbiased Fisher-Yates
    shuffle (random.shuffle).
    """
    ordered = list(urls)
    if traversal_order == RANDOM:
        (rng or random).shuffle(ordered)
    return ordered


class Worker:
    """
    3.0 Worker
    One loop pulling from the shared queue until it is observed empty or
    the pool asks it to stop.
    """

    def __init__(
        self,
        worker_id: int,
        queue: UrlQueue,
        validator: URLValidator,
        store: StatusStore,
        reporter: ProgressReporter,
        pause_token: PauseToken,
        total: int,
        delay_seconds: float,
        sleep: Callable[[float], None],
        stop_event: Optional[threading.Event] = None,
    ):
        self.worker_id = worker_id
        self.queue = queue
        self.validator = validator
        self.store = store
        self.reporter = reporter
        self.pause_token = pause_token
        self.total = total
        self.delay_seconds = delay_seconds
        self.sleep = sleep
        self.stop_event = stop_event or threading.Event()
        self.state = WorkerState.RUNNING
        self.checked = 0

    def run(self) -> int:
        """3.1 Work until the queue is empty. Returns the number of URLs this worker checked."""
        logger.debug(f"Worker {self.worker_id} started")

        while not self.stop_event.is_set():
            # Emptiness wins over pause: a paused worker with nothing left finishes
            if len(self.queue) == 0:
                self.state = WorkerState.DRAINING
                break

            if self.pause_token.is_paused:
                self.state = WorkerState.PAUSED
                self.sleep(PAUSE_POLL_SECONDS)
                continue

            url = self.queue.pop_front()
            if url is None:
                # Once empty, always empty for this worker
                self.state = WorkerState.DRAINING
                break

            self.state = WorkerState.RUNNING
            self._check(url)
            self.sleep(self.delay_seconds)

        self.state = WorkerState.DONE
        logger.debug(f"Worker {self.worker_id} done after {self.checked} URLs")
        return self.checked

    def _check(self, url: str) -> None:
        """3.2 Validate one URL, update aggregates and report."""
        record = self.validator.validate(url)
        snapshot = self.store.mark_processed(record.status)
        self.checked += 1

        self.reporter.report(ProgressUpdate(
            processed=snapshot.processed,
            total=self.total,
            url=url,
            status=record.status,
            status_counts=snapshot.status_counts,
            upcoming=self.queue.peek(UPCOMING_PREVIEW_SIZE),
            non_200=snapshot.non_200_records,
        ))


class WorkerPool:
    """
    4.0 WorkerPool Class
    Runs concurrency_limit workers against one queue and one store.
    """

    def __init__(
        self,
        validator_factory: Callable[[StatusStore], URLValidator] = URLValidator,
        reporter: Optional[ProgressReporter] = None,
        pause_token: Optional[PauseToken] = None,
        sleep: Optional[Callable[[float], None]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        4.1 Initialize the pool.

        Args:
            validator_factory: Builds the validator bound to the run's store
            reporter: Receives a ProgressUpdate after every URL
            pause_token: Shared pause switch (a fresh, unpaused one if omitted)
            sleep: Sleep function used for delays and paused waits. Defaults
                to waiting on the stop event, so stop() cuts delays short.
            rng: Random source for the random traversal order
        """
        self.validator_factory = validator_factory
        self.reporter = reporter or LogProgressReporter()
        self.pause_token = pause_token or PauseToken()
        self.stop_event = threading.Event()
        self.sleep = sleep or self.stop_event.wait
        self.rng = rng
        self.store: Optional[StatusStore] = None
        self.queue: Optional[UrlQueue] = None
        self.workers: List[Worker] = []

    def stop(self) -> None:
        """4.2 Ask every worker to finish after its current URL."""
        if not self.stop_event.is_set():
            logger.warning("Stopping workers")
        self.stop_event.set()

    def run(self, config: RunConfig, urls: Sequence[str]) -> Tuple[List[StatusRecord], List[StatusRecord]]:
        """
        4.3 Check every URL and return (all_records, non_200_records).

        Exceptions escaping a worker are re-raised once every worker has
        finished. An interrupt while joining (KeyboardInterrupt) stops the
        workers and is re-raised at once, leaving any in-flight request to
        its own timeout.
        """
        ordered = order_urls(urls, config.traversal_order, self.rng)
        total = len(ordered)

        self.stop_event.clear()
        self.store = StatusStore()
        self.queue = UrlQueue(ordered)
        validator = self.validator_factory(self.store)

        self.workers = [
            Worker(
                worker_id=i,
                queue=self.queue,
                validator=validator,
                store=self.store,
                reporter=self.reporter,
                pause_token=self.pause_token,
                total=total,
                delay_seconds=config.request_delay_seconds,
                sleep=self.sleep,
                stop_event=self.stop_event,
            )
            for i in range(config.concurrency_limit)
        ]

        logger.info(
            f"Checking {total} URLs with {config.concurrency_limit} workers, "
            f"{config.request_delay_ms}ms delay, {config.traversal_order} order"
        )

        executor = ThreadPoolExecutor(
            max_workers=config.concurrency_limit, thread_name_prefix="url-worker"
        )
        futures = [executor.submit(worker.run) for worker in self.workers]
        try:
            wait(futures)
        except BaseException:
            self.stop()
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

        # Make sure the final progress update is fully rendered
        self.reporter.flush()

        for future in futures:
            error = future.exception()
            if error is not None:
                raise error

        logger.info(
            f"Finished: {self.store.processed}/{total} URLs processed, "
            f"{len(self.store.non_200_records)} non-200"
        )

        return self.store.results()

    @property
    def status_counts(self) -> Dict[int, int]:
        return self.store.status_counts if self.store else {}

    @property
    def processed(self) -> int:
        return self.store.processed if self.store else 0
