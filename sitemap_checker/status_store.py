"""
1.0 Status Store Module
Shared aggregates written by every worker during a run.

Holds:
- all_records: every completed HTTP exchange, in completion order
- non_200_records: every observation whose status is not exactly 200
- status_counts: histogram of observed status codes
- processed: number of URLs fully handled by a worker

Workers are threads, so every mutation and every snapshot goes through
a single lock.
"""

import logging
import threading
from dataclasses import dataclass, asdict, field
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

# Status used when a request fails without any HTTP response
NETWORK_FAILURE_STATUS = 500


@dataclass(frozen=True)
class StatusRecord:
    """Result of checking a single URL."""
    url: str
    status: int

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class StoreSnapshot:
    """Consistent copy of the store, taken under its lock."""
    processed: int
    status_counts: Dict[int, int] = field(default_factory=dict)
    non_200_records: List[StatusRecord] = field(default_factory=list)


class StatusStore:
    """
    2.0 StatusStore Class
    Append-only record collections plus the status histogram.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._all_records: List[StatusRecord] = []
        self._non_200_records: List[StatusRecord] = []
        self._status_counts: Dict[int, int] = {}
        self._processed = 0

    # =========================================================================
    # 3.0 RECORDING
    # =========================================================================

    def record_response(self, record: StatusRecord) -> None:
        """
        3.1 Record a completed HTTP exchange.

        Always appended to the full list; also to the non-200 list when the
        status is anything other than exactly 200.
        """
        with self._lock:
            if record.status != 200:
                self._non_200_records.append(record)
            self._all_records.append(record)

    def record_failure(self, record: StatusRecord, include_in_all: bool = False) -> None:
        """
        3.2 Record a transport-level failure.

        Only the non-200 list receives it unless include_in_all is set.
        """
        with self._lock:
            self._non_200_records.append(record)
            if include_in_all:
                self._all_records.append(record)

    def mark_processed(self, status: int) -> StoreSnapshot:
        """
        3.3 Count one processed URL under its status and return a snapshot.

        The increment and the snapshot happen under the same lock, so the
        returned processed count always matches the histogram it comes with.
        """
        with self._lock:
            self._processed += 1
            self._status_counts[status] = self._status_counts.get(status, 0) + 1
            return StoreSnapshot(
                processed=self._processed,
                status_counts=dict(self._status_counts),
                non_200_records=list(self._non_200_records),
            )

    # =========================================================================
    # 4.0 READ ACCESS
    # =========================================================================

    @property
    def processed(self) -> int:
        with self._lock:
            return self._processed

    @property
    def status_counts(self) -> Dict[int, int]:
        with self._lock:
            return dict(self._status_counts)

    @property
    def all_records(self) -> List[StatusRecord]:
        with self._lock:
            return list(self._all_records)

    @property
    def non_200_records(self) -> List[StatusRecord]:
        with self._lock:
            return list(self._non_200_records)

    def results(self) -> Tuple[List[StatusRecord], List[StatusRecord]]:
        """Return (all_records, non_200_records) as copies."""
        with self._lock:
            return list(self._all_records), list(self._non_200_records)
