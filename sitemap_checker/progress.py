"""
1.0 Progress Reporting
Live feedback after every checked URL.

Reporters are called from worker threads, so each one serializes its own
output. flush() is the end-of-run barrier: once it returns, the last update
has been fully written.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from sitemap_checker.status_store import StatusRecord

logger = logging.getLogger(__name__)

# 1.1 Status codes always shown in the console table
COMMON_STATUS_CODES = [200, 301, 302, 403, 404, 500]

UPCOMING_PREVIEW_SIZE = 5


@dataclass
class ProgressUpdate:
    """Everything a reporter needs to render one step of the run."""
    processed: int
    total: int
    url: str
    status: int
    status_counts: Dict[int, int] = field(default_factory=dict)
    upcoming: List[str] = field(default_factory=list)
    non_200: List[StatusRecord] = field(default_factory=list)

    @property
    def percent(self) -> float:
        if not self.total:
            return 100.0
        return self.processed / self.total * 100


class ProgressReporter:
    """
    2.0 Base reporter.
    Subclasses implement _render(); locking and flush are handled here.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.last_update = None

    def report(self, update: ProgressUpdate) -> None:
        with self._lock:
            self.last_update = update
            self._render(update)

    def flush(self) -> None:
        # Waits for any render still in progress on another thread
        with self._lock:
            pass

    def _render(self, update: ProgressUpdate) -> None:
        raise NotImplementedError


class LogProgressReporter(ProgressReporter):
    """One log line per checked URL."""

    def _render(self, update: ProgressUpdate) -> None:
        logger.info(
            f"[{update.processed}/{update.total} {update.percent:.2f}%] "
            f"{update.status} {update.url}"
        )


class ConsoleProgressReporter(ProgressReporter):
    """
    3.0 Terminal tables, redrawn after every URL.

    Layout:
    - Progress: percent, processed, total, last URL, status
    - Status Codes: counts for the common codes
    - URLs in Queue: upcoming preview
    - Non-200 URLs: every non-200 observation so far
    """

    def __init__(self, console: Optional[Console] = None):
        super().__init__()
        self.console = console or Console()

    def _render(self, update: ProgressUpdate) -> None:
        self.console.clear()
        self.console.print(self.build_tables(update))

    @staticmethod
    def build_tables(update: ProgressUpdate) -> Group:
        """3.1 Build the full screen as one renderable."""
        progress = Table(title="Progress")
        for column in ("Progress", "Processed", "Total", "Last URL", "Status"):
            progress.add_column(column)
        progress.add_row(
            f"{update.percent:.2f}%",
            str(update.processed),
            str(update.total),
            Text(update.url),
            str(update.status),
        )

        codes = Table(title="Status Codes")
        codes.add_column("Code")
        codes.add_column("Count", justify="right")
        for code in COMMON_STATUS_CODES:
            codes.add_row(str(code), str(update.status_counts.get(code, 0)))

        upcoming = Table(title="URLs in Queue")
        upcoming.add_column("URL")
        for url in update.upcoming:
            upcoming.add_row(Text(url))

        non_200 = Table(title="Non-200 URLs")
        non_200.add_column("URL")
        non_200.add_column("Status", justify="right")
        for record in update.non_200:
            non_200.add_row(Text(record.url), str(record.status))

        return Group(progress, codes, upcoming, non_200)
