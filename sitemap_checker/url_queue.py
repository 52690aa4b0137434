import logging
import threading
from collections import deque
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class UrlQueue:
    """
    Pending URLs shared by all workers of a pool.

    pop_front is atomic: no URL is handed to two workers and none is lost.
    peek is for display only and carries no guarantee beyond returning at
    most n URLs in queue order as of the read.
    """

    def __init__(self, urls: Iterable[str] = ()):
        self._lock = threading.Lock()
        self._urls = deque(urls)

    def pop_front(self) -> Optional[str]:
        """Remove and return the next URL, or None when the queue is empty."""
        with self._lock:
            if not self._urls:
                return None
            return self._urls.popleft()

    def peek(self, n: int = 5) -> List[str]:
        with self._lock:
            return [self._urls[i] for i in range(min(n, len(self._urls)))]

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)
