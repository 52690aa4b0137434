"""
Pause Token - Operator control over a running pool

Every worker holds the same token and checks it once per loop iteration.
While it is set, workers sleep in PAUSE_POLL_SECONDS steps without touching
the queue or the network.

The CLI wires the token to SIGUSR1 so an operator can toggle it:

    kill -USR1 <pid>
"""

import logging
import signal
import threading

logger = logging.getLogger(__name__)

PAUSE_POLL_SECONDS = 1.0


class PauseToken:
    """Thread-safe pause/resume switch."""

    def __init__(self, paused: bool = False):
        self._event = threading.Event()
        if paused:
            self._event.set()

    @property
    def is_paused(self) -> bool:
        return self._event.is_set()

    def pause(self) -> None:
        self._event.set()
        logger.info("Workers paused")

    def resume(self) -> None:
        self._event.clear()
        logger.info("Workers resumed")

    def toggle(self) -> bool:
        """Flip the state and return True if now paused."""
        if self.is_paused:
            self.resume()
        else:
            self.pause()
        return self.is_paused


def install_pause_signal(token: PauseToken) -> bool:
    """
    Toggle the token on SIGUSR1.

    Returns False where the platform has no SIGUSR1 (Windows) or when called
    outside the main thread.
    """
    if not hasattr(signal, "SIGUSR1"):
        logger.warning("SIGUSR1 not available on this platform, pause control disabled")
        return False

    def _handler(signum, frame):
        token.toggle()

    try:
        signal.signal(signal.SIGUSR1, _handler)
    except ValueError as e:
        logger.warning(f"Could not install pause signal handler: {e}")
        return False

    logger.info("Pause control installed: send SIGUSR1 to pause/resume")
    return True
