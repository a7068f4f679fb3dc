"""Cooperative pause / resume / abort control for plan execution."""

import logging
import threading
from enum import Enum

from ..constants import DEFAULT_POLL_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class ExecutionStatus(Enum):
    """Status reported to the presentation layer during execution."""
    IDLE = "idle"
    WORKING = "working"
    WAITING = "waiting"
    ERROR = "error"
    PAUSED = "paused"
    COMPLETE = "complete"
    ABORTED = "aborted"


class ExecutionControl:
    """
    Thread-safe pause, resume and abort flags.

    The executor and host callbacks poll the control; another thread (a UI or
    a key listener) flips the flags. Execution suspends in place while paused
    and is never interrupted preemptively.
    """

    def __init__(self, poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS):
        """
        Initialize control.

        Args:
            poll_interval: Seconds between flag polls while paused or waiting
        """
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        self.poll_interval = poll_interval
        self._running = threading.Event()
        self._running.set()
        self._aborted = threading.Event()

    @property
    def is_paused(self) -> bool:
        return not self._running.is_set()

    @property
    def is_aborted(self) -> bool:
        return self._aborted.is_set()

    def pause(self) -> None:
        logger.info("Execution pause requested")
        self._running.clear()

    def resume(self) -> None:
        logger.info("Execution resumed")
        self._running.set()

    def abort(self) -> None:
        """Request abort; also releases a paused execution."""
        logger.info("Execution abort requested")
        self._aborted.set()
        self._running.set()

    def reset(self) -> None:
        """Clear pause and abort flags for a new run."""
        self._aborted.clear()
        self._running.set()

    def check_continue(self) -> bool:
        """
        Block while paused.

        Returns:
            False if execution was aborted, True otherwise
        """
        while not self._running.is_set() and not self._aborted.is_set():
            self._running.wait(self.poll_interval)
        return not self._aborted.is_set()

    def wait(self, seconds: float) -> bool:
        """
        Wait for a real-world duration while honouring pause and abort.

        Time spent paused does not count towards the wait.

        Args:
            seconds: Duration to wait

        Returns:
            False if execution was aborted during the wait, True otherwise
        """
        remaining = seconds
        while remaining > 0:
            if not self.check_continue():
                return False
            interval = min(self.poll_interval, remaining)
            if self._aborted.wait(interval):
                return False
            remaining -= interval
        return self.check_continue()
