"""
Alert status store.

Holds the CPU hysteresis state for one monitor behind a lock. A write
that fails part way leaves the store poisoned: the state can no longer be
trusted, so every later access raises.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from .models import AlertStatus


logger = logging.getLogger(__name__)


class StatusError(Exception):
    """Base class for status store failures. Always fatal."""


class StatusUninitializedError(StatusError):
    """The status store was accessed before it was set up."""

    def __init__(self, message: str = "status store was never initialized"):
        super().__init__(message)


class StatusPoisonedError(StatusError):
    """A previous update failed mid-write and left the state unreliable."""

    def __init__(self, message: str = "status store poisoned by a failed update"):
        super().__init__(message)


class StatusCell:
    """Mutable holder handed out by StatusStore.update()."""

    __slots__ = ("value",)

    def __init__(self, value: AlertStatus):
        self.value = value


class StatusStore:
    """
    Lock-protected AlertStatus holder.

    Starts CLEAN. Reads and updates are serialized; an update is a
    read-modify-write performed while the lock is held. A plain mutex
    stands in for a reader/writer lock, so readers also exclude each
    other.
    """

    def __init__(self, initial: AlertStatus = AlertStatus.CLEAN):
        self._lock = threading.Lock()
        self._status = initial
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def read(self) -> AlertStatus:
        """Return the current status."""
        with self._lock:
            self._check()
            return self._status

    @contextmanager
    def update(self) -> Iterator[StatusCell]:
        """
        Hold the lock for a read-decide-write cycle.

        The yielded cell carries the current status; whatever it holds
        when the block exits normally becomes the new status. If the block
        raises, the store is poisoned and the error propagates.
        """
        with self._lock:
            self._check()
            cell = StatusCell(self._status)
            try:
                yield cell
            except BaseException:
                self._poisoned = True
                logger.error("Status update failed, store is now poisoned")
                raise
            self._status = cell.value

    def reset_poison(self, status: AlertStatus = AlertStatus.CLEAN):
        """Clear the poisoned flag and force a status. Not used by the driver."""
        with self._lock:
            self._poisoned = False
            self._status = status

    def _check(self):
        if self._poisoned:
            raise StatusPoisonedError()
