"""Store-wide write lock with a bounded wait."""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from contract_tracker.core.config import DEFAULT_LOCK_TIMEOUT
from contract_tracker.core.errors import LockTimeoutError

logger = logging.getLogger(__name__)


class WriteLock:
    """Serializes every mutating store operation; reads never take it."""

    def __init__(self, timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
        self.timeout = timeout
        self._lock = threading.Lock()

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Acquire the lock for the duration of the block or raise ``LockTimeoutError``."""

        if not self._lock.acquire(timeout=self.timeout):
            logger.warning("Write lock not acquired within %.1fs", self.timeout)
            raise LockTimeoutError(
                f"Could not acquire the write lock within {self.timeout:g} seconds."
            )
        try:
            yield
        finally:
            self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()
