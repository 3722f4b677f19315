"""Duplicate-submission protection for forms."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from product_inventory.errors import SubmissionInProgressError


@dataclass
class SubmitGuard:
    """Rejects a submission while the previous one is still in flight."""

    name: str
    _in_flight: bool = field(default=False, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @contextmanager
    def submitting(self) -> Iterator[None]:
        """Hold the guard for the duration of one request."""
        with self._lock:
            if self._in_flight:
                raise SubmissionInProgressError
            self._in_flight = True
        try:
            yield
        finally:
            with self._lock:
                self._in_flight = False
