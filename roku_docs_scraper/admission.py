import logging
import threading
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class AdmissionController:
    """
    Caps how many browser sessions may be open at the same time.

    Every fetch worker holds one slot for as long as its session is open.
    The slot is released when the ``with`` block exits, whether the worker
    succeeded or raised.

    Example:
        ```python
        admission = AdmissionController(10)
        with admission.slot():
            session = factory()
            ...
        ```
    """

    def __init__(self, max_concurrent: int):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.max_concurrent = max_concurrent
        self._semaphore = threading.BoundedSemaphore(max_concurrent)
        self._lock = threading.Lock()
        self._in_use = 0
        self._peak = 0

    @contextmanager
    def slot(self):
        self._semaphore.acquire()
        with self._lock:
            self._in_use += 1
            self._peak = max(self._peak, self._in_use)
        try:
            yield
        finally:
            with self._lock:
                self._in_use -= 1
            self._semaphore.release()

    @property
    def in_use(self) -> int:
        with self._lock:
            return self._in_use

    @property
    def peak(self) -> int:
        """Highest number of slots held at once since creation."""
        with self._lock:
            return self._peak
