"""
Single in-flight request guard with cancellation.

One generation request may run per draft at a time; a second one is turned
away rather than queued. A running call can be cancelled, which hands control
back to the caller at once. The worker thread is left to finish on its own
and its result is thrown away.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

from .errors import GenerationCancelled, RequestInFlightError

logger = logging.getLogger(__name__)


class InFlightCall:
    """One outstanding collaborator call."""

    def __init__(self, key: str):
        self.key = key
        self._wake = threading.Event()
        self._cancelled = threading.Event()
        self._result: Any = None
        self._error: Optional[BaseException] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()
        self._wake.set()

    def run(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Run ``fn`` on a worker thread and wait for it or for cancellation.

        Raises:
            GenerationCancelled: cancel() was called before the result arrived
        """
        if self.cancelled:
            raise GenerationCancelled(self.key)

        def target():
            try:
                self._result = fn(*args, **kwargs)
            except Exception as e:
                self._error = e
            finally:
                self._wake.set()

        worker = threading.Thread(target=target, name=f"inflight-{self.key}", daemon=True)
        worker.start()
        self._wake.wait()

        if self.cancelled:
            logger.info("Call for draft %s cancelled; discarding its result", self.key)
            raise GenerationCancelled(self.key)
        if self._error is not None:
            raise self._error
        return self._result


class InFlightRegistry:
    """Tracks the in-flight call for each draft key."""

    def __init__(self):
        self._lock = threading.Lock()
        self._calls: Dict[str, InFlightCall] = {}

    @contextmanager
    def track(self, key: str) -> Iterator[InFlightCall]:
        """Reserve ``key`` for the duration of the block."""
        with self._lock:
            if key in self._calls:
                raise RequestInFlightError(key)
            call = InFlightCall(key)
            self._calls[key] = call
        try:
            yield call
        finally:
            with self._lock:
                if self._calls.get(key) is call:
                    del self._calls[key]

    def is_active(self, key: str) -> bool:
        with self._lock:
            return key in self._calls

    def cancel(self, key: str) -> bool:
        """Cancel the call for ``key``. Returns False if nothing was running."""
        with self._lock:
            call = self._calls.get(key)
        if call is None:
            return False
        call.cancel()
        return True
