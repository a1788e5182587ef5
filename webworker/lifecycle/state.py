"""Server lifecycle: stop signalling and in-flight worker tracking."""

import threading
import time

from webworker.domain.correlation_id import component_logger

LIFECYCLE_LOGGER = component_logger("lifecycle")


class ServerLifecycle:
    """Tracks worker threads so shutdown can wait for open exchanges."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._workers: set[threading.Thread] = set()

    def should_stop(self) -> bool:
        """Check if the accept loop should stop taking connections."""
        return self._stop_event.is_set()

    def request_stop(self) -> None:
        """Ask the accept loop to stop; in-flight exchanges keep running."""
        self._stop_event.set()
        LIFECYCLE_LOGGER.info("Stop requested", extra={"event": "stop_requested"})

    def register_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.add(thread)

    def cleanup_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.discard(thread)

    def active_worker_count(self) -> int:
        """Return the number of currently tracked worker threads."""
        with self._lock:
            return len(self._workers)

    def wait_for_workers(self, timeout: float) -> bool:
        """Join tracked workers until none remain or ``timeout`` elapses."""
        deadline = time.monotonic() + timeout
        while True:
            with self._lock:
                self._workers = {w for w in self._workers if w.is_alive()}
                active_workers = list(self._workers)
            if not active_workers:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                LIFECYCLE_LOGGER.warning(
                    "Shutdown timeout exceeded",
                    extra={
                        "event": "shutdown_timeout",
                        "active_workers": len(active_workers),
                    },
                )
                return False
            for worker in active_workers:
                worker.join(timeout=min(0.1, remaining))
                if time.monotonic() >= deadline:
                    break
