"""Background FIFO worker for disposals issued off the caller's stack."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any

from custodian.constants import DISPATCHER_IDLE_TIMEOUT_SECONDS, DISPATCHER_THREAD_NAME
from custodian.core.classify import dispose_resource
from custodian.core.config import load_settings

logger = logging.getLogger(__name__)


class DeferredDispatcher:
    """Runs disposals one at a time on a single, lazily started worker thread.

    Requests are processed strictly in the order they were enqueued. The
    worker exits after ``idle_timeout`` seconds without work and is started
    again by the next ``enqueue``. A disposer running on the worker may itself
    enqueue more work; the request is queued behind the current one.

    Parameters
    ----------
    idle_timeout : float
        Seconds the worker waits on an empty queue before exiting
    thread_name : str
        Name given to the worker thread
    """

    def __init__(
        self,
        idle_timeout: float = DISPATCHER_IDLE_TIMEOUT_SECONDS,
        thread_name: str = DISPATCHER_THREAD_NAME,
    ) -> None:
        if idle_timeout <= 0:
            raise ValueError(f"idle_timeout must be positive, got {idle_timeout}")

        self.idle_timeout = idle_timeout
        self.thread_name = thread_name
        self._queue: queue.Queue[tuple[Any, tuple[Any, ...]]] = queue.Queue()
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._pending = 0
        self._worker: threading.Thread | None = None

    @property
    def pending(self) -> int:
        """Number of requests enqueued but not yet completed."""
        with self._lock:
            return self._pending

    @property
    def is_running(self) -> bool:
        """Whether a worker thread is currently alive."""
        with self._lock:
            return self._worker is not None and self._worker.is_alive()

    def enqueue(self, resource: Any, *args: Any) -> None:
        """Queue a resource for disposal on the worker thread.

        Parameters
        ----------
        resource : Any
            Resource to dispose
        *args : Any
            Extra arguments forwarded to the disposer
        """
        with self._lock:
            self._queue.put((resource, args))
            self._pending += 1

            if self._worker is None or not self._worker.is_alive():
                if self._worker is not None:
                    logger.warning("Dispatcher worker died, starting a new one")
                self._worker = threading.Thread(
                    target=self._run, name=self.thread_name, daemon=True
                )
                self._worker.start()
                logger.debug("Started dispatcher worker %s", self._worker.name)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every enqueued request has completed.

        Parameters
        ----------
        timeout : float | None
            Maximum seconds to wait, or None to wait indefinitely

        Returns
        -------
        bool
            True if the queue drained, False on timeout

        Raises
        ------
        RuntimeError
            If called from the worker thread, which would wait on itself
        """
        if threading.current_thread() is self._worker:
            raise RuntimeError("wait_idle() cannot be called from the dispatcher worker")

        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def _run(self) -> None:
        while True:
            try:
                resource, args = self._queue.get(timeout=self.idle_timeout)
            except queue.Empty:
                with self._lock:
                    if self._queue.empty():
                        if self._worker is threading.current_thread():
                            self._worker = None
                        logger.debug("Dispatcher worker idle, exiting")
                        return
                continue

            try:
                dispose_resource(resource, *args)
            finally:
                with self._idle:
                    self._pending -= 1
                    if self._pending == 0:
                        self._idle.notify_all()


class DispatcherManager:
    """Thread-safe holder for the process-wide dispatcher.

    The dispatcher is created on first use from the loaded settings.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._dispatcher: DeferredDispatcher | None = None

    def get(self) -> DeferredDispatcher:
        """Get the process-wide dispatcher, creating it if needed.

        Returns
        -------
        DeferredDispatcher
            Shared dispatcher instance
        """
        with self._lock:
            if self._dispatcher is None:
                settings = load_settings().dispatcher
                self._dispatcher = DeferredDispatcher(
                    idle_timeout=settings.idle_timeout,
                    thread_name=settings.thread_name,
                )
            return self._dispatcher

    def set(self, dispatcher: DeferredDispatcher | None) -> None:
        """Replace the process-wide dispatcher.

        Parameters
        ----------
        dispatcher : DeferredDispatcher | None
            New dispatcher, or None to build a fresh one on next use
        """
        with self._lock:
            self._dispatcher = dispatcher


_dispatcher_manager = DispatcherManager()


def get_dispatcher() -> DeferredDispatcher:
    """Get the process-wide dispatcher.

    Returns
    -------
    DeferredDispatcher
        Shared dispatcher instance
    """
    return _dispatcher_manager.get()


def set_dispatcher(dispatcher: DeferredDispatcher | None) -> None:
    """Replace or reset the process-wide dispatcher.

    Parameters
    ----------
    dispatcher : DeferredDispatcher | None
        New dispatcher, or None to build a fresh one on next use
    """
    _dispatcher_manager.set(dispatcher)


def defer_dispose(resource: Any, *args: Any) -> None:
    """Dispose of a resource on the process-wide dispatcher.

    Parameters
    ----------
    resource : Any
        Resource to dispose
    *args : Any
        Extra arguments forwarded to the disposer
    """
    get_dispatcher().enqueue(resource, *args)
