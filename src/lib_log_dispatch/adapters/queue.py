"""Thread-based bounded queue feeding the single dispatcher.

Purpose
-------
Decouple producers from IO-bound writers: producers enqueue pooled
:class:`WriterMessage` carriers and one background thread performs the
writes.

Contents
--------
* :class:`DispatchQueue` - background dispatcher implementation of :class:`QueuePort`.

System Role
-----------
Owned by the writer manager, which supplies the ``worker`` (override routing
plus fan-out) and the ``keep_running`` predicate (its asynchronous flag).

Alignment Notes
---------------
Start-on-demand, drain-before-exit semantics: once ``keep_running`` turns
false the dispatcher keeps consuming until the queue is empty, then exits.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from typing import Any

from lib_log_dispatch.application.ports.queue import QueuePort
from lib_log_dispatch.domain.message import WriterMessage
from lib_log_dispatch.domain.policy import QueueFullPolicy


LOGGER = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 10_000


class DispatchQueue(QueuePort):
    """Process queued messages on a background thread.

    Examples
    --------
    >>> from lib_log_dispatch.domain.levels import Severity
    >>> processed = []
    >>> dispatch = DispatchQueue(worker=lambda message: processed.append(message.text))
    >>> dispatch.start()
    True
    >>> dispatch.put(WriterMessage(Severity.INFO, 'hello'))
    True
    >>> dispatch.stop(drain=True)
    >>> processed
    ['hello']
    """

    def __init__(
        self,
        *,
        worker: Callable[[WriterMessage], None] | None = None,
        keep_running: Callable[[], bool] | None = None,
        maxsize: int = DEFAULT_QUEUE_SIZE,
        policy: QueueFullPolicy | str = QueueFullPolicy.BLOCK,
        timeout: float | None = None,
        on_drop: Callable[[WriterMessage], None] | None = None,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
        stop_timeout: float | None = 5.0,
    ) -> None:
        """Create the queue with an optional worker and capacity.

        Parameters
        ----------
        worker:
            Callable invoked for each dequeued message.
        keep_running:
            Predicate consulted before each dequeue. When it returns ``False``
            and the queue is empty the dispatcher exits. Defaults to always
            ``True`` so only :meth:`stop` ends the thread.
        maxsize:
            Capacity of the bounded queue.
        policy:
            Behaviour when the queue is full, see :class:`QueueFullPolicy`.
        timeout:
            Optional wait limit (seconds) for the ``BLOCK`` policy. ``None``,
            the default, blocks until space is available; a number turns a
            timed-out put into a drop.
        on_drop:
            Callback receiving every message the queue discards.
        stop_timeout:
            Default drain deadline for :meth:`stop`.
        """
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self._worker = worker
        self._keep_running = keep_running or (lambda: True)
        self._queue: queue.Queue[WriterMessage | None] = queue.Queue(maxsize=maxsize)
        self._policy = QueueFullPolicy.from_name(policy)
        self._timeout = timeout
        self._on_drop = on_drop
        self._diagnostic = diagnostic
        self._stop_timeout = stop_timeout
        self._thread: threading.Thread | None = None
        self._state_lock = threading.Lock()
        self._stop_requested = False

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

    @property
    def policy(self) -> QueueFullPolicy:
        return self._policy

    @property
    def pending(self) -> int:
        """Return the approximate number of queued items."""

        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        """Return ``True`` while a dispatcher thread owns the consume side."""

        with self._state_lock:
            return self._thread is not None

    def set_worker(self, worker: Callable[[WriterMessage], None]) -> None:
        """Swap the worker callable used to process messages."""
        self._worker = worker

    def start(self) -> bool:
        """Start the dispatcher thread unless one is already running.

        Returns ``True`` when a new thread was started.
        """
        with self._state_lock:
            if self._thread is not None:
                return False
            self._stop_requested = False
            thread = threading.Thread(target=self._run, name="lib_log_dispatch-dispatcher", daemon=True)
            self._thread = thread
        thread.start()
        return True

    def stop(self, *, drain: bool = True, timeout: float | None = None) -> None:
        """Stop the dispatcher thread.

        Parameters
        ----------
        drain:
            When ``True`` queued messages are written before the thread exits.
            When ``False`` pending messages are handed to ``on_drop``.
        timeout:
            Per-call override of the drain deadline; ``None`` falls back to
            the ``stop_timeout`` given at construction.
        """
        with self._state_lock:
            thread = self._thread
            self._stop_requested = True
        if not drain:
            self.drain_pending(self._handle_drop)
        if thread is None:
            return
        self.wake()
        effective_timeout = timeout if timeout is not None else self._stop_timeout
        thread.join(effective_timeout)
        if thread.is_alive():
            self._emit_diagnostic("queue_shutdown_timeout", {"timeout": effective_timeout, "pending": self.pending})
            raise RuntimeError("Dispatcher thread failed to stop within the allotted timeout")

    def put(self, message: WriterMessage) -> bool:
        """Enqueue ``message`` for the dispatcher.

        Returns ``True`` when the message was accepted, ``False`` when the
        full-queue policy discarded it.
        """
        if self._policy is QueueFullPolicy.DROP_NEWEST:
            try:
                self._queue.put(message, block=False)
            except queue.Full:
                self._handle_drop(message)
                return False
            return True

        if self._policy is QueueFullPolicy.DROP_OLDEST:
            while True:
                try:
                    self._queue.put(message, block=False)
                    return True
                except queue.Full:
                    self._evict_oldest()

        if self._timeout is not None:
            try:
                self._queue.put(message, timeout=self._timeout)
            except queue.Full:
                self._handle_drop(message)
                return False
            return True

        self._queue.put(message)
        return True

    def wake(self) -> None:
        """Enqueue a wake-up marker so an idle dispatcher re-checks ``keep_running``.

        A full queue needs no marker: the dispatcher is busy and re-checks
        before every dequeue.
        """
        if not self.is_running:
            return
        try:
            self._queue.put(None, block=False)
        except queue.Full:
            pass

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until all queued items are processed or ``timeout`` elapses."""

        done = self._queue.all_tasks_done
        with done:
            return done.wait_for(lambda: self._queue.unfinished_tasks == 0, timeout)

    def drain_pending(self, handler: Callable[[WriterMessage], None]) -> int:
        """Remove every queued message on the calling thread, passing each to ``handler``.

        Returns the number of messages handled.
        """
        handled = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return handled
            try:
                if item is not None:
                    handled += 1
                    handler(item)
            finally:
                self._queue.task_done()

    def _run(self) -> None:
        """Dispatcher loop: consume until told to stop and the queue is empty."""
        while True:
            with self._state_lock:
                running = self._keep_running() and not self._stop_requested
                if not running and self._queue.empty():
                    self._thread = None
                    return
            item = self._queue.get()
            try:
                if item is None:
                    continue
                self._process(item)
            finally:
                self._queue.task_done()

    def _process(self, message: WriterMessage) -> None:
        worker = self._worker
        if worker is None:
            self._handle_drop(message)
            return
        try:
            worker(message)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Dispatcher worker raised an exception; continuing", exc_info=exc)
            self._emit_diagnostic("dispatcher_worker_error", {"level": message.level.tag, "exception": repr(exc)})

    def _evict_oldest(self) -> None:
        try:
            dropped = self._queue.get_nowait()
        except queue.Empty:
            return
        try:
            if dropped is not None:
                self._handle_drop(dropped)
        finally:
            self._queue.task_done()

    def _handle_drop(self, message: WriterMessage) -> None:
        """Report a discarded message and hand it to the drop callback."""
        self._emit_diagnostic("queue_dropped", {"level": message.level.tag, "policy": self._policy.value})
        if self._on_drop is None:
            return
        try:
            self._on_drop(message)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Queue drop handler raised an exception; continuing", exc_info=exc)

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        """Invoke the diagnostic hook while guarding against callback failures."""

        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Queue diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)


__all__ = ["DEFAULT_QUEUE_SIZE", "DispatchQueue"]
