# statmach/runtime/executor.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional

from statmach.core.state_machine import StateMachine
from statmach.interfaces.types import Priority, TriggerID
from statmach.runtime.event_queue import EventQueue, FireRequest

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[FireRequest, Exception], None]


class Executor:
    """
    Owns a state machine on a single worker thread and feeds it fire requests
    taken from a queue, so producers on any thread never touch the machine
    directly. Handlers that need a follow-up transition should submit() it
    rather than calling fire() on the machine.
    """

    def __init__(
        self,
        machine: StateMachine,
        queue: Optional[EventQueue] = None,
        error_handler: Optional[ErrorHandler] = None,
        poll_interval: float = 0.01,
    ) -> None:
        """
        :param machine: StateMachine instance to drive.
        :param queue: EventQueue providing requests; a FIFO queue by default.
        :param error_handler: Called with (request, error) when fire() raises.
        :param poll_interval: Sleep between polls of an empty queue, in seconds.
        """
        self.machine = machine
        self.queue = queue if queue is not None else EventQueue()
        self._error_handler = error_handler
        self._poll_interval = poll_interval
        self._running = False
        self._busy = False
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def submit(self, trigger: TriggerID, *params: Any, priority: Priority = 0) -> FireRequest:
        """
        Queue fire(trigger, *params) for the worker.

        :param priority: Ordering key, only used by priority queues.
        """
        request = FireRequest(trigger, params, priority)
        self.queue.enqueue(request)
        return request

    def start(self) -> None:
        """
        Spawn the worker thread. Calling start() on a running executor does
        nothing.

        :raises RuntimeError: a worker from an earlier stop() that timed out
            is still processing a request.
        """
        with self._lock:
            if self._running:
                return
            if self._thread is not None and self._thread.is_alive():
                raise RuntimeError("Previous executor worker is still running; call stop() again")
            self._running = True
        self._thread = threading.Thread(target=self._run, name="statmach-executor", daemon=True)
        self._thread.start()
        logger.debug("Executor started")

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Signal the worker to stop after the request in progress and wait for it.
        Requests still queued stay in the queue.
        """
        with self._lock:
            self._running = False
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Executor worker did not stop within %s seconds", timeout)
                return
            self._thread = None
        logger.debug("Executor stopped")

    def run_pending(self) -> int:
        """
        Drain the queue in the calling thread, including requests submitted
        while draining.

        :return: Number of requests processed.
        """
        processed = 0
        while True:
            request = self.queue.dequeue()
            if request is None:
                return processed
            self._process(request)
            processed += 1

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the queue is empty and no request is being processed.

        :return: False if timeout elapsed first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._lock:
                idle = not self._busy and len(self.queue) == 0
            if idle:
                return True
            if deadline is not None and time.monotonic() >= deadline:
                return False
            time.sleep(self._poll_interval)

    def _run(self) -> None:
        while True:
            with self._lock:
                if not self._running:
                    break
                request = self.queue.dequeue()
                self._busy = request is not None

            if request is None:
                # No request available, sleep briefly to avoid spinning.
                time.sleep(self._poll_interval)
                continue

            try:
                self._process(request)
            finally:
                with self._lock:
                    self._busy = False

    def _process(self, request: FireRequest) -> None:
        try:
            taken = self.machine.fire(request.trigger, *request.params)
            logger.debug("Processed %r (taken=%s)", request.trigger, taken)
        except Exception as error:
            logger.exception("Fire request %r failed", request.trigger)
            if self._error_handler is not None:
                self._error_handler(request, error)
