# statmach/runtime/timers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Dict

from statmach.interfaces.types import TriggerID
from statmach.runtime.executor import Executor

logger = logging.getLogger(__name__)


class TimeoutScheduler:
    """
    Submits fire requests to an Executor after a delay, e.g. to retry an
    operation or leave a state once a timeout expires. The state machine
    itself never schedules anything; handlers use this instead.
    """

    def __init__(self, executor: Executor) -> None:
        """
        :param executor: Executor that receives the requests on expiry.
        """
        self._executor = executor
        self._timers: Dict[int, threading.Timer] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def schedule(self, delay: float, trigger: TriggerID, *params: Any) -> int:
        """
        Submit trigger with params after delay seconds.

        :return: Handle accepted by cancel().
        """
        handle = next(self._ids)
        timer = threading.Timer(delay, self._expire, args=(handle, trigger, params))
        timer.daemon = True
        with self._lock:
            self._timers[handle] = timer
        timer.start()
        logger.debug("Scheduled %r in %.3fs (handle=%d)", trigger, delay, handle)
        return handle

    def cancel(self, handle: int) -> bool:
        """
        Cancel a pending timeout.

        :return: False if the handle already fired or is unknown.
        """
        with self._lock:
            timer = self._timers.pop(handle, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    @property
    def pending(self) -> int:
        """Number of timeouts that have not fired or been cancelled."""
        with self._lock:
            return len(self._timers)

    def _expire(self, handle: int, trigger: TriggerID, params: tuple) -> None:
        with self._lock:
            if self._timers.pop(handle, None) is None:
                return
        self._executor.submit(trigger, *params)
