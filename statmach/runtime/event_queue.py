# statmach/runtime/event_queue.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import heapq
import threading
from collections import deque
from typing import Any, NamedTuple, Optional, Tuple

from statmach.interfaces.types import Priority, TriggerID


class FireRequest(NamedTuple):
    """A deferred call to StateMachine.fire()."""

    trigger: TriggerID
    params: Tuple[Any, ...] = ()
    priority: Priority = 0


class _PriorityQueueWrapper:
    """
    Internal wrapper providing priority-based insertion and retrieval of
    requests. Lower priority values come out first; a counter keeps requests
    of equal priority in insertion order.
    """

    def __init__(self) -> None:
        self._counter = 0
        self._heap = []

    def push(self, request: FireRequest) -> None:
        heapq.heappush(self._heap, (request.priority, self._counter, request))
        self._counter += 1

    def pop(self) -> Optional[FireRequest]:
        if not self._heap:
            return None
        _, _, request = heapq.heappop(self._heap)
        return request

    def clear(self) -> None:
        self._heap.clear()
        self._counter = 0

    def __len__(self) -> int:
        return len(self._heap)


class EventQueue:
    """
    A thread-safe queue of fire requests consumed by the Executor.
    Can operate in either FIFO or priority mode.
    """

    def __init__(self, priority: bool = False) -> None:
        """
        Create a queue. If priority is True, use a priority-based structure.

        :param priority: Enable priority-based queueing.
        """
        self._priority_mode = priority
        self._lock = threading.Lock()

        if self._priority_mode:
            self._queue = _PriorityQueueWrapper()
        else:
            self._queue = deque()

    def enqueue(self, request: FireRequest) -> None:
        """
        Add a request to the queue.

        :param request: The request to enqueue.
        """
        with self._lock:
            if self._priority_mode:
                self._queue.push(request)
            else:
                self._queue.append(request)

    def dequeue(self) -> Optional[FireRequest]:
        """
        Remove and return the next request from the queue, or None if empty.
        """
        with self._lock:
            if self._priority_mode:
                return self._queue.pop()
            if self._queue:
                return self._queue.popleft()
            return None

    def clear(self) -> None:
        """
        Remove all requests from the queue.
        """
        with self._lock:
            self._queue.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def priority_mode(self) -> bool:
        """
        Indicates whether this queue operates in priority mode.
        """
        return self._priority_mode
