# statmach/runtime/concurrency.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, List, Optional

from statmach.core.state_machine import StateMachine
from statmach.interfaces.types import StateID, TriggerID


def get_lock() -> threading.RLock:
    """
    Provide a new re-entrant lock. Re-entrancy lets an entry handler fire a
    follow-up trigger on the same machine while the outer fire() holds it.
    """
    return threading.RLock()


@contextmanager
def with_lock(lock):
    """
    A convenience context manager that acquires the given lock upon entry and
    releases it upon exit, ensuring safe access to shared resources.
    """
    lock.acquire()
    try:
        yield
    finally:
        lock.release()


class SynchronizedMachine:
    """
    Proxy serializing every fire and query on a StateMachine behind one lock.
    Configuration should be finished before the proxy is shared between
    threads; configure() is forwarded under the lock as well.
    """

    def __init__(self, machine: StateMachine, lock: Optional[Any] = None) -> None:
        """
        :param machine: The machine to guard.
        :param lock: Lock to use; a fresh RLock when omitted.
        """
        self._machine = machine
        self._lock = lock if lock is not None else get_lock()

    @property
    def machine(self) -> StateMachine:
        return self._machine

    @property
    def lock(self):
        return self._lock

    def fire(self, trigger: TriggerID, *params: Any) -> bool:
        with with_lock(self._lock):
            return self._machine.fire(trigger, *params)

    def can_fire(self, trigger: TriggerID, *params: Any) -> bool:
        with with_lock(self._lock):
            return self._machine.can_fire(trigger, *params)

    def permitted_triggers(self, *params: Any) -> List[TriggerID]:
        with with_lock(self._lock):
            return self._machine.permitted_triggers(*params)

    def is_in_state(self, state: StateID) -> bool:
        with with_lock(self._lock):
            return self._machine.is_in_state(state)

    def configure(self, state: StateID):
        with with_lock(self._lock):
            return self._machine.configure(state)

    @property
    def current_state(self) -> StateID:
        with with_lock(self._lock):
            return self._machine.current_state
