# statmach/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, List, Optional

from statmach.interfaces.types import StateID, TriggerID


class HookManager:
    """
    Manages the registration and execution of hooks that listen to state machine
    lifecycle events (on_enter, on_exit, on_declined, on_error). Users can attach
    logging, monitoring, or custom side effects without altering core logic.
    """

    def __init__(self, hooks: Optional[List[Any]] = None) -> None:
        """
        Initialize with an optional list of hook objects.
        """
        self._hooks: List[Any] = list(hooks or [])

    @property
    def hooks(self) -> List[Any]:
        return list(self._hooks)

    def register_hook(self, hook: Any) -> None:
        """
        Add a new hook to the manager's list of hooks.

        :param hook: An object implementing some of the HookProtocol methods.
        """
        self._hooks.append(hook)

    def execute_on_enter(self, state: StateID, trigger: TriggerID) -> None:
        """
        Run all hooks' on_enter logic when entering a state.
        """
        for hook in self._hooks:
            if hasattr(hook, "on_enter"):
                hook.on_enter(state, trigger)

    def execute_on_exit(self, state: StateID, trigger: TriggerID, destination: StateID) -> None:
        """
        Run all hooks' on_exit logic when exiting a state.
        """
        for hook in self._hooks:
            if hasattr(hook, "on_exit"):
                hook.on_exit(state, trigger, destination)

    def execute_on_declined(self, state: StateID, trigger: TriggerID) -> None:
        for hook in self._hooks:
            if hasattr(hook, "on_declined"):
                hook.on_declined(state, trigger)

    def execute_on_error(self, error: Exception) -> None:
        """
        Run all hooks' on_error logic when an exception occurs.
        """
        for hook in self._hooks:
            if hasattr(hook, "on_error"):
                hook.on_error(error)


class LoggingHook:
    """
    Hook that writes every exit, entry and declined transition to a logger.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self._logger = logger or logging.getLogger("statmach.transitions")
        self._level = level

    def on_exit(self, state: StateID, trigger: TriggerID, destination: StateID) -> None:
        self._logger.log(self._level, "Exiting %r via %r towards %r", state, trigger, destination)

    def on_enter(self, state: StateID, trigger: TriggerID) -> None:
        self._logger.log(self._level, "Entered %r via %r", state, trigger)

    def on_declined(self, state: StateID, trigger: TriggerID) -> None:
        self._logger.log(self._level, "Guard declined %r in %r", trigger, state)

    def on_error(self, error: Exception) -> None:
        self._logger.error("Transition failed: %s", error)
