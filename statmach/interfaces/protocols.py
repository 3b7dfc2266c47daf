# statmach/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Protocol, runtime_checkable

from statmach.interfaces.types import StateID, TriggerID


@runtime_checkable
class HookProtocol(Protocol):
    """
    Hook protocol for type checking.

    Methods:
        on_exit(): Called after a state's exit handler ran.
        on_enter(): Called once the current state moved to the destination,
            before the destination's entry handler runs.
        on_declined(): Called when a guard declined the transition.
        on_error(): Called when a guard or handler raised inside fire().

    Hooks are not required to implement every method; the HookManager skips
    whatever is missing. The protocol documents the full surface.

    Error Handling:
    - Exceptions raised by a hook propagate out of fire() like handler errors.
    """

    def on_exit(self, state: StateID, trigger: TriggerID, destination: StateID) -> None:
        """Observe a state being left."""
        ...

    def on_enter(self, state: StateID, trigger: TriggerID) -> None:
        """Observe a state being entered."""
        ...

    def on_declined(self, state: StateID, trigger: TriggerID) -> None:
        """Observe a transition refused by its guard."""
        ...

    def on_error(self, error: Exception) -> None:
        """Observe a failure raised by user code during a transition."""
        ...
