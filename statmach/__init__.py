# statmach/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""statmach: a small hierarchical finite state machine (HFSM) engine

States are configured declaratively (transitions keyed by trigger, optional
guards, per-trigger entry handlers, one exit handler, at most one parent) and
the machine is driven by firing triggers one at a time. Triggers a state does
not handle are resolved on its ancestors.

Responsibilities:
    - State registry with on-demand configuration
    - Transition registration and validation
    - Hierarchical trigger resolution and synchronous dispatch

Cross-cutting Concerns:
    Thread Safety:
        - StateMachine itself is single-threaded
        - statmach.runtime offers a lock proxy and a single-owner executor

    Error Handling:
        - Every rejected call raises a subclass of HSMError
        - Configuration is additive and never rolled back

    Logging:
        - Module loggers under the "statmach" namespace, no handlers installed
"""

from statmach.core.errors import (
    ConfigurationError,
    DuplicateEntryHandlerError,
    DuplicateExitHandlerError,
    DuplicateTriggerError,
    HSMError,
    InvalidDestinationError,
    InvalidHierarchyError,
    MissingGuardError,
    MissingHandlerError,
    NoMatchingTransitionError,
    StateNotFoundError,
    TransitionError,
    ValidationError,
)
from statmach.core.hooks import HookManager, LoggingHook
from statmach.core.state_machine import StateMachine
from statmach.core.states import StateConfiguration
from statmach.core.transitions import Transition

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DuplicateEntryHandlerError",
    "DuplicateExitHandlerError",
    "DuplicateTriggerError",
    "HSMError",
    "HookManager",
    "InvalidDestinationError",
    "InvalidHierarchyError",
    "LoggingHook",
    "MissingGuardError",
    "MissingHandlerError",
    "NoMatchingTransitionError",
    "StateConfiguration",
    "StateMachine",
    "StateNotFoundError",
    "Transition",
    "TransitionError",
    "ValidationError",
]
