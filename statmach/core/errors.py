# statmach/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Dict, Optional


class HSMError(Exception):
    """
    Base exception class for errors within the hierarchical state machine library.

    :param message: Human readable description.
    :param details: Structured context (state, trigger, destination, ...).
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}


class ConfigurationError(HSMError):
    """
    Raised when a state configuration call is rejected. Registrations made
    before the failing call are kept.
    """


class InvalidDestinationError(ConfigurationError):
    """
    Raised when permit() names the owning state as destination; reentry must be
    declared with permit_reentry() instead.
    """


class DuplicateTriggerError(ConfigurationError):
    """
    Raised when a state already has a transition bound to the trigger.
    """


class MissingGuardError(ConfigurationError):
    """
    Raised when a conditional permit is registered without a guard.
    """


class MissingHandlerError(ConfigurationError):
    """
    Raised when an entry or exit handler is registered as None.
    """


class DuplicateEntryHandlerError(ConfigurationError):
    """
    Raised when an entry handler already exists for the (state, trigger) pair.
    """


class DuplicateExitHandlerError(ConfigurationError):
    """
    Raised when a state already has its exit handler.
    """


class InvalidHierarchyError(ConfigurationError):
    """
    Raised when a parent declaration would give a state two parents, make it
    its own parent, or close a cycle.
    """


class StateNotFoundError(HSMError):
    """
    Raised when a requested state does not exist in the machine.
    """


class TransitionError(HSMError):
    """
    Raised when an attempted state transition is invalid or cannot be completed.
    """


class NoMatchingTransitionError(TransitionError):
    """
    Raised when neither the current state nor any of its ancestors handles the
    fired trigger.
    """


class ValidationError(HSMError):
    """
    Raised when validation detects configuration constraint violations.
    """
