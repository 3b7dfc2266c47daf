# statmach/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterator, Mapping, Optional

from statmach.core.errors import (
    DuplicateEntryHandlerError,
    DuplicateExitHandlerError,
    DuplicateTriggerError,
    InvalidDestinationError,
    InvalidHierarchyError,
    MissingGuardError,
    MissingHandlerError,
)
from statmach.core.transitions import Transition
from statmach.interfaces.types import EntryHandler, ExitHandler, Guard, StateID, TriggerID

if TYPE_CHECKING:
    from statmach.core.state_machine import StateMachine

logger = logging.getLogger(__name__)


class StateConfiguration:
    """
    Describes one state of a machine: its outgoing transitions keyed by
    trigger, its optional parent, its entry handlers keyed by the trigger that
    caused entry, and its single exit handler.

    Configurations are created by StateMachine.configure() and live as long as
    the machine. Every registration method returns the configuration so calls
    can be chained; a rejected registration raises a ConfigurationError and
    leaves earlier registrations untouched.
    """

    def __init__(self, name: StateID, machine: "StateMachine") -> None:
        """
        :param name: Identifier of the state, unique within the machine.
        :param machine: Owning machine, used to resolve referenced states.
        """
        self._name = name
        self._machine = machine
        self._transitions: Dict[TriggerID, Transition] = {}
        self._parent: Optional[StateConfiguration] = None
        self._substates: Dict[StateID, StateConfiguration] = {}
        self._entry_handlers: Dict[TriggerID, EntryHandler] = {}
        self._exit_handler: Optional[ExitHandler] = None

    def __repr__(self) -> str:
        return "StateConfiguration({!r})".format(self._name)

    @property
    def name(self) -> StateID:
        """The state identifier."""
        return self._name

    @property
    def parent(self) -> Optional["StateConfiguration"]:
        """The superstate, or None for a root state."""
        return self._parent

    @property
    def substates(self) -> Mapping[StateID, "StateConfiguration"]:
        """Read-only view of the states declared as direct substates."""
        return MappingProxyType(self._substates)

    @property
    def transitions(self) -> Mapping[TriggerID, Transition]:
        """Read-only view of the locally registered transitions."""
        return MappingProxyType(self._transitions)

    @property
    def exit_handler(self) -> Optional[ExitHandler]:
        return self._exit_handler

    def entry_handler_for(self, trigger: TriggerID) -> Optional[EntryHandler]:
        """Return the entry handler registered for trigger, if any."""
        return self._entry_handlers.get(trigger)

    def ancestors(self) -> Iterator["StateConfiguration"]:
        """Yield the parent, the grandparent and so on up to the root."""
        current = self._parent
        while current is not None:
            yield current
            current = current._parent

    def is_substate_of(self, state: StateID) -> bool:
        """
        Check whether state is a direct or transitive superstate of this one.
        """
        return any(ancestor.name == state for ancestor in self.ancestors())

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def permit(self, trigger: TriggerID, destination: StateID) -> "StateConfiguration":
        """
        Allow trigger to move the machine from this state to destination.
        The destination is configured on the fly if it is not known yet.

        :raises InvalidDestinationError: destination is this state.
        :raises DuplicateTriggerError: trigger is already bound here.
        """
        self._add_transition(trigger, destination, None)
        return self

    def permit_if(self, trigger: TriggerID, destination: StateID, guard: Guard) -> "StateConfiguration":
        """
        Like permit(), but the transition is only taken when guard(*params)
        returns True at fire time.

        :raises MissingGuardError: guard is None.
        """
        if guard is None:
            raise MissingGuardError(
                "A guard is required for a conditional transition",
                {"state": self._name, "trigger": trigger},
            )
        self._add_transition(trigger, destination, guard)
        return self

    def permit_reentry(self, trigger: TriggerID) -> "StateConfiguration":
        """
        Allow trigger to leave and re-enter this state, running the exit
        handler and then the entry handler for trigger.

        :raises DuplicateTriggerError: trigger is already bound here.
        """
        self._add_reentry(trigger, None)
        return self

    def permit_reentry_if(self, trigger: TriggerID, guard: Guard) -> "StateConfiguration":
        """
        Conditional form of permit_reentry().

        :raises MissingGuardError: guard is None.
        """
        if guard is None:
            raise MissingGuardError(
                "A guard is required for a conditional reentry",
                {"state": self._name, "trigger": trigger},
            )
        self._add_reentry(trigger, guard)
        return self

    def _add_transition(self, trigger: TriggerID, destination: StateID, guard: Optional[Guard]) -> None:
        if destination == self._name:
            raise InvalidDestinationError(
                "Destination of permit() cannot be the state itself ({!r}); use permit_reentry()".format(self._name),
                {"state": self._name, "trigger": trigger, "destination": destination},
            )
        self._check_trigger_free(trigger)
        target = self._machine.configure(destination)
        self._transitions[trigger] = Transition(self, target, trigger, guard)
        logger.debug("Registered transition %r --%r--> %r (guarded=%s)", self._name, trigger, destination, guard is not None)

    def _add_reentry(self, trigger: TriggerID, guard: Optional[Guard]) -> None:
        self._check_trigger_free(trigger)
        self._transitions[trigger] = Transition(self, self, trigger, guard)
        logger.debug("Registered reentry %r --%r--> %r (guarded=%s)", self._name, trigger, self._name, guard is not None)

    def _check_trigger_free(self, trigger: TriggerID) -> None:
        existing = self._transitions.get(trigger)
        if existing is not None:
            raise DuplicateTriggerError(
                "A transition from {!r} to {!r} via {!r} already exists".format(
                    self._name, existing.destination.name, trigger
                ),
                {"state": self._name, "trigger": trigger, "destination": existing.destination.name},
            )

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def on_entry_from(self, trigger: TriggerID, handler: EntryHandler) -> "StateConfiguration":
        """
        Register handler(*params) to run when trigger brings the machine into
        this state. Entries caused by other triggers do not call it.

        :raises MissingHandlerError: handler is None.
        :raises DuplicateEntryHandlerError: trigger already has a handler here.
        """
        if handler is None:
            raise MissingHandlerError(
                "Entry handler cannot be None",
                {"state": self._name, "trigger": trigger},
            )
        if trigger in self._entry_handlers:
            raise DuplicateEntryHandlerError(
                "An entry handler for {!r} is already registered on {!r}".format(trigger, self._name),
                {"state": self._name, "trigger": trigger},
            )
        self._entry_handlers[trigger] = handler
        logger.debug("Registered entry handler on %r for %r", self._name, trigger)
        return self

    def on_exit(self, handler: ExitHandler) -> "StateConfiguration":
        """
        Register handler(trigger, destination) to run whenever the machine
        leaves this state, whatever the trigger.

        :raises MissingHandlerError: handler is None.
        :raises DuplicateExitHandlerError: an exit handler already exists.
        """
        if handler is None:
            raise MissingHandlerError("Exit handler cannot be None", {"state": self._name})
        if self._exit_handler is not None:
            raise DuplicateExitHandlerError(
                "State {!r} already has an exit handler".format(self._name),
                {"state": self._name},
            )
        self._exit_handler = handler
        logger.debug("Registered exit handler on %r", self._name)
        return self

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    def substate_of(self, parent: StateID) -> "StateConfiguration":
        """
        Declare parent as this state's superstate. Triggers this state does
        not handle are looked up on the parent chain.

        :raises InvalidHierarchyError: this state already has a parent, parent
            is this state, or parent is already below this state.
        """
        if self._parent is not None:
            raise InvalidHierarchyError(
                "State {!r} already has parent {!r}".format(self._name, self._parent.name),
                {"state": self._name, "parent": parent},
            )
        if parent == self._name:
            raise InvalidHierarchyError(
                "State {!r} cannot be a substate of itself".format(self._name),
                {"state": self._name, "parent": parent},
            )
        existing = self._machine.find(parent)
        if existing is not None and self._would_create_cycle(existing):
            raise InvalidHierarchyError(
                "Making {!r} a substate of {!r} would create a cycle".format(self._name, parent),
                {"state": self._name, "parent": parent},
            )

        parent_config = self._machine.configure(parent)
        self._parent = parent_config
        parent_config._substates[self._name] = self
        logger.debug("Declared %r as substate of %r", self._name, parent)
        return self

    def _would_create_cycle(self, new_parent: "StateConfiguration") -> bool:
        current: Optional[StateConfiguration] = new_parent
        while current is not None:
            if current is self:
                return True
            current = current._parent
        return False
