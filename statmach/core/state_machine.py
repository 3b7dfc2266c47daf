# statmach/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from statmach.core.errors import NoMatchingTransitionError, StateNotFoundError, ValidationError
from statmach.core.hooks import HookManager
from statmach.core.states import StateConfiguration
from statmach.core.transitions import Transition
from statmach.core.validations import Validator
from statmach.interfaces.types import StateID, TriggerID

logger = logging.getLogger(__name__)


class StateMachine:
    """
    A hierarchical finite state machine driven one trigger at a time.

    The machine owns a registry of StateConfiguration objects, created on
    first reference, and a single current state. fire() resolves the trigger
    on the current state and then on its ancestors, evaluates the guard, runs
    the current state's exit handler, moves to the destination and runs the
    destination's entry handler for that trigger.

    The machine is synchronous and not thread-safe; see statmach.runtime for
    ways to serialize access.
    """

    def __init__(self, initial_state: StateID, hooks: Optional[List[Any]] = None) -> None:
        """
        :param initial_state: Identifier of the state the machine starts in.
        :param hooks: Optional list of hook objects implementing on_enter,
            on_exit, on_declined or on_error.
        """
        self._states: Dict[StateID, StateConfiguration] = {}
        self._hooks = HookManager(hooks)
        self._initial_state = initial_state
        self._current: StateConfiguration = self.configure(initial_state)
        self._depth = 0
        self._reported: Optional[BaseException] = None

    def __repr__(self) -> str:
        return "StateMachine(current={!r}, states={})".format(self._current.name, len(self._states))

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def configure(self, state: StateID) -> StateConfiguration:
        """
        Return the configuration for state, creating and registering it the
        first time the identifier is seen.
        """
        config = self._states.get(state)
        if config is None:
            config = StateConfiguration(state, self)
            self._states[state] = config
            logger.debug("Configured state %r", state)
        return config

    def find(self, state: StateID) -> Optional[StateConfiguration]:
        """Return the configuration for state, or None if it was never configured."""
        return self._states.get(state)

    def get_state(self, state: StateID) -> StateConfiguration:
        """
        Non-creating lookup.

        :raises StateNotFoundError: state was never configured.
        """
        config = self._states.get(state)
        if config is None:
            raise StateNotFoundError("State {!r} is not configured".format(state), {"state": state})
        return config

    @property
    def states(self) -> List[StateID]:
        """Identifiers of all configured states, in registration order."""
        return list(self._states)

    @property
    def initial_state(self) -> StateID:
        return self._initial_state

    def add_hook(self, hook: Any) -> None:
        """Attach a lifecycle hook (see HookProtocol)."""
        self._hooks.register_hook(hook)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def current_state(self) -> StateID:
        """Identifier of the active state."""
        return self._current.name

    @property
    def current_configuration(self) -> StateConfiguration:
        """Configuration of the active state."""
        return self._current

    def is_in_state(self, state: StateID) -> bool:
        """
        True if the active state is state or one of its substates.
        """
        return self._current.name == state or self._current.is_substate_of(state)

    def can_fire(self, trigger: TriggerID, *params: Any) -> bool:
        """
        Check whether fire(trigger, *params) would take a transition right
        now. No handler runs; the guard, if any, is evaluated.
        """
        transition = self._resolve(trigger, self._current)
        if transition is None:
            return False
        return transition.evaluate_guard(*params)

    def permitted_triggers(self, *params: Any) -> List[TriggerID]:
        """
        Triggers that would currently be taken, local ones first, then the
        ones inherited from ancestors. An ancestor's transition is hidden when
        a closer state binds the same trigger.
        """
        seen = set()
        permitted = []
        config: Optional[StateConfiguration] = self._current
        while config is not None:
            for trigger, transition in config.transitions.items():
                if trigger in seen:
                    continue
                seen.add(trigger)
                if transition.evaluate_guard(*params):
                    permitted.append(trigger)
            config = config.parent
        return permitted

    def validate(self, strict: bool = False) -> List[str]:
        """
        Check the configured graph for unreachable states.

        :param strict: Raise instead of returning findings.
        :raises ValidationError: strict is set and problems were found.
        """
        findings = Validator().validate_state_machine(self)
        if findings and strict:
            raise ValidationError("\n".join(findings), {"findings": findings})
        for finding in findings:
            logger.warning(finding)
        return findings

    # -------------------------------------------------------------------------
    # Driving
    # -------------------------------------------------------------------------

    def fire(self, trigger: TriggerID, *params: Any) -> bool:
        """
        Attempt the transition bound to trigger.

        params are handed to the guard and to the destination's entry handler.

        :return: True if the transition was taken, False if its guard declined.
        :raises NoMatchingTransitionError: neither the current state nor any
            ancestor handles trigger. The current state is unchanged.
        """
        self._depth += 1
        try:
            return self._fire(trigger, params)
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._reported = None

    def _fire(self, trigger: TriggerID, params: tuple) -> bool:
        source = self._current
        transition = self._resolve(trigger, source)
        if transition is None:
            raise NoMatchingTransitionError(
                "No valid transition from {!r} via {!r}".format(source.name, trigger),
                {"state": source.name, "trigger": trigger},
            )

        try:
            allowed = transition.evaluate_guard(*params)
        except Exception as error:
            self._notify_error(error, source.name, trigger)
            raise

        if not allowed:
            logger.debug("Guard declined %r in %r", trigger, source.name)
            self._hooks.execute_on_declined(source.name, trigger)
            return False

        # An inherited reentry re-enters the current state, not the ancestor owning it.
        destination = source if transition.is_reentry else transition.destination
        logger.debug("Firing %r: %r -> %r", trigger, source.name, destination.name)
        try:
            if source.exit_handler is not None:
                source.exit_handler(trigger, destination.name)
            self._hooks.execute_on_exit(source.name, trigger, destination.name)

            self._current = destination
            self._hooks.execute_on_enter(destination.name, trigger)

            entry_handler = destination.entry_handler_for(trigger)
            if entry_handler is not None:
                entry_handler(*params)
        except Exception as error:
            self._notify_error(error, source.name, trigger)
            raise
        return True

    def _resolve(self, trigger: TriggerID, state: StateConfiguration) -> Optional[Transition]:
        """
        Find the transition for trigger on state or, failing that, on the
        closest ancestor that binds it.
        """
        config: Optional[StateConfiguration] = state
        while config is not None:
            transition = config.transitions.get(trigger)
            if transition is not None:
                return transition
            config = config.parent
        return None

    def _notify_error(self, error: Exception, state: StateID, trigger: TriggerID) -> None:
        # A failure inside a nested fire() is reported by the innermost call only.
        if error is self._reported:
            return
        self._reported = error
        logger.exception("Handler failed while firing %r from %r", trigger, state)
        self._hooks.execute_on_error(error)
