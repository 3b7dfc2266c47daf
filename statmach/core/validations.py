# statmach/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, List, Set

from statmach.interfaces.types import StateID

if TYPE_CHECKING:
    from statmach.core.state_machine import StateMachine


class Validator:
    """
    Performs configuration checks that cannot be enforced at registration
    time. Duplicate triggers, duplicate handlers and hierarchy cycles are
    already rejected by StateConfiguration, so the remaining concern is
    reachability.
    """

    def validate_state_machine(self, machine: "StateMachine") -> List[str]:
        """
        Check the machine's states and transitions for consistency.

        :param machine: The state machine to validate.
        :return: One message per problem; empty when the machine is sound.
        """
        return _DefaultValidationRules.unreachable_states(machine)


class _DefaultValidationRules:
    """
    Built-in validation rules.
    """

    @staticmethod
    def unreachable_states(machine: "StateMachine") -> List[str]:
        """
        Walk the transition graph from the initial state. A state contributes
        its own transitions and the ones inherited from its ancestors. A
        superstate counts as reachable when one of its substates is.
        """
        start = machine.get_state(machine.initial_state)
        reached: Set[StateID] = {start.name}
        pending = deque([start])
        while pending:
            config = pending.popleft()
            for owner in [config, *config.ancestors()]:
                for transition in owner.transitions.values():
                    if transition.is_reentry:
                        continue
                    target = transition.destination
                    if target.name not in reached:
                        reached.add(target.name)
                        pending.append(target)

        live = set(reached)
        for name in reached:
            live.update(ancestor.name for ancestor in machine.get_state(name).ancestors())

        return [
            "State {!r} is not reachable from initial state {!r}".format(name, start.name)
            for name in machine.states
            if name not in live
        ]
