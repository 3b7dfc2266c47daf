# statmach/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from statmach.interfaces.types import Guard, TriggerID

if TYPE_CHECKING:
    from statmach.core.states import StateConfiguration


class Transition:
    """
    Defines the path taken from one state to another when a trigger fires,
    optionally gated by a guard. Transitions are immutable once registered.
    """

    __slots__ = ("_source", "_destination", "_trigger", "_guard")

    def __init__(
        self,
        source: "StateConfiguration",
        destination: "StateConfiguration",
        trigger: TriggerID,
        guard: Optional[Guard] = None,
    ) -> None:
        """
        Initialize a transition record.

        :param source: The configuration owning this transition.
        :param destination: The configuration the machine moves to.
        :param trigger: The trigger this transition answers.
        :param guard: Optional predicate over the fire() params. None means
            the transition is unconditional.
        """
        self._source = source
        self._destination = destination
        self._trigger = trigger
        self._guard = guard

    def evaluate_guard(self, *params: Any) -> bool:
        """
        Evaluate the guard against the params passed to fire().

        :return: True if unguarded or the guard allows the transition.
        """
        if self._guard is None:
            return True
        return bool(self._guard(*params))

    @property
    def source(self) -> "StateConfiguration":
        """
        The state that owns the transition.
        """
        return self._source

    @property
    def destination(self) -> "StateConfiguration":
        """
        The state entered when the transition is taken.
        """
        return self._destination

    @property
    def trigger(self) -> TriggerID:
        """The trigger bound to this transition."""
        return self._trigger

    @property
    def guard(self) -> Optional[Guard]:
        """The guard predicate, if any."""
        return self._guard

    @property
    def is_conditional(self) -> bool:
        return self._guard is not None

    @property
    def is_reentry(self) -> bool:
        return self._source is self._destination

    def __repr__(self) -> str:
        return "Transition({!r} --{!r}--> {!r}{})".format(
            self._source.name,
            self._trigger,
            self._destination.name,
            " [guarded]" if self._guard is not None else "",
        )
