# tests/unit/test_states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Registration rules of StateConfiguration."""

import pytest

from statmach.core.errors import (
    DuplicateEntryHandlerError,
    DuplicateExitHandlerError,
    DuplicateTriggerError,
    InvalidDestinationError,
    InvalidHierarchyError,
    MissingGuardError,
    MissingHandlerError,
)
from statmach.core.states import StateConfiguration


def allow(*params):
    return True


def noop(*args):
    return None


# -----------------------------------------------------------------------------
# PERMIT
# -----------------------------------------------------------------------------


def test_permit_registers_transition(machine):
    sc = machine.configure("src")
    result = sc.permit("t1", "dst")

    assert result is sc
    transition = sc.transitions["t1"]
    assert transition.destination.name == "dst"
    assert transition.guard is None


def test_permit_creates_destination_on_demand(machine):
    assert machine.find("dst") is None
    machine.configure("src").permit("t1", "dst")
    assert isinstance(machine.find("dst"), StateConfiguration)


def test_permit_reuses_existing_destination(machine):
    dst = machine.configure("dst")
    machine.configure("src").permit("t1", "dst")
    assert machine.configure("src").transitions["t1"].destination is dst


def test_permit_to_self_is_rejected(machine):
    sc = machine.configure("src")
    with pytest.raises(InvalidDestinationError) as exc_info:
        sc.permit("t1", "src")
    assert exc_info.value.details["state"] == "src"
    assert "t1" not in sc.transitions


def test_permit_if_to_self_is_rejected(machine):
    with pytest.raises(InvalidDestinationError):
        machine.configure("src").permit_if("t1", "src", allow)


def test_second_transition_for_trigger_is_rejected(machine):
    sc = machine.configure("src")
    sc.permit("t1", "dst")

    with pytest.raises(DuplicateTriggerError):
        sc.permit("t1", "dst1")
    with pytest.raises(DuplicateTriggerError):
        sc.permit_if("t1", "dst2", allow)
    with pytest.raises(DuplicateTriggerError):
        sc.permit_reentry("t1")
    with pytest.raises(DuplicateTriggerError):
        sc.permit_reentry_if("t1", allow)

    assert sc.transitions["t1"].destination.name == "dst"


def test_rejected_duplicate_does_not_configure_destination(machine):
    sc = machine.configure("src")
    sc.permit("t1", "dst")
    with pytest.raises(DuplicateTriggerError):
        sc.permit("t1", "elsewhere")
    assert machine.find("elsewhere") is None


def test_same_trigger_on_different_states_is_allowed(machine):
    machine.configure("a").permit("t1", "b")
    machine.configure("b").permit("t1", "a")
    assert machine.configure("b").transitions["t1"].destination.name == "a"


def test_permit_if_requires_guard(machine):
    sc = machine.configure("src")
    with pytest.raises(MissingGuardError):
        sc.permit_if("t1", "dst", None)
    assert "t1" not in sc.transitions
    assert machine.find("dst") is None


def test_permit_if_stores_guard(machine):
    sc = machine.configure("src").permit_if("t1", "dst", allow)
    assert sc.transitions["t1"].guard is allow


# -----------------------------------------------------------------------------
# REENTRY
# -----------------------------------------------------------------------------


def test_permit_reentry_targets_self(machine):
    sc = machine.configure("src").permit_reentry("again")
    transition = sc.transitions["again"]
    assert transition.destination is sc
    assert transition.is_reentry


def test_permit_reentry_if_requires_guard(machine):
    with pytest.raises(MissingGuardError):
        machine.configure("src").permit_reentry_if("again", None)


def test_permit_reentry_if_stores_guard(machine):
    sc = machine.configure("src").permit_reentry_if("again", allow)
    assert sc.transitions["again"].guard is allow


# -----------------------------------------------------------------------------
# HANDLERS
# -----------------------------------------------------------------------------


def test_on_entry_from_registers_per_trigger(machine):
    first = lambda *params: None
    second = lambda *params: None
    sc = machine.configure("src").on_entry_from("t1", first).on_entry_from("t2", second)

    assert sc.entry_handler_for("t1") is first
    assert sc.entry_handler_for("t2") is second
    assert sc.entry_handler_for("t3") is None


def test_on_entry_from_twice_for_same_trigger_is_rejected(machine):
    sc = machine.configure("src").on_entry_from("t1", noop)
    replacement = lambda *params: None
    with pytest.raises(DuplicateEntryHandlerError):
        sc.on_entry_from("t1", replacement)
    assert sc.entry_handler_for("t1") is noop


def test_on_entry_from_rejects_none(machine):
    with pytest.raises(MissingHandlerError):
        machine.configure("src").on_entry_from("t1", None)


def test_on_exit_only_once(machine):
    sc = machine.configure("src").on_exit(noop)
    with pytest.raises(DuplicateExitHandlerError):
        sc.on_exit(lambda trigger, destination: None)
    assert sc.exit_handler is noop


def test_on_exit_rejects_none(machine):
    sc = machine.configure("src")
    with pytest.raises(MissingHandlerError):
        sc.on_exit(None)
    assert sc.exit_handler is None


# -----------------------------------------------------------------------------
# HIERARCHY
# -----------------------------------------------------------------------------


def test_substate_of_links_both_ways(machine):
    child = machine.configure("child").substate_of("parent")
    parent = machine.find("parent")

    assert child.parent is parent
    assert parent.substates["child"] is child
    assert list(child.ancestors()) == [parent]


def test_substate_of_self_is_rejected(machine):
    with pytest.raises(InvalidHierarchyError):
        machine.configure("src").substate_of("src")


def test_second_parent_is_rejected(machine):
    sc = machine.configure("child").substate_of("p1")
    with pytest.raises(InvalidHierarchyError):
        sc.substate_of("p2")
    assert sc.parent.name == "p1"
    assert machine.find("p2") is None


def test_states_cannot_be_substates_of_each_other(machine):
    machine.configure("src").substate_of("dst")
    with pytest.raises(InvalidHierarchyError):
        machine.configure("dst").substate_of("src")
    assert machine.configure("dst").parent is None


def test_three_state_cycle_is_rejected(machine):
    machine.configure("a").substate_of("b")
    machine.configure("b").substate_of("c")
    with pytest.raises(InvalidHierarchyError):
        machine.configure("c").substate_of("a")
    assert machine.configure("c").parent is None


def test_siblings_may_share_parent(machine):
    machine.configure("a").substate_of("root")
    machine.configure("b").substate_of("root")
    assert set(machine.find("root").substates) == {"a", "b"}


def test_is_substate_of_is_transitive(machine):
    machine.configure("leaf").substate_of("mid")
    machine.configure("mid").substate_of("root")
    leaf = machine.configure("leaf")

    assert leaf.is_substate_of("mid")
    assert leaf.is_substate_of("root")
    assert not leaf.is_substate_of("leaf")
    assert not machine.configure("root").is_substate_of("leaf")


def test_read_only_views(machine):
    sc = machine.configure("src").permit("t1", "dst")
    with pytest.raises(TypeError):
        sc.transitions["t2"] = None
    with pytest.raises(TypeError):
        sc.substates["x"] = None
