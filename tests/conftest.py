# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading
from unittest.mock import MagicMock

import pytest

from statmach.core.state_machine import StateMachine
from tests.circuit import (
    CLOSED,
    FAILURE_THRESHOLD_REACHED,
    HALF_OPEN,
    OPEN,
    OPERATION_FAILED,
    SUCCESS_THRESHOLD_REACHED,
    TIMEOUT_TIMER_EXPIRED,
    TRY,
)


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "threaded: mark test as spawning worker threads")


@pytest.fixture
def machine():
    """A machine starting in 'src' with nothing configured."""
    return StateMachine("src")


@pytest.fixture
def circuit_machine():
    """The closed/open/half-open breaker graph without handlers."""
    sm = StateMachine(CLOSED)
    sm.configure(CLOSED).permit(FAILURE_THRESHOLD_REACHED, OPEN).permit_reentry(TRY)
    sm.configure(OPEN).permit(TIMEOUT_TIMER_EXPIRED, HALF_OPEN)
    (
        sm.configure(HALF_OPEN)
        .permit(OPERATION_FAILED, OPEN)
        .permit(SUCCESS_THRESHOLD_REACHED, CLOSED)
        .permit_reentry(TRY)
    )
    return sm


@pytest.fixture
def mock_hook():
    """A hook with every lifecycle method mocked."""
    hook = MagicMock()
    hook.on_enter = MagicMock()
    hook.on_exit = MagicMock()
    hook.on_declined = MagicMock()
    hook.on_error = MagicMock()
    return hook


@pytest.fixture(autouse=True)
def cleanup_threads():
    yield
    # Cleanup any remaining threads after each test
    for thread in threading.enumerate():
        if thread != threading.current_thread() and thread.is_alive() and not thread.daemon:
            thread.join(timeout=1.0)
