# statmach/runtime/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Opt-in helpers for hosts that drive a machine from several threads or timers."""

from statmach.runtime.concurrency import SynchronizedMachine, get_lock, with_lock
from statmach.runtime.event_queue import EventQueue, FireRequest
from statmach.runtime.executor import Executor
from statmach.runtime.timers import TimeoutScheduler

__all__ = [
    "EventQueue",
    "Executor",
    "FireRequest",
    "SynchronizedMachine",
    "TimeoutScheduler",
    "get_lock",
    "with_lock",
]
