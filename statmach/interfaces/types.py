# statmach/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Hashable

StateID = Hashable
TriggerID = Hashable
Priority = int

# Callback Types
Guard = Callable[..., bool]
EntryHandler = Callable[..., None]
ExitHandler = Callable[[Any, Any], None]
