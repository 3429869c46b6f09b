"""
starnotary/core/time.py

THE ONLY CLOCK IN STARNOTARY.

Block times and challenge timestamps are whole-second Unix time.
Components take a ``clock`` callable that defaults to unix_seconds(),
so tests can pin the current second.
"""

import time
from typing import Callable

Clock = Callable[[], int]


def unix_seconds() -> int:
    """Return the current Unix time truncated to whole seconds."""
    return int(time.time())
