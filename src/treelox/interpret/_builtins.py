"""Native functions seeded into the global scope."""

from __future__ import annotations

import time

from ._objects import NativeFunction


def _clock() -> float:
    """Wall-clock time in seconds."""
    return time.time()


NATIVE_FUNCTIONS: dict[str, NativeFunction] = {
    "clock": NativeFunction("clock", 0, _clock),
}
