"""Random numbers, byte strings and durations."""

from __future__ import annotations

import os
import random
from datetime import timedelta

_MICROSECOND = timedelta(microseconds=1)


def random_int(low: int, high: int) -> int:
    """Return a random integer between ``low`` and ``high``, both included."""
    if low == high:
        return low
    return random.randint(low, high)


def random_bytes(nb: int) -> bytes:
    """Return ``nb`` cryptographically secure random bytes."""
    return os.urandom(nb)


def random_duration(low: timedelta, high: timedelta) -> timedelta:
    """Return a random duration between ``low`` and ``high``, both included."""
    return timedelta(microseconds=random_int(low // _MICROSECOND, high // _MICROSECOND))


def random_2_bytes() -> bytes:
    """Return 2 random bytes."""
    return random_bytes(2)


def random_4_bytes() -> bytes:
    """Return 4 random bytes."""
    return random_bytes(4)


def random_8_bytes() -> bytes:
    """Return 8 random bytes."""
    return random_bytes(8)


def random_16_bytes() -> bytes:
    """Return 16 random bytes."""
    return random_bytes(16)