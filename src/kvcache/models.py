"""Expiration sentinels and shared type aliases.

An expiration argument is either a duration (seconds or timedelta),
Expiration.NEVER or Expiration.DEFAULT. Expiration.EXPIRED is only ever
returned by reads, never accepted by writes.
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import Callable, TypeVar, Union

from kvcache.errors import ValidationError

T = TypeVar("T")


class Expiration(Enum):
    NEVER = "never"
    DEFAULT = "default"
    EXPIRED = "expired"


NO_EXPIRATION = Expiration.NEVER
DEFAULT_EXPIRATION = Expiration.DEFAULT
EXPIRED = Expiration.EXPIRED

Duration = Union[int, float, timedelta]
ExpirationArg = Union[Duration, Expiration]

Listener = Callable[[str, T], None]
Visitor = Callable[[str, T], object]


def to_seconds(duration: Duration) -> float:
    # bool is an int subclass; True seconds is never what the caller meant
    if isinstance(duration, bool):
        raise ValidationError(f"Invalid duration: {duration!r}")
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    if isinstance(duration, (int, float)):
        return float(duration)
    raise ValidationError(f"Invalid duration: {duration!r}")


def normalize_expiration(expiration: ExpirationArg) -> Union[float, Expiration]:
    """Validate a write-side expiration argument.

    Returns the sentinel unchanged or the duration in seconds. Non-positive
    durations are allowed and produce an already expired entry.
    """
    if isinstance(expiration, Expiration):
        if expiration is Expiration.EXPIRED:
            raise ValidationError("Expiration.EXPIRED cannot be used as a write expiration")
        return expiration
    return to_seconds(expiration)
