"""Cache entry lifecycle.

An entry pairs a value with an absolute wall-clock expiration instant, or
None when it never expires. Entries are immutable: updating a key replaces
its entry with a freshly computed one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, Union

from kvcache.errors import CacheError
from kvcache.models import Expiration, T


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    value: T
    expires_at: Optional[float]  # epoch seconds, None = never

    @property
    def never_expires(self) -> bool:
        return self.expires_at is None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at

    def remaining(self, now: float) -> float:
        # Only meaningful for an expiring entry that has not expired yet
        if self.expires_at is None:
            raise CacheError("A non-expiring entry has no remaining time")
        return self.expires_at - now


def new_entry(
    value: T,
    expiration: Union[float, Expiration],
    default_expiration: Union[float, Expiration],
    *,
    now: float,
) -> CacheEntry[T]:
    """Build an entry from an already normalized expiration.

    A non-positive duration yields an entry that is expired immediately.
    """
    if expiration is Expiration.DEFAULT:
        expiration = default_expiration
    if expiration is Expiration.NEVER:
        return CacheEntry(value=value, expires_at=None)
    return CacheEntry(value=value, expires_at=now + float(expiration))
