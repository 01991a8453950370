"""Public contract of the cache.

HashCache is the only implementation; the Protocol lets callers type
against the behaviour rather than the class.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Tuple, Union, runtime_checkable

from kvcache.models import Expiration, ExpirationArg, Listener, T, Visitor


@runtime_checkable
class Cache(Protocol[T]):
    """Contract for a key/value cache with per-entry expiration."""

    def get(self, key: str) -> Tuple[Optional[T], bool]:
        ...

    def fetch(self, key: str) -> T:
        ...

    def get_expiration(self, key: str) -> Tuple[Union[float, Expiration, None], bool]:
        ...

    def get_expected_expiration(self, key: str) -> Tuple[Union[float, Expiration, None], bool]:
        ...

    def put(self, key: str, value: T, expiration: ExpirationArg = Expiration.DEFAULT) -> None:
        ...

    def put_if_absent(self, key: str, value: T, expiration: ExpirationArg = Expiration.DEFAULT) -> bool:
        ...

    def put_if_exists(self, key: str, value: T, expiration: ExpirationArg = Expiration.DEFAULT) -> bool:
        ...

    def exists(self, key: str) -> bool:
        ...

    def remove(self, key: str) -> bool:
        ...

    def count(self) -> int:
        ...

    def keys(self) -> List[str]:
        ...

    def values(self) -> List[T]:
        ...

    def for_each(self, visitor: Visitor[T]) -> None:
        ...

    def clear(self) -> None:
        ...

    def delete_expired(self) -> int:
        ...

    def add_put_listener(self, listener: Listener[T]) -> None:
        ...

    def add_remove_listener(self, listener: Listener[T]) -> None:
        ...

    def add_expiration_listener(self, listener: Listener[T]) -> None:
        ...

    def close(self) -> None:
        ...
