from __future__ import annotations


class CacheError(Exception):
    """Base error for the cache package."""


class ValidationError(CacheError):
    """Raised when a constructor or expiration argument is invalid."""


class KeyNotFoundError(CacheError, KeyError):
    """Raised when a key is not present in the cache."""


class KeyExpiredError(CacheError, KeyError):
    """Raised when a key is present but its entry has expired."""
