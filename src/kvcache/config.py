"""Configuration and environment helpers for the cache.

Provides small helpers to read typed environment variables and exposes the
defaults new_cache falls back to when called without explicit arguments
(KVCACHE_DEFAULT_EXPIRATION, KVCACHE_CLEANUP_INTERVAL, janitor thread name).
"""

from __future__ import annotations

import os


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


# Expiration applied when a write asks for the cache default (seconds)
DEFAULT_EXPIRATION = _env_float("KVCACHE_DEFAULT_EXPIRATION", 300.0)

# Janitor sweep period (seconds); <= 0 disables the background sweep
CLEANUP_INTERVAL = _env_float("KVCACHE_CLEANUP_INTERVAL", 60.0)

JANITOR_THREAD_NAME = _env_str("KVCACHE_JANITOR_THREAD_NAME", "kvcache-janitor")
