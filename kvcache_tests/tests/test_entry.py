import pytest

from kvcache.entry import new_entry
from kvcache.models import Expiration


def test_entry_never_does_not_expire():
    e = new_entry("v", Expiration.NEVER, 10.0, now=0.0)
    assert e.never_expires
    assert e.expires_at is None
    assert e.expired(1e12) is False


def test_entry_explicit_duration_expires_after_deadline():
    e = new_entry("v", 5.0, 10.0, now=100.0)
    assert e.expires_at == 105.0
    assert e.expired(105.0) is False
    assert e.expired(105.01) is True
    assert pytest.approx(e.remaining(102.0)) == 3.0


def test_entry_default_substitutes_cache_default():
    e = new_entry("v", Expiration.DEFAULT, 10.0, now=100.0)
    assert e.expires_at == 110.0


def test_entry_default_never():
    e = new_entry("v", Expiration.DEFAULT, Expiration.NEVER, now=100.0)
    assert e.never_expires


def test_entry_negative_duration_is_already_expired():
    e = new_entry("v", -1.0, 10.0, now=100.0)
    assert e.expired(100.0) is True


def test_entry_remaining_rejects_non_expiring_entry():
    from kvcache.errors import CacheError

    e = new_entry("v", Expiration.NEVER, 10.0, now=0.0)
    with pytest.raises(CacheError):
        e.remaining(0.0)
