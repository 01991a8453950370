import importlib

import pytest

import kvcache.config as config_mod
from kvcache.cache import new_cache
from kvcache.models import Expiration


@pytest.fixture
def reload_config(monkeypatch):
    def _reload(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return importlib.reload(config_mod)

    yield _reload

    monkeypatch.undo()
    importlib.reload(config_mod)


def test_config_defaults(reload_config, monkeypatch):
    monkeypatch.delenv("KVCACHE_DEFAULT_EXPIRATION", raising=False)
    monkeypatch.delenv("KVCACHE_CLEANUP_INTERVAL", raising=False)
    cfg = reload_config()

    assert cfg.DEFAULT_EXPIRATION == 300.0
    assert cfg.CLEANUP_INTERVAL == 60.0
    assert cfg.JANITOR_THREAD_NAME == "kvcache-janitor"


def test_config_reads_environment(reload_config):
    cfg = reload_config(
        KVCACHE_DEFAULT_EXPIRATION=" 12.5 ",
        KVCACHE_CLEANUP_INTERVAL="0",
        KVCACHE_JANITOR_THREAD_NAME="sweeper",
    )

    assert cfg.DEFAULT_EXPIRATION == 12.5
    assert cfg.CLEANUP_INTERVAL == 0.0
    assert cfg.JANITOR_THREAD_NAME == "sweeper"


def test_config_bad_number_falls_back(reload_config):
    cfg = reload_config(KVCACHE_DEFAULT_EXPIRATION="soon")
    assert cfg.DEFAULT_EXPIRATION == 300.0


def test_new_cache_uses_config_when_arguments_omitted(reload_config, clock):
    reload_config(KVCACHE_DEFAULT_EXPIRATION="30", KVCACHE_CLEANUP_INTERVAL="-1")

    c = new_cache(clock=clock)
    c.put("k", "v")

    assert c.janitor is None
    assert c.get_expiration("k") == (clock.now + 30.0, True)


def test_new_cache_explicit_arguments_win(clock):
    with new_cache(Expiration.NEVER, 60, clock=clock) as c:
        assert c.janitor is not None
        assert c.janitor.interval == 60.0
        c.put("k", "v")
        assert c.get_expiration("k") == (Expiration.NEVER, True)
