import pytest


class FakeClock:
    """Manually advanced stand-in for time.time."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    from kvcache.cache import HashCache

    c = HashCache(60.0, 0, clock=clock)
    yield c
    c.close()
