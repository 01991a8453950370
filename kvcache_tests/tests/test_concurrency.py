import threading
from concurrent.futures import ThreadPoolExecutor

from kvcache.cache import HashCache
from kvcache.models import Expiration


def test_concurrent_puts_on_disjoint_keys_are_not_lost():
    c = HashCache(Expiration.NEVER, 0)
    writers = 8
    per_writer = 500
    put_events = []
    lock = threading.Lock()

    def on_put(k, v):
        with lock:
            put_events.append(k)

    c.add_put_listener(on_put)

    def write(worker):
        for i in range(per_writer):
            c.put(f"w{worker}-{i}", i)

    with ThreadPoolExecutor(max_workers=writers) as pool:
        list(pool.map(write, range(writers)))

    assert c.count() == writers * per_writer
    assert len(c.keys()) == writers * per_writer
    assert len(put_events) == writers * per_writer


def test_concurrent_put_if_absent_has_single_winner():
    c = HashCache(Expiration.NEVER, 0)
    start = threading.Barrier(16, timeout=5)

    def attempt(i):
        start.wait()
        return c.put_if_absent("shared", i)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(attempt, range(16)))

    assert results.count(True) == 1
    winner = results.index(True)
    assert c.get("shared") == (winner, True)


def test_readers_and_sweeps_interleave_with_writers():
    c = HashCache(Expiration.NEVER, 0)
    stop = threading.Event()
    expired = []
    c.add_expiration_listener(lambda k, v: expired.append(k))

    def sweeper():
        while not stop.is_set():
            c.delete_expired()
            c.keys()

    def writer(worker):
        for i in range(300):
            c.put(f"live-{worker}-{i}", i)
            c.put(f"dead-{worker}-{i}", i, -1)

    t = threading.Thread(target=sweeper)
    t.start()
    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(writer, range(4)))
    stop.set()
    t.join(5)
    c.delete_expired()

    assert c.count() == 4 * 300
    # every dead entry was swept exactly once
    assert len(expired) == 4 * 300
    assert len(set(expired)) == 4 * 300
