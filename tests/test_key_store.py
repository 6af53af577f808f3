import threading

import pytest

from domain.exceptions import CsrfError, RateLimitError
from infrastructure.csrf import CsrfProtection
from infrastructure.key_store import MemoryStore
from infrastructure.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def test_memory_store_expires_keys():
    clock = FakeClock()
    store = MemoryStore(clock=clock)
    store.set("a", 1, ttl=10)
    store.set("b", 2)
    assert store.get("a") == 1
    clock.advance(10)
    assert store.get("a") is None
    assert store.get("b") == 2


def test_memory_store_delete_and_clear():
    store = MemoryStore()
    store.set("a", 1)
    store.set("b", 2)
    assert store.delete("a") is True
    assert store.delete("a") is False
    assert store.clear() == 1
    assert store.size() == 0


def test_rate_limiter_blocks_after_limit_and_resets():
    clock = FakeClock()
    limiter = RateLimiter(MemoryStore(clock=clock), limit=3, window=60, prefix="t", message="slow down")

    results = [limiter.check("1.2.3.4") for _ in range(3)]
    assert [r.remaining for r in results] == [2, 1, 0]
    assert all(r.allowed for r in results)

    clock.advance(20)
    with pytest.raises(RateLimitError) as exc:
        limiter.hit("1.2.3.4")
    assert exc.value.retry_after == 40

    # outra chave tem contador próprio
    assert limiter.check("5.6.7.8").allowed

    clock.advance(40)
    assert limiter.check("1.2.3.4").allowed


def test_memory_store_incr_keeps_window_and_floors_at_zero():
    clock = FakeClock()
    store = MemoryStore(clock=clock)
    assert store.incr("k", ttl=60) == (1, 60)
    clock.advance(15)
    assert store.incr("k", ttl=60) == (2, 45)
    assert store.incr("k", -5, ttl=60) == (0, 45)


def test_memory_store_sweeps_expired_keys_on_write():
    clock = FakeClock()
    store = MemoryStore(clock=clock, sweep_interval=60)
    limiter = RateLimiter(store, limit=5, window=60, prefix="t", message="slow down")
    for n in range(1000):
        limiter.check(f"10.0.{n // 256}.{n % 256}")
    assert store.size() == 1000

    clock.advance(61)
    limiter.check("192.168.0.1")
    assert store.size() == 1


def test_memory_store_sweep_keeps_live_keys():
    clock = FakeClock()
    store = MemoryStore(clock=clock, sweep_interval=10)
    store.set("short", 1, ttl=5)
    store.set("long", 2, ttl=100)
    store.set("forever", 3)
    clock.advance(10)
    store.set("new", 4)
    assert store.size() == 3
    assert store.get("long") == 2
    assert store.get("forever") == 3


def test_rate_limiter_counts_concurrent_hits():
    store = MemoryStore()
    limiter = RateLimiter(store, limit=10_000, window=60, prefix="t", message="slow down")

    def worker():
        for _ in range(200):
            limiter.check("1.2.3.4")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    count, _ = store.incr("t:1.2.3.4", 0, ttl=60)
    assert count == 1600


def test_rate_limiter_release_gives_back_a_hit():
    clock = FakeClock()
    limiter = RateLimiter(MemoryStore(clock=clock), limit=1, window=60, prefix="t", message="slow down")
    limiter.hit("1.2.3.4")
    limiter.release("1.2.3.4")
    assert limiter.hit("1.2.3.4").allowed
    with pytest.raises(RateLimitError):
        limiter.hit("1.2.3.4")


def test_csrf_verify_accepts_issued_token_only():
    csrf = CsrfProtection(MemoryStore(), enabled=True)
    token = csrf.issue("1")
    csrf.verify("1", token)
    with pytest.raises(CsrfError):
        csrf.verify("1", "wrong")
    with pytest.raises(CsrfError):
        csrf.verify("2", token)
    with pytest.raises(CsrfError):
        csrf.verify("1", None)


def test_csrf_token_expires():
    clock = FakeClock()
    csrf = CsrfProtection(MemoryStore(clock=clock), enabled=True, ttl=3600)
    token = csrf.issue("1")
    clock.advance(3600)
    with pytest.raises(CsrfError):
        csrf.verify("1", token)
