import pytest

from services.result_store import ResultStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_put_then_get():
    store = ResultStore(capacity=3, ttl_seconds=60)
    rid = store.put({"bodyType": "Mixed body type"})
    assert store.get(rid) == {"bodyType": "Mixed body type"}
    assert store.get("missing") is None


def test_lru_eviction_respects_recent_reads():
    store = ResultStore(capacity=2, ttl_seconds=60)
    a = store.put({"n": 1})
    b = store.put({"n": 2})
    store.get(a)                  # a is now most recent
    c = store.put({"n": 3})
    assert store.get(b) is None
    assert store.get(a) == {"n": 1}
    assert store.get(c) == {"n": 3}
    assert len(store) == 2


def test_entries_expire():
    clock = FakeClock()
    store = ResultStore(capacity=5, ttl_seconds=10, clock=clock)
    rid = store.put({"n": 1})
    clock.now = 9.9
    assert store.get(rid) == {"n": 1}
    clock.now = 10.0
    assert store.get(rid) is None
    assert len(store) == 0


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        ResultStore(capacity=0)
