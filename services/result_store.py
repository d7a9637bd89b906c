"""
services/result_store.py
────────────────────────────────────────────────────────────────────────
Process-local store for finished analyses so the results page can read
them back.  Bounded LRU with a per-entry TTL; nothing survives a restart.
"""
from __future__ import annotations

import threading
import time
import uuid
from collections import OrderedDict
from typing import Any, Callable, Dict

from config import settings


class ResultStore:
    def __init__(
        self,
        capacity: int = 1000,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        self._ttl = ttl_seconds
        self._clock = clock
        self._items: OrderedDict[str, tuple[float, Dict[str, Any]]] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            self._purge()
            return len(self._items)

    def _purge(self) -> None:
        now = self._clock()
        for key in [k for k, (exp, _) in self._items.items() if exp <= now]:
            del self._items[key]

    def put(self, result: Dict[str, Any]) -> str:
        result_id = uuid.uuid4().hex[:13]
        with self._lock:
            self._purge()
            self._items[result_id] = (self._clock() + self._ttl, result)
            while len(self._items) > self._capacity:
                self._items.popitem(last=False)
        return result_id

    def get(self, result_id: str) -> Dict[str, Any] | None:
        with self._lock:
            entry = self._items.get(result_id)
            if entry is None:
                return None
            expires, result = entry
            if expires <= self._clock():
                del self._items[result_id]
                return None
            self._items.move_to_end(result_id)
            return result


results = ResultStore(
    capacity=settings.result_store_capacity,
    ttl_seconds=settings.result_store_ttl_seconds,
)
