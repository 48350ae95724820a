"""
元件快取：TTL + 容量上限 + 背景清掃

key = node id + 排序後序列化的產生選項雜湊。
容量已滿時先清掉已過期的項目，仍然滿才淘汰最早插入的一筆（依插入時間，非存取時間）。
所有變動都在同一把鎖底下進行。
"""

import hashlib
import json
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

DEFAULT_TTL = 30 * 60
DEFAULT_MAX_SIZE = 1000
DEFAULT_SWEEP_INTERVAL = 5 * 60


def make_key(node_id: str, options: Dict[str, Any]) -> str:
    canonical = json.dumps(options, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
    return f"{node_id}_{digest}"


@dataclass
class _Entry:
    value: Any
    inserted_at: float


class ComponentCache:
    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        max_size: int = DEFAULT_MAX_SIZE,
        sweep_interval: Optional[float] = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.ttl = ttl
        self.max_size = max_size
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._thread: Optional[threading.Thread] = None
        if sweep_interval:
            self._thread = threading.Thread(target=self._sweep_loop, name="figcode-cache-sweep", daemon=True)
            self._thread.start()

    # ─── lifecycle ──────────────────────────────────────────

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self.sweep_interval):
            self.sweep()

    def close(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ─── operations ─────────────────────────────────────────

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.inserted_at >= self.ttl

    def _sweep_locked(self, now: float) -> int:
        stale = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def get(self, key: str) -> Optional[Any]:
        """命中回傳值；不存在或已過期回傳 None（過期項目留給清掃處理）."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or self._expired(entry, self._clock()):
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not self._expired(entry, self._clock())

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            now = self._clock()
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.max_size:
                self._sweep_locked(now)
                while len(self._entries) >= self.max_size:
                    self._entries.popitem(last=False)
                    self._evictions += 1
            self._entries[key] = _Entry(value=value, inserted_at=now)

    def sweep(self) -> int:
        with self._lock:
            return self._sweep_locked(self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "ttl": self.ttl,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": round(self._hits / lookups, 4) if lookups else 0.0,
                "keys": list(self._entries.keys()),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
