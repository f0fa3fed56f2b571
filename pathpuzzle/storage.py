from __future__ import annotations
import os
import threading
from collections import OrderedDict, defaultdict, deque
from typing import Callable, Deque, Dict, Generic, List, Optional, Protocol, Tuple, Type, TypeVar

import redis
from pydantic import BaseModel

from .models.level import Level
from .models.session import PlaySession

T = TypeVar("T", bound=BaseModel)

REDIS_URL = os.getenv("REDIS_URL")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "0")) or None
MAX_LOG_ENTRIES = int(os.getenv("MAX_LOG_ENTRIES", "200"))
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "500"))


class Store(Protocol[T]):
    def get(self, key: str) -> Optional[T]: ...
    def save(self, key: str, value: T) -> None: ...
    def delete(self, key: str) -> bool: ...
    def list_all(self) -> List[T]: ...
    def next_id(self) -> int: ...


class MemoryStore(Generic[T]):
    """In-process store guarded by a lock; values are kept as JSON so callers never share instances.

    With ``max_entries`` set, the least recently used keys are evicted once the
    cap is exceeded and ``on_evict`` is called with each evicted key.
    """
    def __init__(
        self,
        model_cls: Type[T],
        max_entries: Optional[int] = None,
        on_evict: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.model_cls = model_cls
        self.max_entries = max_entries
        self.on_evict = on_evict
        self._data: "OrderedDict[str, str]" = OrderedDict()
        self._seq = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            raw = self._data.get(key)
            if raw is not None:
                self._data.move_to_end(key)
        return self.model_cls.model_validate_json(raw) if raw is not None else None

    def save(self, key: str, value: T) -> None:
        data = value.model_dump_json()
        with self._lock:
            self._data[key] = data
            self._data.move_to_end(key)
            evicted = self._enforce_cap()
        for k in evicted:
            if self.on_evict is not None:
                self.on_evict(k)

    def _enforce_cap(self) -> List[str]:
        # caller holds the lock
        evicted: List[str] = []
        if self.max_entries is None:
            return evicted
        while len(self._data) > self.max_entries:
            k, _ = self._data.popitem(last=False)
            evicted.append(k)
        return evicted

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def list_all(self) -> List[T]:
        with self._lock:
            raws = list(self._data.values())
        return [self.model_cls.model_validate_json(r) for r in raws]

    def next_id(self) -> int:
        with self._lock:
            self._seq += 1
            return self._seq


class RedisStore(Generic[T]):
    """
    JSON-over-Redis storage using keys like: <prefix>:<id>
    """
    def __init__(
        self,
        client: "redis.Redis",
        model_cls: Type[T],
        key_prefix: str,
        ttl_seconds: Optional[int] = None,
    ):
        self.client = client
        self.model_cls = model_cls
        self.key_prefix = key_prefix.rstrip(":")
        self.ttl_seconds = ttl_seconds

    def _key(self, id_: str) -> str:
        return f"{self.key_prefix}:{id_}"

    def get(self, key: str) -> Optional[T]:
        raw = self.client.get(self._key(key))
        if raw is None:
            return None
        return self.model_cls.model_validate_json(raw)

    def save(self, key: str, value: T) -> None:
        data = value.model_dump_json()
        k = self._key(key)
        if self.ttl_seconds:
            self.client.setex(k, self.ttl_seconds, data)
        else:
            self.client.set(k, data)

    def delete(self, key: str) -> bool:
        return bool(self.client.delete(self._key(key)))

    def list_all(self) -> List[T]:
        out: List[T] = []
        cursor = 0
        pattern = f"{self.key_prefix}:*"
        seq_key = self._key("seq")
        while True:
            cursor, keys = self.client.scan(cursor=cursor, match=pattern, count=200)
            keys = [k for k in keys if k != seq_key]
            if keys:
                for v in self.client.mget(keys):
                    if v:
                        out.append(self.model_cls.model_validate_json(v))
            if cursor == 0:
                break
        return out

    def next_id(self) -> int:
        return int(self.client.incr(self._key("seq")))


class MemoryLogStore:
    def __init__(self, max_entries: int = MAX_LOG_ENTRIES) -> None:
        self._logs: Dict[str, Deque[str]] = defaultdict(lambda: deque(maxlen=max_entries))
        self._lock = threading.Lock()

    def append(self, sid: str, entry_json: str) -> None:
        with self._lock:
            self._logs[sid].appendleft(entry_json)

    def list(self, sid: str, limit: int) -> List[str]:
        with self._lock:
            return list(self._logs.get(sid, ()))[:limit]

    def drop(self, sid: str) -> None:
        with self._lock:
            self._logs.pop(sid, None)


class RedisLogStore:
    """Newest-first action log per session kept in a capped Redis list.

    The list expires together with its session when a session TTL is configured.
    """
    def __init__(
        self,
        client: "redis.Redis",
        max_entries: int = MAX_LOG_ENTRIES,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        self.client = client
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds

    def _k(self, sid: str) -> str:
        return f"pathpuzzle:log:{sid}"

    def append(self, sid: str, entry_json: str) -> None:
        pipe = self.client.pipeline()
        pipe.lpush(self._k(sid), entry_json)
        pipe.ltrim(self._k(sid), 0, self.max_entries - 1)
        if self.ttl_seconds:
            pipe.expire(self._k(sid), self.ttl_seconds)
        pipe.execute()

    def list(self, sid: str, limit: int) -> List[str]:
        return self.client.lrange(self._k(sid), 0, limit - 1)

    def drop(self, sid: str) -> None:
        self.client.delete(self._k(sid))


def _build() -> Tuple[
    Optional[redis.Redis], Store[Level], Store[PlaySession], MemoryLogStore | RedisLogStore
]:
    if REDIS_URL:
        client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
        return (
            client,
            RedisStore(client, Level, "pathpuzzle:level"),
            RedisStore(client, PlaySession, "pathpuzzle:session", SESSION_TTL_SECONDS),
            RedisLogStore(client, ttl_seconds=SESSION_TTL_SECONDS),
        )
    # sessions are capped in memory; an evicted session takes its action log with it
    log_store = MemoryLogStore()
    session_store = MemoryStore(PlaySession, max_entries=MAX_SESSIONS, on_evict=log_store.drop)
    return None, MemoryStore(Level), session_store, log_store


r, levels, sessions, logs = _build()


def backend_name() -> str:
    return "redis" if r is not None else "memory"
