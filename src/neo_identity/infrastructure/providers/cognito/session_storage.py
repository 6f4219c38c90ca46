"""Storage for provider session tokens.

The Cognito binding keeps the tokens of established sessions here, keyed
per app client and user. This is the provider's session context, not gateway
state: the gateway core never reads it.
"""

import json
import logging
import threading
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import redis

logger = logging.getLogger(__name__)

SessionRecord = Dict[str, Any]


@runtime_checkable
class SessionStorage(Protocol):
    """Key/value storage for session records."""

    def get(self, key: str) -> Optional[SessionRecord]:
        ...

    def set(self, key: str, record: SessionRecord) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemorySessionStorage:
    """Process-local session storage, safe to use from worker threads."""

    def __init__(self):
        self._records: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[SessionRecord]:
        with self._lock:
            record = self._records.get(key)
            return dict(record) if record is not None else None

    def set(self, key: str, record: SessionRecord) -> None:
        with self._lock:
            self._records[key] = dict(record)

    def delete(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class RedisSessionStorage:
    """Redis-backed session storage shared between gateway processes.

    Records are stored as JSON strings under ``prefix + key`` and expire
    after ``ttl`` seconds.
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        *,
        url: Optional[str] = None,
        prefix: str = "neo_identity:session:",
        ttl: int = 2592000,
    ):
        """Initialize Redis session storage.

        Args:
            client: Existing synchronous Redis client
            url: Redis URL used when no client is given
            prefix: Key prefix for session records
            ttl: Record lifetime in seconds

        Raises:
            ValueError: If neither a client nor a URL is given
        """
        if client is None:
            if not url:
                raise ValueError("Either a Redis client or a Redis URL is required")
            client = redis.Redis.from_url(url, decode_responses=True)
        self._client = client
        self._prefix = prefix
        self._ttl = ttl

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[SessionRecord]:
        raw = self._client.get(self._key(key))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding unreadable session record {self._key(key)}")
            self._client.delete(self._key(key))
            return None

    def set(self, key: str, record: SessionRecord) -> None:
        self._client.set(self._key(key), json.dumps(record), ex=self._ttl)

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))
