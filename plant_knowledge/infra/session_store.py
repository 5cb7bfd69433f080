"""In-memory per-conversation state with idle TTL."""

from __future__ import annotations

import time
from threading import Lock
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar


S = TypeVar("S")


class ConversationSessionStore(Generic[S]):
    """Keeps one state object per session id until it sits idle too long.

    Every successful lookup pushes the expiry ``ttl_seconds`` further out.
    """

    def __init__(
        self,
        ttl_seconds: int,
        *,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._ttl_seconds = max(1, int(ttl_seconds))
        self._clock = clock or time.monotonic
        self._items: Dict[str, Tuple[S, float]] = {}
        self._lock = Lock()

    def get(self, session_id: str) -> Optional[S]:
        now = self._clock()
        with self._lock:
            item = self._items.get(session_id)
            if not item:
                return None
            state, expires_at = item
            if expires_at <= now:
                self._items.pop(session_id, None)
                return None
            self._items[session_id] = (state, now + self._ttl_seconds)
            return state

    def get_or_create(self, session_id: str, factory: Callable[[], S]) -> S:
        now = self._clock()
        with self._lock:
            item = self._items.get(session_id)
            if item and item[1] > now:
                state = item[0]
            else:
                state = factory()
            self._items[session_id] = (state, now + self._ttl_seconds)
            return state

    def set(self, session_id: str, state: S) -> None:
        expires_at = self._clock() + self._ttl_seconds
        with self._lock:
            self._items[session_id] = (state, expires_at)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._items.pop(session_id, None)

    def cleanup(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, (_, expires_at) in self._items.items() if expires_at <= now]
            for key in expired:
                self._items.pop(key, None)
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
