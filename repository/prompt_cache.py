# repository/prompt_cache.py
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional


@dataclass
class _Entry:
    value: str
    expires_at: float


class PromptTemplateCache:
    """
    TTL cache for prompt templates keyed by prompt id.

    Entries live in this process only: separate workers or instances each
    keep their own copy, so an edit made elsewhere is seen here after at most
    `ttl_seconds` unless this process invalidates the key itself.
    """

    def __init__(
        self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: str) -> None:
        self._entries[key] = _Entry(value=value, expires_at=self._clock() + self.ttl_seconds)

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
