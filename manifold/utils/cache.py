"""
Memo Cache - advisory caches for rules, templates and interpretations.

The cache:
- Uses explicit content hashes as keys, never object identity
- Lives in process memory only
- Is optional (everything it holds can be recomputed)

Writes are idempotent: recomputing a value and overwriting an entry with an
equal value is always safe, so no locking is needed.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import hashlib
import json
import time

from ..essence.models import CLASSIFICATION_FIELDS
from .logger import get_logger

logger = get_logger(__name__)


def content_hash(essence, fields: tuple[str, ...] = CLASSIFICATION_FIELDS) -> str:
    """
    Hash the classification fields of an essence.

    Uses SHA-256 of the canonical JSON form truncated to 16 chars.
    """
    payload = {}
    for name in fields:
        value = essence.get(name) if isinstance(essence, dict) else getattr(essence, name, None)
        payload[name] = getattr(value, "value", value)
    content = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(content).hexdigest()[:16]


def make_key(*parts: Any) -> str:
    """Join key parts into a single cache key."""
    return "_".join(str(p) for p in parts)


@dataclass
class CacheEntry:
    """
    A cached value.
    """
    key: str
    value: Any

    # Cache metadata
    created_at: float = 0.0
    last_accessed: float = 0.0
    access_count: int = 0


class MemoCache:
    """
    In-memory memo cache.

    Usage:
        cache = MemoCache("rules")

        rules = cache.get(game_id)
        if rules is None:
            rules = load(game_id)
            cache.put(game_id, rules)
    """

    def __init__(self, name: str, enabled: bool = True):
        self.name = name
        self.enabled = enabled
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """
        Get a cached value.

        Returns None if not cached or caching is disabled.
        """
        if not self.enabled:
            return None

        entry = self._entries.get(key)
        if entry is None:
            return None

        entry.last_accessed = time.time()
        entry.access_count += 1
        logger.debug(f"{self.name} cache hit: {key}")
        return entry.value

    def put(self, key: str, value: Any):
        """
        Cache a value, replacing any existing entry.
        """
        if not self.enabled:
            return

        now = time.time()
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            created_at=now,
            last_accessed=now,
            access_count=1,
        )

    def invalidate(self, key: str):
        """
        Remove a cached value.
        """
        self._entries.pop(key, None)

    def invalidate_prefix(self, prefix: str):
        """
        Remove every entry whose key starts with prefix.
        """
        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]

    def clear(self):
        """
        Clear the entire cache.
        """
        self._entries.clear()

    def list_cached(self) -> list[str]:
        """
        List all cached keys.
        """
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
