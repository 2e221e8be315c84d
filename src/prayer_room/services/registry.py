"""In-memory registry for live workflow instances."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4


@dataclass
class _RegistryEntry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryRegistry:
    """Keeps workflows addressable by id until they sit idle too long."""

    ttl_seconds: int
    _entries: dict[UUID, _RegistryEntry]

    def __init__(self, ttl_seconds: int) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries = {}

    def add(self, value: object) -> UUID:
        """Store a value under a fresh id and return the id."""
        self._evict_expired()
        key = uuid4()
        self._entries[key] = _RegistryEntry(value=value, expires_at=self._deadline())
        return key

    def get(self, key: UUID) -> object | None:
        """Return the value and extend its lifetime, or None if gone."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        entry.expires_at = self._deadline()
        return entry.value

    def discard(self, key: UUID) -> None:
        """Drop a value if present."""
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)

    def _deadline(self) -> datetime:
        return datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds)

    def _evict_expired(self) -> None:
        now = datetime.now(tz=UTC)
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
