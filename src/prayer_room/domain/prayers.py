"""Domain models for prayer requests."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PrayerRecord:
    """A prayer request stored in the record store."""

    id: int
    created_at: datetime | None
    name: str
    phone: str
    content: str
    is_public: bool
    prayed_count: int = 0


@dataclass(frozen=True)
class PrayerDraft:
    """A submission that has not been persisted yet."""

    name: str = ""
    phone: str = ""
    content: str = ""
    is_public: bool = True

    def natural_key(self) -> tuple[str, str, bool]:
        """Return the duplicate-detection key."""
        return self.name.strip(), self.phone.strip(), self.is_public


@dataclass(frozen=True)
class PrayerCard:
    """What a viewer sees for the current prayer while browsing."""

    prayer_id: int
    position: int
    total: int
    initial: str
    content: str
    created_at: datetime | None
    prayed_count: int
    prayed: bool
