"""Record store interface for prayer requests."""

from datetime import datetime
from typing import Protocol

from prayer_room.domain.prayers import PrayerDraft, PrayerRecord


class PrayerRepository(Protocol):
    """Persistence interface for the prayers table.

    Implementations raise ``StoreError`` when the store call fails.
    """

    def find_matching(
        self, name: str, phone: str, is_public: bool
    ) -> list[PrayerRecord]:
        """Return records whose natural key equals the given values."""

    def list_public(self) -> list[PrayerRecord]:
        """Return public records, newest first."""

    def insert(self, draft: PrayerDraft) -> None:
        """Insert a new record; the store assigns id and created_at."""

    def replace_content(
        self,
        prayer_id: int,
        content: str,
        is_public: bool,
        created_at: datetime,
    ) -> None:
        """Overwrite a record's content and reset its tally."""

    def update_prayed_count(self, prayer_id: int, prayed_count: int) -> None:
        """Store a new aggregate prayed count for a record."""
