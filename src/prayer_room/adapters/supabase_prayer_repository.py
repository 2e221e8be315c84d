"""Supabase-backed prayer repository."""

from dataclasses import dataclass
from datetime import datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from prayer_room.domain.errors import StoreError
from prayer_room.domain.prayers import PrayerDraft, PrayerRecord
from prayer_room.services.prayers import PrayerRepository

_COLUMNS = "id, created_at, name, phone, content, is_public, prayed_count"


@dataclass
class SupabasePrayerRepository(PrayerRepository):
    """Supabase implementation of the prayers table."""

    client: Client
    table_name: str = "prayers"

    def find_matching(
        self, name: str, phone: str, is_public: bool
    ) -> list[PrayerRecord]:
        """Return rows sharing the given name, phone and audience."""
        query = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("name", name)
            .eq("phone", phone)
            .eq("is_public", is_public)
        )
        response = _execute(query, "find matching prayers")
        return [_parse_prayer(row) for row in response.data or []]

    def list_public(self) -> list[PrayerRecord]:
        """Return public rows, newest first."""
        query = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("is_public", True)
            .order("created_at", desc=True)
        )
        response = _execute(query, "list public prayers")
        return [_parse_prayer(row) for row in response.data or []]

    def insert(self, draft: PrayerDraft) -> None:
        """Insert a prayer row."""
        query = self.client.table(self.table_name).insert(
            {
                "name": draft.name,
                "phone": draft.phone,
                "content": draft.content,
                "is_public": draft.is_public,
            }
        )
        _execute(query, "insert prayer")

    def replace_content(
        self,
        prayer_id: int,
        content: str,
        is_public: bool,
        created_at: datetime,
    ) -> None:
        """Overwrite a prayer row and reset its prayed count."""
        query = (
            self.client.table(self.table_name)
            .update(
                {
                    "content": content,
                    "is_public": is_public,
                    "created_at": created_at.isoformat(),
                    "prayed_count": 0,
                }
            )
            .eq("id", prayer_id)
        )
        _execute(query, f"replace prayer {prayer_id}")

    def update_prayed_count(self, prayer_id: int, prayed_count: int) -> None:
        """Store the aggregate prayed count for a row."""
        query = (
            self.client.table(self.table_name)
            .update({"prayed_count": prayed_count})
            .eq("id", prayer_id)
        )
        _execute(query, f"update prayed count for {prayer_id}")


def _execute(query, action: str):  # type: ignore[no-untyped-def]
    try:
        return query.execute()
    except APIError as exc:
        raise StoreError(exc.message or f"Failed to {action}") from exc
    except httpx.HTTPError as exc:
        raise StoreError(f"Failed to {action}: {exc}") from exc


def _parse_prayer(row: dict[str, object]) -> PrayerRecord:
    created_at = row.get("created_at")
    return PrayerRecord(
        id=int(row["id"]),
        created_at=_parse_timestamp(created_at) if created_at else None,
        name=str(row.get("name", "")),
        phone=str(row.get("phone", "")),
        content=str(row.get("content", "")),
        is_public=bool(row.get("is_public", False)),
        prayed_count=int(row.get("prayed_count") or 0),
    )


def _parse_timestamp(value: object) -> datetime:
    # PostgREST may return a trailing "Z" and fractional seconds of any width.
    text = str(value).replace("Z", "+00:00")
    return datetime.fromisoformat(text)
