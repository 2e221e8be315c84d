"""Pydantic models for prayer room request payloads."""

from pydantic import BaseModel

from prayer_room.services.submission import ConflictChoice


class PrayerForm(BaseModel):
    """Fields of the prayer request form; omitted fields stay unchanged."""

    name: str | None = None
    phone: str | None = None
    content: str | None = None
    is_public: bool | None = None


class ConflictResolution(BaseModel):
    """The submitter's answer to a duplicate conflict."""

    choice: ConflictChoice
