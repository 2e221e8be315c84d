"""Per-device memory of which prayers a viewer has prayed for."""

from dataclasses import dataclass, field
from typing import Protocol

DEFAULT_KEY_PREFIX = "prayed_"


class TallyStore(Protocol):
    """Key-value store scoped to one browsing device."""

    def get(self, key: str) -> bool:
        """Return True when a mark exists for the key."""

    def set(self, key: str) -> None:
        """Record a mark for the key."""

    def remove(self, key: str) -> None:
        """Forget the mark for the key, if any."""


def tally_key(prayer_id: int, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Build the tally store key for a prayer."""
    return f"{prefix}{prayer_id}"


@dataclass
class TallyStoreDirectory:
    """Keeps the marks of every device in process memory.

    Marks never expire, matching browser local storage. A device only takes
    up an entry while it holds at least one mark.
    """

    marks: dict[str, set[str]] = field(default_factory=dict)

    def for_device(self, device_id: str) -> TallyStore:
        """Return a store view over one device's marks."""
        return DeviceTallyStore(directory=self, device_id=device_id)

    def __len__(self) -> int:
        return len(self.marks)


@dataclass
class DeviceTallyStore(TallyStore):
    """Tally store for a single device, backed by the directory."""

    directory: TallyStoreDirectory
    device_id: str

    def get(self, key: str) -> bool:
        return key in self.directory.marks.get(self.device_id, ())

    def set(self, key: str) -> None:
        self.directory.marks.setdefault(self.device_id, set()).add(key)

    def remove(self, key: str) -> None:
        device_marks = self.directory.marks.get(self.device_id)
        if device_marks is None:
            return
        device_marks.discard(key)
        if not device_marks:
            del self.directory.marks[self.device_id]
