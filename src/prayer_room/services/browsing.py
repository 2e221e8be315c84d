"""Browsing session over the public prayer requests."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum

from prayer_room.domain.errors import InvalidTransitionError, StoreError
from prayer_room.domain.prayers import PrayerCard, PrayerRecord
from prayer_room.services.prayers import PrayerRepository
from prayer_room.services.tally import DEFAULT_KEY_PREFIX, TallyStore, tally_key

_logger = logging.getLogger(__name__)

LOAD_FAILED_NOTICE = "기도 제목을 불러오는데 실패했습니다."
TALLY_FAILED_NOTICE = "기도 횟수를 저장하지 못했습니다."


class BrowsingState(str, Enum):
    """States of the browsing session."""

    LOADING = "LOADING"
    EMPTY = "EMPTY"
    VIEWING = "VIEWING"
    EXHAUSTED = "EXHAUSTED"


@dataclass
class BrowsingSession:
    """Forward-only cursor over a snapshot of public prayers.

    The snapshot fetched by ``load`` is never mutated. Prayed counts changed
    during the session are kept in ``_counts`` and layered over it.
    """

    repository: PrayerRepository
    tally_store: TallyStore
    key_prefix: str = DEFAULT_KEY_PREFIX
    state: BrowsingState = BrowsingState.LOADING
    index: int = 0
    prayed: bool = False
    updating: bool = False
    notice: str | None = None
    records: tuple[PrayerRecord, ...] = ()
    _counts: dict[int, int] = field(default_factory=dict)

    async def load(self) -> BrowsingState:
        """Fetch public prayers once and open the first one."""
        self._require(BrowsingState.LOADING, "load")
        try:
            fetched = await asyncio.to_thread(self.repository.list_public)
        except StoreError:
            _logger.exception("Failed to load public prayers")
            fetched = []
            self.notice = LOAD_FAILED_NOTICE
        self.records = tuple(fetched)
        self._counts = {}
        self._move_to(0)
        return self.state

    async def reload(self) -> BrowsingState:
        """Fetch again after a load that came back empty or failed."""
        self._require(BrowsingState.EMPTY, "reload")
        self.state = BrowsingState.LOADING
        return await self.load()

    def next(self) -> BrowsingState:
        """Advance to the next prayer, or to EXHAUSTED after the last one."""
        self._require(BrowsingState.VIEWING, "next")
        self._move_to(self.index + 1)
        return self.state

    def restart(self) -> BrowsingState:
        """Start over from the first prayer of the same snapshot."""
        self._require(BrowsingState.EXHAUSTED, "restart")
        self._move_to(0)
        return self.state

    async def toggle_prayed(self) -> bool:
        """Flip the viewer's prayed mark for the current prayer.

        The count and mark are updated before the store call and reverted if
        it fails, except the tally store mark, which stays as written.
        Returns False when the toggle was ignored or reverted.
        """
        self._require(BrowsingState.VIEWING, "toggle")
        if self.updating:
            return False

        record = self.records[self.index]
        original_count = self.count_for(record)
        new_status = not self.prayed
        new_count = original_count + 1 if new_status else max(0, original_count - 1)

        self.prayed = new_status
        self._counts[record.id] = new_count
        self.updating = True

        key = tally_key(record.id, self.key_prefix)
        if new_status:
            self.tally_store.set(key)
        else:
            self.tally_store.remove(key)

        try:
            await asyncio.to_thread(
                self.repository.update_prayed_count, record.id, new_count
            )
        except StoreError:
            _logger.exception("Failed to update prayed count for %s", record.id)
            self.prayed = not new_status
            self._counts[record.id] = original_count
            self.notice = TALLY_FAILED_NOTICE
            return False
        finally:
            self.updating = False
        return True

    def count_for(self, record: PrayerRecord) -> int:
        """Return the session's view of a record's prayed count."""
        return self._counts.get(record.id, record.prayed_count)

    def current(self) -> PrayerRecord | None:
        """Return the prayer under the cursor with its current count."""
        if self.state is not BrowsingState.VIEWING:
            return None
        record = self.records[self.index]
        return replace(record, prayed_count=self.count_for(record))

    def current_card(self) -> PrayerCard | None:
        """Return the display projection of the current prayer."""
        record = self.current()
        if record is None:
            return None
        return PrayerCard(
            prayer_id=record.id,
            position=self.index + 1,
            total=len(self.records),
            initial=record.name[:1],
            content=record.content,
            created_at=record.created_at,
            prayed_count=record.prayed_count,
            prayed=self.prayed,
        )

    def pop_notice(self) -> str | None:
        """Return the pending notice and clear it."""
        notice, self.notice = self.notice, None
        return notice

    def _move_to(self, index: int) -> None:
        self.index = index
        if not self.records:
            self.state = BrowsingState.EMPTY
            self.prayed = False
            return
        if index >= len(self.records):
            self.state = BrowsingState.EXHAUSTED
            self.prayed = False
            return
        self.state = BrowsingState.VIEWING
        record = self.records[index]
        self.prayed = self.tally_store.get(tally_key(record.id, self.key_prefix))

    def _require(self, state: BrowsingState, action: str) -> None:
        if self.state is not state:
            raise InvalidTransitionError(action, self.state.value)
