"""Submission workflow with duplicate detection."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum

from prayer_room.domain.errors import (
    InvalidTransitionError,
    StoreError,
    ValidationError,
)
from prayer_room.domain.prayers import PrayerDraft, PrayerRecord
from prayer_room.services.phone import format_phone
from prayer_room.services.prayers import PrayerRepository

_logger = logging.getLogger(__name__)

MISSING_FIELDS_NOTICE = "모든 내용을 입력해주세요."
SUBMITTED_NOTICE = "기도 제목이 성공적으로 전달되었습니다."
KEPT_NOTICE = "기존 기도 제목을 유지합니다."
REPLACED_NOTICE = "새로운 기도 제목으로 변경되었습니다."
REPLACE_FAILED_NOTICE = "업데이트 중 오류가 발생했습니다."


class SubmissionState(str, Enum):
    """States of the submission workflow."""

    EDITING = "EDITING"
    CHECKING = "CHECKING"
    INSERTING = "INSERTING"
    CONFLICT = "CONFLICT"
    DONE = "DONE"


class ConflictChoice(str, Enum):
    """Ways out of a duplicate conflict."""

    KEEP_OLD = "KEEP_OLD"
    REPLACE_NEW = "REPLACE_NEW"
    ABANDON = "ABANDON"


@dataclass(frozen=True)
class Conflict:
    """An earlier submission with the same name, phone and audience."""

    existing: PrayerRecord
    candidate: PrayerDraft


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SubmissionWorkflow:
    """State machine behind the prayer request form."""

    repository: PrayerRepository
    clock: Callable[[], datetime] = _utcnow
    draft: PrayerDraft = field(default_factory=PrayerDraft)
    state: SubmissionState = SubmissionState.EDITING
    conflict: Conflict | None = None
    notice: str | None = None

    def edit(
        self,
        name: str | None = None,
        phone: str | None = None,
        content: str | None = None,
        is_public: bool | None = None,
    ) -> PrayerDraft:
        """Update form fields; the phone number is reformatted as typed."""
        self._require(SubmissionState.EDITING, "edit")
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = name
        if phone is not None:
            changes["phone"] = format_phone(phone)
        if content is not None:
            changes["content"] = content
        if is_public is not None:
            changes["is_public"] = is_public
        self.draft = replace(self.draft, **changes)
        return self.draft

    async def submit(self) -> SubmissionState:
        """Validate the form, check for duplicates and insert if unique."""
        self._require(SubmissionState.EDITING, "submit")
        try:
            _validate(self.draft)
        except ValidationError as exc:
            self.notice = str(exc)
            return self.state

        self.state = SubmissionState.CHECKING
        name, phone, is_public = self.draft.natural_key()
        try:
            matches = await asyncio.to_thread(
                self.repository.find_matching, name, phone, is_public
            )
        except StoreError as exc:
            _logger.warning("Duplicate check failed: %s", exc)
            return self._back_to_editing(exc)

        if matches:
            self.conflict = Conflict(existing=matches[0], candidate=self.draft)
            self.state = SubmissionState.CONFLICT
            return self.state

        self.state = SubmissionState.INSERTING
        try:
            await asyncio.to_thread(
                self.repository.insert, replace(self.draft, name=name, phone=phone)
            )
        except StoreError as exc:
            _logger.warning("Prayer insert failed: %s", exc)
            return self._back_to_editing(exc)

        self.state = SubmissionState.DONE
        self.notice = SUBMITTED_NOTICE
        return self.state

    async def resolve(self, choice: ConflictChoice) -> SubmissionState:
        """Settle a duplicate conflict with the submitter's choice."""
        self._require(SubmissionState.CONFLICT, "resolve")
        conflict = self.conflict
        if conflict is None:
            raise InvalidTransitionError("resolve", self.state.value)

        if choice is ConflictChoice.ABANDON:
            self.draft = conflict.candidate
            self.conflict = None
            self.state = SubmissionState.EDITING
            return self.state

        if choice is ConflictChoice.KEEP_OLD:
            self.conflict = None
            self.state = SubmissionState.DONE
            self.notice = KEPT_NOTICE
            return self.state

        try:
            await asyncio.to_thread(
                self.repository.replace_content,
                conflict.existing.id,
                content=conflict.candidate.content,
                is_public=conflict.candidate.is_public,
                created_at=self.clock(),
            )
        except StoreError as exc:
            _logger.warning(
                "Replacing prayer %s failed: %s", conflict.existing.id, exc
            )
            self.notice = REPLACE_FAILED_NOTICE
            return self.state

        self.conflict = None
        self.state = SubmissionState.DONE
        self.notice = REPLACED_NOTICE
        return self.state

    def pop_notice(self) -> str | None:
        """Return the pending notice and clear it."""
        notice, self.notice = self.notice, None
        return notice

    @property
    def is_done(self) -> bool:
        """True once the shell should leave the form."""
        return self.state is SubmissionState.DONE

    def _back_to_editing(self, exc: StoreError) -> SubmissionState:
        self.state = SubmissionState.EDITING
        self.notice = f"오류가 발생했습니다: {str(exc) or 'Unknown error'}"
        return self.state

    def _require(self, state: SubmissionState, action: str) -> None:
        if self.state is not state:
            raise InvalidTransitionError(action, self.state.value)


def _validate(draft: PrayerDraft) -> None:
    if not (draft.name.strip() and draft.phone.strip() and draft.content.strip()):
        raise ValidationError(MISSING_FIELDS_NOTICE)
