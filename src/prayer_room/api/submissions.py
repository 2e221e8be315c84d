"""Prayer request form endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, status

from prayer_room.api.models import ConflictResolution, PrayerForm
from prayer_room.services.submission import SubmissionState, SubmissionWorkflow

if TYPE_CHECKING:
    from prayer_room.containers import AppContainer

router = APIRouter(prefix="/submissions", tags=["submissions"])

_AUDIENCE_LABELS = {True: "전체 공개", False: "교역자만 보기"}
_ACTIONS = {
    SubmissionState.EDITING: ["edit", "submit"],
    SubmissionState.CONFLICT: ["resolve"],
}


@router.post("")
async def start_submission(
    request: Request, form: PrayerForm | None = None
) -> dict[str, object]:
    """Open a new prayer request form."""
    container: AppContainer = request.app.state.container
    workflow = container.new_submission()
    if form is not None:
        _apply_form(workflow, form)
    workflow_id = container.submissions.add(workflow)
    return _serialize(workflow_id, workflow)


@router.get("/{workflow_id}")
async def get_submission(workflow_id: UUID, request: Request) -> dict[str, object]:
    """Return the current state of a form."""
    workflow = _lookup(request, workflow_id)
    return _serialize(workflow_id, workflow)


@router.patch("/{workflow_id}")
async def edit_submission(
    workflow_id: UUID, form: PrayerForm, request: Request
) -> dict[str, object]:
    """Update form fields."""
    workflow = _lookup(request, workflow_id)
    _apply_form(workflow, form)
    return _serialize(workflow_id, workflow)


@router.post("/{workflow_id}/submit")
async def submit_submission(workflow_id: UUID, request: Request) -> dict[str, object]:
    """Submit the form, which may end in a duplicate conflict."""
    workflow = _lookup(request, workflow_id)
    await workflow.submit()
    return _serialize(workflow_id, workflow)


@router.post("/{workflow_id}/resolve")
async def resolve_submission(
    workflow_id: UUID, resolution: ConflictResolution, request: Request
) -> dict[str, object]:
    """Settle a duplicate conflict."""
    workflow = _lookup(request, workflow_id)
    await workflow.resolve(resolution.choice)
    return _serialize(workflow_id, workflow)


def _lookup(request: Request, workflow_id: UUID) -> SubmissionWorkflow:
    container: AppContainer = request.app.state.container
    workflow = container.submissions.get(workflow_id)
    if not isinstance(workflow, SubmissionWorkflow):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return workflow


def _apply_form(workflow: SubmissionWorkflow, form: PrayerForm) -> None:
    workflow.edit(
        name=form.name,
        phone=form.phone,
        content=form.content,
        is_public=form.is_public,
    )


def _serialize(workflow_id: UUID, workflow: SubmissionWorkflow) -> dict[str, object]:
    draft = workflow.draft
    conflict = workflow.conflict
    return {
        "workflow_id": str(workflow_id),
        "state": workflow.state.value,
        "actions": _ACTIONS.get(workflow.state, []),
        "done": workflow.is_done,
        "notice": workflow.pop_notice(),
        "form": {
            "name": draft.name,
            "phone": draft.phone,
            "content": draft.content,
            "is_public": draft.is_public,
        },
        "conflict": {
            "audience": _AUDIENCE_LABELS[conflict.candidate.is_public],
            "existing": {
                "content": conflict.existing.content,
                "created_at": conflict.existing.created_at.isoformat()
                if conflict.existing.created_at
                else None,
            },
            "candidate": {"content": conflict.candidate.content},
        }
        if conflict
        else None,
    }
