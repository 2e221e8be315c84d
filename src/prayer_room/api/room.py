"""Prayer room endpoints for browsing public prayers."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from prayer_room.services.browsing import BrowsingSession, BrowsingState

if TYPE_CHECKING:
    from prayer_room.containers import AppContainer

router = APIRouter(prefix="/room", tags=["room"])

_DEVICE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365 * 5


def device_id(request: Request, response: Response) -> str:
    """Identify the browsing device, issuing a cookie on first visit."""
    container: AppContainer = request.app.state.container
    cookie_name = container.settings.device_cookie_name
    existing = request.cookies.get(cookie_name)
    if existing:
        return existing
    issued = uuid4().hex
    response.set_cookie(
        cookie_name,
        issued,
        max_age=_DEVICE_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
    )
    return issued


@router.post("")
async def open_room(
    request: Request, device: str = Depends(device_id)
) -> dict[str, object]:
    """Load public prayers and show the newest one."""
    container: AppContainer = request.app.state.container
    session = container.new_room(device)
    await session.load()
    session_id = container.rooms.add(session)
    return _serialize(session_id, session)


@router.get("/{session_id}")
async def get_room(session_id: UUID, request: Request) -> dict[str, object]:
    """Return the current card or end-of-list state."""
    session = _lookup(request, session_id)
    return _serialize(session_id, session)


@router.post("/{session_id}/next")
async def next_prayer(session_id: UUID, request: Request) -> dict[str, object]:
    """Move to the next prayer."""
    session = _lookup(request, session_id)
    session.next()
    return _serialize(session_id, session)


@router.post("/{session_id}/restart")
async def restart_room(session_id: UUID, request: Request) -> dict[str, object]:
    """Go back to the first prayer without fetching again."""
    session = _lookup(request, session_id)
    session.restart()
    return _serialize(session_id, session)


@router.post("/{session_id}/toggle")
async def toggle_prayed(session_id: UUID, request: Request) -> dict[str, object]:
    """Mark or unmark the current prayer as prayed for."""
    session = _lookup(request, session_id)
    await session.toggle_prayed()
    return _serialize(session_id, session)


@router.post("/{session_id}/reload")
async def reload_room(session_id: UUID, request: Request) -> dict[str, object]:
    """Fetch public prayers again after a failed or empty load."""
    session = _lookup(request, session_id)
    await session.reload()
    return _serialize(session_id, session)


def _lookup(request: Request, session_id: UUID) -> BrowsingSession:
    container: AppContainer = request.app.state.container
    session = container.rooms.get(session_id)
    if not isinstance(session, BrowsingSession):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return session


def _actions(session: BrowsingSession) -> list[str]:
    if session.state is BrowsingState.VIEWING:
        return ["next"] if session.updating else ["next", "toggle"]
    if session.state is BrowsingState.EXHAUSTED:
        return ["restart", "write"]
    if session.state is BrowsingState.EMPTY:
        return ["reload", "write"]
    return []


def _serialize(session_id: UUID, session: BrowsingSession) -> dict[str, object]:
    card = session.current_card()
    return {
        "session_id": str(session_id),
        "state": session.state.value,
        "actions": _actions(session),
        "notice": session.pop_notice(),
        "total": len(session.records),
        "card": {
            "prayer_id": card.prayer_id,
            "position": card.position,
            "total": card.total,
            "initial": card.initial,
            "content": card.content,
            "created_at": card.created_at.isoformat() if card.created_at else None,
            "prayed_count": card.prayed_count,
            "prayed": card.prayed,
        }
        if card
        else None,
    }
