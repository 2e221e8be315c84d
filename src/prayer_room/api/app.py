"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from prayer_room.api.room import router as room_router
from prayer_room.api.submissions import router as submissions_router
from prayer_room.app_logging import configure_logging
from prayer_room.containers import AppContainer
from prayer_room.domain.errors import InvalidTransitionError
from prayer_room.services.phone import format_phone


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="하남교구 공유 기도실")
    app.state.container = container

    app.include_router(submissions_router)
    app.include_router(room_router)

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        logger.info("Rejected %s on %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "state": exc.state},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/phone/format")
    async def phone_format(value: str = "") -> dict[str, str]:
        """Reformat a phone number as the submitter types it."""
        return {"phone": format_phone(value)}

    return app
