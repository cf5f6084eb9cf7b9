"""FastAPI application factory."""

from datetime import date
from uuid import UUID

from fastapi import Cookie, Depends, FastAPI, Query, Request, Response

from laundry_queue.api.admin import router as admin_router
from laundry_queue.api.models import EntryCreate, StatusUpdate
from laundry_queue.api.responses import (
    serialize_entry,
    serialize_row,
    unwrap,
)
from laundry_queue.app_logging import configure_logging
from laundry_queue.containers import AppContainer
from laundry_queue.services.identity import SESSION_COOKIE_NAME, ensure_session_id

_SESSION_MAX_AGE = 60 * 60 * 24 * 365


def get_session_id(
    response: Response,
    queue_session_id: str | None = Cookie(default=None),
) -> str:
    """Return the caller's session token, issuing a cookie for new devices."""
    session_id = ensure_session_id(queue_session_id)
    if session_id != queue_session_id:
        response.set_cookie(
            SESSION_COOKIE_NAME,
            session_id,
            max_age=_SESSION_MAX_AGE,
            httponly=True,
            samesite="lax",
        )
    return session_id


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    app = FastAPI()
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/queue")
    async def queue_window(
        request: Request,
        floor: int,
        anchor_date: date | None = Query(default=None, alias="date"),
        session_id: str = Depends(get_session_id),
    ) -> dict[str, object]:
        """Return a floor's queue for a day and the two days before it."""
        service = request.app.state.container.queue_service
        anchor = anchor_date or service.today()
        window = unwrap(service.list_queue_for_window(floor, anchor))
        return {
            "floor": floor,
            "date": anchor.isoformat(),
            "today": [serialize_row(row, session_id) for row in window.today],
            "yesterday": [serialize_row(row, session_id) for row in window.yesterday],
            "day_before": [
                serialize_row(row, session_id) for row in window.day_before
            ],
        }

    @app.post("/queue/entries", status_code=201)
    async def add_entry(
        payload: EntryCreate,
        request: Request,
        session_id: str = Depends(get_session_id),
    ) -> dict[str, object]:
        """Sign the caller up for a floor's queue."""
        service = request.app.state.container.queue_service
        entry = unwrap(
            service.add_entry(
                floor=payload.floor,
                queue_date=payload.queue_date or service.today(),
                handle=payload.telegram_tag,
                room=payload.room,
                session_id=session_id,
            )
        )
        return {"entry": serialize_entry(entry)}

    @app.patch("/queue/entries/{entry_id}")
    async def change_status(
        entry_id: UUID,
        payload: StatusUpdate,
        request: Request,
        session_id: str = Depends(get_session_id),
    ) -> dict[str, object]:
        """Change the status of the caller's own entry."""
        service = request.app.state.container.queue_service
        entry = unwrap(service.change_status(entry_id, payload.status, session_id))
        return {"entry": serialize_entry(entry)}

    @app.delete("/queue/entries/{entry_id}")
    async def remove_entry(
        entry_id: UUID,
        request: Request,
        session_id: str = Depends(get_session_id),
    ) -> dict[str, str]:
        """Remove the caller's own entry."""
        service = request.app.state.container.queue_service
        unwrap(service.remove_entry(entry_id, session_id))
        return {"status": "ok"}

    return app
