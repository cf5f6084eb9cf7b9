"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from laundry_queue.api.models import AdminEntryCreate, StatusUpdate
from laundry_queue.api.responses import serialize_entry, serialize_row, unwrap

if TYPE_CHECKING:
    from laundry_queue.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/queue", dependencies=[Depends(require_admin)])
async def queue_for_date(
    request: Request,
    floor: int,
    queue_date: date | None = Query(default=None, alias="date"),
) -> dict[str, object]:
    """Return one floor's queue for a day ordered by number."""
    container: AppContainer = request.app.state.container
    service = container.queue_service
    day = queue_date or service.today()
    rows = unwrap(service.list_queue_for_date(floor, day))
    return {
        "floor": floor,
        "date": day.isoformat(),
        "entries": [serialize_row(row) for row in rows],
    }


@router.post("/queue/entries", status_code=201, dependencies=[Depends(require_admin)])
async def add_entry(payload: AdminEntryCreate, request: Request) -> dict[str, object]:
    """Add an entry on a resident's behalf."""
    container: AppContainer = request.app.state.container
    service = container.queue_service
    entry = unwrap(
        service.admin_add_entry(
            floor=payload.floor,
            queue_date=payload.queue_date or service.today(),
            handle=payload.telegram_tag,
            room=payload.room,
            status=payload.status,
        )
    )
    return {"entry": serialize_entry(entry)}


@router.patch("/queue/entries/{entry_id}", dependencies=[Depends(require_admin)])
async def change_status(
    entry_id: UUID, payload: StatusUpdate, request: Request
) -> dict[str, object]:
    """Change the status of any entry."""
    container: AppContainer = request.app.state.container
    entry = unwrap(
        container.queue_service.admin_change_status(entry_id, payload.status)
    )
    return {"entry": serialize_entry(entry)}


@router.delete("/queue/entries/{entry_id}", dependencies=[Depends(require_admin)])
async def remove_entry(entry_id: UUID, request: Request) -> dict[str, str]:
    """Remove any entry."""
    container: AppContainer = request.app.state.container
    unwrap(container.queue_service.admin_remove_entry(entry_id))
    return {"status": "ok"}
