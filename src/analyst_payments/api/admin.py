"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from analyst_payments.containers import AppContainer

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


@router.get("/bookings", dependencies=[Depends(require_admin)])
async def list_bookings(request: Request, limit: int = 20) -> dict[str, object]:
    """Return recent bookings."""
    container: AppContainer = request.app.state.container
    return {"bookings": container.admin_service.list_bookings(limit)}


@router.get("/registrations", dependencies=[Depends(require_admin)])
async def list_registrations(request: Request, limit: int = 20) -> dict[str, object]:
    """Return recent bootcamp registrations."""
    container: AppContainer = request.app.state.container
    return {"registrations": container.admin_service.list_registrations(limit)}
