"""Role-gated view selection."""

from fastapi import APIRouter, Depends

from fieldreports.session.manager import SessionManager
from fieldreports.session.navigation import Page, ViewRouter
from fieldreports.app.auth import get_session_manager
from fieldreports.app.models import ViewResponse

router = APIRouter(prefix="/views", tags=["views"])


@router.get("/{page}", response_model=ViewResponse)
async def resolve_view(
    page: Page,
    manager: SessionManager = Depends(get_session_manager),
) -> ViewResponse:
    """Get the screen the caller lands on when navigating to `page`.

    Logged-out callers get `login`; non-masters asking for user management
    get `landing`.
    """
    view_router = ViewRouter(manager)
    try:
        return ViewResponse(screen=view_router.navigate_to(page))
    finally:
        view_router.close()
