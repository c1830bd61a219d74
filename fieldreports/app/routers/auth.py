"""Sign-in, sign-out, and session routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from fieldreports.models.user import User
from fieldreports.session.manager import SessionManager
from fieldreports.app.auth import get_session_manager, require_user
from fieldreports.app.errors import raise_for_result
from fieldreports.app.models import (
    LoginRequest,
    GoogleLoginRequest,
    LoginResponse,
    SessionResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _login_response(manager: SessionManager) -> LoginResponse:
    session = manager.identity.current_session
    if manager.user is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Session not established",
        )
    return LoginResponse(
        success=True,
        user=manager.user,
        id_token=session.id_token if session else None,
        refresh_token=session.refresh_token if session else None,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> LoginResponse:
    """Sign in with username and password.

    Unknown usernames and wrong passwords fail with the same message.
    """
    result = await manager.login(request.username, request.password)
    raise_for_result(result)
    return _login_response(manager)


@router.post("/google", response_model=LoginResponse)
async def login_with_google(
    request: GoogleLoginRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> LoginResponse:
    """Sign in with a Google ID token. The email must be on the allow-list."""
    result = await manager.login_with_google(request.credential)
    raise_for_result(result)
    return _login_response(manager)


@router.post("/logout")
async def logout(
    _user: User = Depends(require_user),
    manager: SessionManager = Depends(get_session_manager),
) -> dict[str, str]:
    """End the session. The client must discard its tokens."""
    await manager.logout()
    return {"status": "signed_out"}


@router.get("/session", response_model=SessionResponse)
async def read_session(
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    """Get the caller's access-control state without requiring a login."""
    return SessionResponse(
        user=manager.user,
        is_logged_in=manager.is_logged_in,
        is_master_user=manager.is_master_user,
        is_auth_loading=manager.is_auth_loading,
    )
