import datetime
from typing import Optional

from pydantic import BaseModel

from fieldreports.models.user import User
from fieldreports.session.navigation import Screen
from .env_loader import EnvironmentName


class LoginRequest(BaseModel):
    """Username/password sign-in."""

    username: str
    password: Optional[str] = None


class GoogleLoginRequest(BaseModel):
    """Google sign-in with the ID token returned by the provider's popup.

    A missing credential means the user closed the popup.
    """

    credential: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool
    user: User
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None


class SessionResponse(BaseModel):
    """The caller's access-control state."""

    user: Optional[User] = None
    is_logged_in: bool
    is_master_user: bool
    is_auth_loading: bool


class ReportRequest(BaseModel):
    """Body for creating or replacing a report."""

    date: datetime.date
    text: str


class NewDraftRequest(BaseModel):
    date: Optional[datetime.date] = None


class ChangeDateRequest(BaseModel):
    text: str
    date: datetime.date
    report_id: Optional[str] = None


class CreatedResponse(BaseModel):
    id: str


class CreateUserRequest(BaseModel):
    username: str = ""
    email: str = ""
    name: str = ""
    password: Optional[str] = None


class PasswordChangeRequest(BaseModel):
    new_password: str
    confirm_password: str


class DeleteUserResponse(BaseModel):
    """Deletion outcome plus the reminder that the login account remains."""

    message: str
    warning: str


class AuthorizeEmailRequest(BaseModel):
    email: str


class ViewResponse(BaseModel):
    screen: Screen


class EnvironmentResponse(BaseModel):
    """Response model for the environment endpoint."""

    environment: EnvironmentName
