"""Google sign-in allow-list routes (master only)."""

from fastapi import APIRouter, Depends

from fieldreports.db.users import UserDirectory
from fieldreports.models.user import User, AuthorizedGoogleEmail
from fieldreports.app.auth import require_master
from fieldreports.app.dependencies import get_user_directory
from fieldreports.app.errors import raise_for_result
from fieldreports.app.models import AuthorizeEmailRequest

router = APIRouter(prefix="/google-emails", tags=["google-emails"])


@router.get("", response_model=list[AuthorizedGoogleEmail])
def read_authorized_emails(
    _user: User = Depends(require_master),
    directory: UserDirectory = Depends(get_user_directory),
) -> list[AuthorizedGoogleEmail]:
    return directory.get_authorized_google_emails()


@router.post("", status_code=201)
def authorize_email(
    request: AuthorizeEmailRequest,
    _user: User = Depends(require_master),
    directory: UserDirectory = Depends(get_user_directory),
) -> dict[str, str]:
    """Allow a Google account to sign in. Emails are stored lowercased."""
    result = directory.authorize_google_email(request.email)
    raise_for_result(result)
    return {"email": result.id or request.email.lower()}


@router.delete("/{email}")
def revoke_email(
    email: str,
    _user: User = Depends(require_master),
    directory: UserDirectory = Depends(get_user_directory),
) -> dict[str, str]:
    result = directory.revoke_google_email(email)
    raise_for_result(result)
    return {"message": f"Access revoked for {email.lower()}"}
