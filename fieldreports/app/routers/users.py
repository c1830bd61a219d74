"""User administration routes (master only)."""

from fastapi import APIRouter, Depends, HTTPException

from fieldreports.db.users import UserDirectory
from fieldreports.models.user import User, UserUpdate
from fieldreports.models import results
from fieldreports.app.auth import require_master
from fieldreports.app.dependencies import get_user_directory
from fieldreports.app.errors import created_id, raise_for_result
from fieldreports.app.models import (
    CreateUserRequest,
    CreatedResponse,
    PasswordChangeRequest,
    DeleteUserResponse,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[User])
def read_users(
    _user: User = Depends(require_master),
    directory: UserDirectory = Depends(get_user_directory),
) -> list[User]:
    return directory.get_users()


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_user(
    request: CreateUserRequest,
    _user: User = Depends(require_master),
    directory: UserDirectory = Depends(get_user_directory),
) -> CreatedResponse:
    """Register a user with a login account and an active, non-master profile."""
    result = await directory.add_user(
        request.username, request.email, request.name, request.password
    )
    return CreatedResponse(id=created_id(result))


@router.patch("/{user_id}", response_model=User)
def update_user(
    user_id: str,
    request: UserUpdate,
    _user: User = Depends(require_master),
    directory: UserDirectory = Depends(get_user_directory),
) -> User:
    """Patch a profile, e.g. `{"is_active": false}` to disable an account."""
    if directory.get_user_by_id(user_id) is None:
        raise HTTPException(status_code=404, detail=f"User with ID '{user_id}' not found")

    result = directory.update_user(user_id, request)
    raise_for_result(result)
    updated = directory.get_user_by_id(user_id)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"User with ID '{user_id}' not found")
    return updated


@router.delete("/{user_id}", response_model=DeleteUserResponse)
def delete_user(
    user_id: str,
    _user: User = Depends(require_master),
    directory: UserDirectory = Depends(get_user_directory),
) -> DeleteUserResponse:
    """Delete a profile and all of its reports.

    The login account is not deleted; the response carries that reminder.
    """
    result = directory.delete_user(user_id)
    raise_for_result(result)
    return DeleteUserResponse(
        message=f"User '{user_id}' and their reports have been deleted",
        warning=results.USER_DELETE_WARNING,
    )


@router.put("/{user_id}/password")
async def change_user_password(
    user_id: str,
    request: PasswordChangeRequest,
    _user: User = Depends(require_master),
    directory: UserDirectory = Depends(get_user_directory),
) -> dict[str, str]:
    """Change a user's password.

    Input is checked, but the change itself needs a trusted server context
    and always answers 501.
    """
    if len(request.new_password) < results.MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail=results.PASSWORD_MIN_LENGTH)
    if request.new_password != request.confirm_password:
        raise HTTPException(status_code=400, detail=results.PASSWORD_MISMATCH)

    result = await directory.update_user_password(user_id, request.new_password)
    raise_for_result(result)
    return {"message": "Password updated"}
