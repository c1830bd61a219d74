"""Translation of operation results into HTTP errors."""

from fastapi import HTTPException, status

from fieldreports.models.results import ErrorKind, OperationResult, AuthResult

ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    "invalid-input": status.HTTP_400_BAD_REQUEST,
    "invalid-credentials": status.HTTP_401_UNAUTHORIZED,
    "account-disabled": status.HTTP_403_FORBIDDEN,
    "not-authorized": status.HTTP_403_FORBIDDEN,
    "conflict": status.HTTP_409_CONFLICT,
    "not-implemented": status.HTTP_501_NOT_IMPLEMENTED,
    "transient-read-failure": status.HTTP_503_SERVICE_UNAVAILABLE,
    "write-failure": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_result(result: OperationResult | AuthResult) -> None:
    """Raise an HTTPException carrying the user-facing message if the result failed."""
    if result.success:
        return
    error = result.error or "write-failure"
    detail = result.message if isinstance(result, OperationResult) else result.reason
    raise HTTPException(status_code=ERROR_STATUS_CODES[error], detail=detail)


def created_id(result: OperationResult) -> str:
    """Get the id of the document a successful write produced."""
    raise_for_result(result)
    if result.id is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Write did not return an id",
        )
    return result.id
