from .user import User, UserUpdate, AuthorizedGoogleEmail
from .report import ReportData, SavedReport, Visit
from .results import ErrorKind, OperationResult, AuthResult

__all__ = [
    "User",
    "UserUpdate",
    "AuthorizedGoogleEmail",
    "ReportData",
    "SavedReport",
    "Visit",
    "ErrorKind",
    "OperationResult",
    "AuthResult",
]
