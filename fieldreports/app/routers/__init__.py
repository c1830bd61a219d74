from .auth import router as auth_router
from .reports import router as report_router
from .editor import router as editor_router
from .users import router as user_router
from .google_emails import router as google_email_router
from .views import router as view_router

__all__ = [
    "auth_router",
    "report_router",
    "editor_router",
    "user_router",
    "google_email_router",
    "view_router",
]
