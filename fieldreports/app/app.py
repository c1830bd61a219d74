# This file loads env variables and must thus be imported before anything else.
from . import env_loader  # noqa: F401
from .env_loader import get_current_environment

import os
import logging

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from fieldreports.models.user import User
from .routers import (
    auth_router,
    report_router,
    editor_router,
    user_router,
    google_email_router,
    view_router,
)
from .models import EnvironmentResponse
from .auth import require_user

"""FastAPI application setup for the field report service.

Exposes routes for signing in, writing and exporting visit reports, and
master-only user administration. This module configures CORS and logging.
"""

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:5173",  # Vite dev server
    "http://127.0.0.1:5173",
]

logger = logging.getLogger(__name__)


def get_allowed_origins() -> list[str]:
    """Get CORS origins from `CORS_ALLOWED_ORIGINS` (comma-separated)."""
    raw = os.getenv("CORS_ALLOWED_ORIGINS")
    if not raw:
        return DEFAULT_ALLOWED_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app = FastAPI(title="Field Reports")
app.include_router(auth_router)
app.include_router(report_router)
app.include_router(editor_router)
app.include_router(user_router)
app.include_router(google_email_router)
app.include_router(view_router)
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging() -> None:
    """Log WARNING and up from libraries; `LOG_LEVEL` tunes the service's own loggers."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s - %(filename)s:%(lineno)d",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    level_name = os.getenv("LOG_LEVEL")
    if not level_name:
        return
    if level_name.upper() not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level_name}")
    logging.getLogger("fieldreports").setLevel(LOG_LEVELS[level_name.upper()])


configure_logging()
logger.info(f"Field report service starting in {get_current_environment()} environment")


@app.get("/health")
def health_check() -> dict[str, str]:
    """Liveness probe; needs neither a session nor the database."""
    return {"status": "healthy"}


@app.get("/environment", response_model=EnvironmentResponse)
def get_environment(_user: User = Depends(require_user)) -> EnvironmentResponse:
    """Get the current environment configuration."""
    environment = get_current_environment()
    return EnvironmentResponse(environment=environment)
