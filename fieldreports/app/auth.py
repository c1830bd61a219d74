"""Authentication and role-based authorization."""

from .oauth import (
    validate_id_token,
    get_session_manager,
    get_current_user,
    require_user,
    require_master,
)

# Export for use in routers
__all__ = [
    "validate_id_token",
    "get_session_manager",
    "get_current_user",
    "require_user",
    "require_master",
]
