"""Authentication package for the application."""
from .service import (
    AuthService,
    IdentityResolver,
    get_current_user,
    get_current_user_id,
    get_optional_user_id,
    require_owner,
    require_role,
    resolve_identity,
)
from .router import router as auth_router

__all__ = [
    'AuthService',
    'IdentityResolver',
    'get_current_user',
    'get_current_user_id',
    'get_optional_user_id',
    'require_owner',
    'require_role',
    'resolve_identity',
    'auth_router'
]
