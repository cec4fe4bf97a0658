"""
Authentication infrastructure module.
Handles JWT validation and role-based authorization.
"""

from .jwt_handler import JWTHandler
from .dependencies import (
    get_jwt_handler,
    get_current_context,
    RoleChecker,
    require_manager,
    CurrentContext,
    ManagerContext,
)

__all__ = [
    "JWTHandler",
    "get_jwt_handler",
    "get_current_context",
    "RoleChecker",
    "require_manager",
    "CurrentContext",
    "ManagerContext",
]
