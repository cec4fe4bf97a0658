"""
Authentication dependencies for FastAPI.
Resolves the caller context and enforces role requirements.
"""

import uuid
from typing import Annotated
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from timesheet_api.application.use_cases.base_use_case import UseCaseContext
from timesheet_api.domain.models.base import ValidationError
from timesheet_api.domain.models.user import UserRole
from timesheet_api.infrastructure.auth.jwt_handler import JWTHandler


# Security scheme
security = HTTPBearer(auto_error=False)

# Global instances
jwt_handler = JWTHandler()


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return jwt_handler


async def get_current_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> UseCaseContext:
    """
    FastAPI dependency building the caller context from the bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = jwt_handler.verify_token(credentials.credentials)
        role = jwt_handler.get_user_role(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
    return UseCaseContext(user_id=payload['sub'], role=role, request_id=request_id)


class RoleChecker:
    """Dependency class restricting an endpoint to a set of roles."""

    def __init__(self, *allowed_roles: UserRole):
        self.allowed_roles = allowed_roles

    async def __call__(
        self,
        context: Annotated[UseCaseContext, Depends(get_current_context)]
    ) -> UseCaseContext:
        if not context.has_role(*self.allowed_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return context


# Pre-configured role checkers
require_manager = RoleChecker(UserRole.MANAGER, UserRole.SUPER_ADMIN)

CurrentContext = Annotated[UseCaseContext, Depends(get_current_context)]
ManagerContext = Annotated[UseCaseContext, Depends(require_manager)]
