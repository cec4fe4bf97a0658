"""
JWT token handler.
Validates bearer tokens and extracts the caller's identity and role.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timedelta
from jose import JWTError, jwt as jose_jwt

from timesheet_api.config import get_settings
from timesheet_api.domain.models.base import ValidationError
from timesheet_api.domain.models.user import UserRole


class JWTHandler:
    """Handles JWT token validation and user extraction."""

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self.settings = get_settings()
        self.jwt_secret = secret or self.settings.jwt_secret_key
        self.jwt_algorithm = algorithm or self.settings.jwt_algorithm

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string, with or without the ``Bearer`` prefix

        Returns:
            Dict containing token payload

        Raises:
            ValidationError: If token is invalid, expired or incomplete
        """
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jose_jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_exp": True, "verify_aud": False}
            )
        except JWTError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}")

        if 'sub' not in payload:
            raise ValidationError("Token missing user ID (sub claim)")

        if 'exp' not in payload:
            raise ValidationError("Token missing expiration (exp claim)")

        return payload

    def get_user_id(self, token: str) -> str:
        """Extract user ID from JWT token."""
        payload = self.verify_token(token)
        return payload['sub']

    def get_user_role(self, payload: Dict[str, Any]) -> UserRole:
        """
        Read the role claim of a verified payload.
        Tokens without a role act as employees.
        """
        role = payload.get('role') or UserRole.EMPLOYEE.value
        try:
            return UserRole(str(role).upper())
        except ValueError:
            raise ValidationError(f"Unknown role: {role}")

    def generate_token(
        self,
        user_id: str,
        role: UserRole = UserRole.EMPLOYEE,
        email: Optional[str] = None,
        expires_minutes: Optional[int] = None
    ) -> str:
        """
        Generate a signed access token.
        Used by the seed command and by tests.
        """
        now = datetime.utcnow()
        expire = now + timedelta(
            minutes=expires_minutes or self.settings.jwt_access_token_expire_minutes
        )

        payload = {
            "sub": user_id,
            "role": UserRole(role).value,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
        if email:
            payload["email"] = email

        return jose_jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)
