"""
User mapper for converting between domain entities and database models.
"""

from timesheet_api.domain.models.user import User, UserRole
from timesheet_api.infrastructure.db.models import UserModel


class UserMapper:
    """Maps between User domain entity and UserModel database model."""

    def domain_to_model(self, user: User) -> UserModel:
        """Convert User domain entity to UserModel."""
        return UserModel(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            manager_id=user.manager_id,
            position=user.position,
            department_name=user.department_name,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def model_to_domain(self, model: UserModel) -> User:
        """Convert UserModel to User domain entity."""
        return User(
            id=model.id,
            email=model.email,
            first_name=model.first_name or "",
            last_name=model.last_name or "",
            role=UserRole(model.role) if model.role else UserRole.EMPLOYEE,
            manager_id=model.manager_id,
            position=model.position,
            department_name=model.department_name,
            is_active=model.is_active if model.is_active is not None else True,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
