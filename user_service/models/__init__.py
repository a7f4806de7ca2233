"""Database models package."""

from user_service.models.role import Role
from user_service.models.user import User
from user_service.models.user_role import user_roles

__all__ = ["User", "Role", "user_roles"]
