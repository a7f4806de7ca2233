"""Pydantic schemas package."""

from user_service.schemas.user import RoleResponse, UserListResponse, UserResponse

__all__ = [
    "RoleResponse",
    "UserResponse",
    "UserListResponse",
]
