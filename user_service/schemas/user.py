"""User and role schemas."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal

# Responses are serialized with PascalCase keys: {"Id": 1, "Name": "Ann", ...}
_RESPONSE_CONFIG = ConfigDict(
    from_attributes=True,
    alias_generator=to_pascal,
    populate_by_name=True,
)


class RoleResponse(BaseModel):
    """Role response schema."""

    model_config = _RESPONSE_CONFIG

    id: int
    name: str


class UserResponse(BaseModel):
    """User response schema with the roles the user holds."""

    model_config = _RESPONSE_CONFIG

    id: int
    name: str
    age: int
    email: str
    roles: list[RoleResponse] = []


class UserListResponse(BaseModel):
    """One page of the user listing."""

    model_config = _RESPONSE_CONFIG

    total_items: int
    page: int
    page_size: int
    users: list[UserResponse]
