"""User/role association table."""

from sqlalchemy import Column, ForeignKey, Integer, Table

from user_service.database import Base

# Composite primary key keeps a role from being attached to a user twice
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)
