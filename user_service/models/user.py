"""User model."""

from sqlalchemy import CheckConstraint, Column, Integer, String
from sqlalchemy.orm import relationship

from user_service.database import Base
from user_service.models.user_role import user_roles


class User(Base):
    """User record managed through the users API."""

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("age > 0", name="ck_users_age_positive"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Relationships
    roles = relationship(
        "Role",
        secondary=user_roles,
        order_by="Role.id",
    )

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, email={self.email}, name={self.name})>"
