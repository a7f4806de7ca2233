"""Role model and reference data."""

import logging

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import Session

from user_service.database import Base

logger = logging.getLogger(__name__)

# Fixed reference data, ids are part of the public API
ROLE_SEED: dict[int, str] = {
    1: "User",
    2: "Admin",
    3: "Support",
    4: "SuperAdmin",
}

DEFAULT_ROLE_ID = 1


class Role(Base):
    """Role that can be attached to users."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(50), unique=True, nullable=False)

    def __repr__(self) -> str:
        """String representation of Role."""
        return f"<Role(id={self.id}, name={self.name})>"


def seed_roles(db: Session) -> int:
    """Insert any missing reference roles.

    Args:
        db: Database session

    Returns:
        Number of roles inserted
    """
    existing = {role_id for (role_id,) in db.query(Role.id).all()}
    missing = [Role(id=role_id, name=name) for role_id, name in ROLE_SEED.items() if role_id not in existing]

    if missing:
        db.add_all(missing)
        db.commit()
        logger.info(f"Seeded {len(missing)} roles")

    return len(missing)
