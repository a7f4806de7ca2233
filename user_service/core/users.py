"""User persistence: listing queries, CRUD and role assignment."""

import logging
from dataclasses import dataclass

from sqlalchemy import false
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, selectinload

from user_service.models.role import DEFAULT_ROLE_ID, ROLE_SEED, Role
from user_service.models.user import User

logger = logging.getLogger(__name__)

MIN_ROLE_ID = min(ROLE_SEED)
MAX_ROLE_ID = max(ROLE_SEED)

# Largest value an Integer column holds on every supported backend
MAX_COLUMN_INT = 2**31 - 1

# Public sort keys mapped to columns, matched case-insensitively
SORTABLE_COLUMNS = {
    "id": User.id,
    "name": User.name,
    "age": User.age,
    "email": User.email,
}


class UserServiceError(Exception):
    """Base exception for user operations."""


class UserValidationError(UserServiceError):
    """Raised when required user fields are missing or invalid."""


class UserConflictError(UserServiceError):
    """Raised when an email is already taken by another user."""


class UserNotFoundError(UserServiceError):
    """Raised when no user matches the requested id."""


class RoleNotFoundError(UserServiceError):
    """Raised when a role id is outside the seeded range or missing."""


@dataclass
class UserFilters:
    """Optional predicates applied to the user listing."""

    name: str | None = None
    age: int | None = None
    email: str | None = None
    role_name: str | None = None


@dataclass
class UserPage:
    """A page of users together with the unpaged match count."""

    total_items: int
    page: int
    page_size: int
    users: list[User]


def _users_with_roles(db: Session) -> Query:
    return db.query(User).options(selectinload(User.roles))


def apply_filters(query: Query, filters: UserFilters) -> Query:
    """Narrow a user query with the provided filters.

    Empty strings are treated the same as missing values.

    Args:
        query: Query over ``User``
        filters: Filter values

    Returns:
        Query: Filtered query
    """
    if filters.name:
        query = query.filter(User.name.contains(filters.name, autoescape=True))
    if filters.age is not None:
        if abs(filters.age) > MAX_COLUMN_INT:
            query = query.filter(false())
        else:
            query = query.filter(User.age == filters.age)
    if filters.email:
        query = query.filter(User.email.contains(filters.email, autoescape=True))
    if filters.role_name:
        query = query.filter(User.roles.any(Role.name == filters.role_name))
    return query


def apply_sort(query: Query, sort_by: str, sort_order: str) -> Query:
    """Order a user query by one of the sortable columns.

    Unknown ``sort_by`` values fall back to ``Id`` and anything other than
    ``desc`` sorts ascending. ``Id`` always breaks ties so pages are stable.

    Args:
        query: Query over ``User``
        sort_by: Column name (Id, Name, Age, Email)
        sort_order: ``asc`` or ``desc``

    Returns:
        Query: Ordered query
    """
    column = SORTABLE_COLUMNS.get((sort_by or "").strip().lower(), User.id)
    descending = (sort_order or "").strip().lower() == "desc"

    ordering = [column.desc() if descending else column.asc()]
    if column is not User.id:
        ordering.append(User.id.desc() if descending else User.id.asc())
    return query.order_by(*ordering)


def list_users(
    db: Session,
    page: int = 1,
    page_size: int = 10,
    sort_by: str = "Id",
    sort_order: str = "asc",
    filters: UserFilters | None = None,
) -> UserPage:
    """Return one page of users matching the filters.

    The total is counted before pagination, so it does not depend on
    ``page`` or ``page_size``.

    Args:
        db: Database session
        page: 1-based page number
        page_size: Number of users per page
        sort_by: Column to sort by
        sort_order: ``asc`` or ``desc``
        filters: Optional listing filters

    Returns:
        UserPage: Total match count, echoed paging values and the users
    """
    query = apply_filters(_users_with_roles(db), filters or UserFilters())

    total_items = query.count()
    offset = (page - 1) * page_size

    # Pages past the end are empty without a row query
    if offset >= total_items:
        users = []
    else:
        users = apply_sort(query, sort_by, sort_order).offset(offset).limit(page_size).all()

    return UserPage(total_items=total_items, page=page, page_size=page_size, users=users)


def get_user(db: Session, user_id: int) -> User:
    """Fetch a user with roles by id.

    Raises:
        UserNotFoundError: If the id is not positive or no user matches
    """
    if user_id <= 0:
        raise UserNotFoundError("User id must be a positive integer")
    if user_id > MAX_COLUMN_INT:
        raise UserNotFoundError(f"User {user_id} not found")

    logger.info(f"Looking up user with id: {user_id}")
    user = _users_with_roles(db).filter(User.id == user_id).first()

    if user is None:
        raise UserNotFoundError(f"User {user_id} not found")

    logger.info(f"User {user_id} found")
    return user


def _is_stored_id(user_id: int) -> bool:
    return 0 < user_id <= MAX_COLUMN_INT


def _email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return db.query(query.exists()).scalar()


def _commit(db: Session, email: str | None) -> None:
    """Commit, turning a unique-email violation into a conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Rejected write for email {email}: {e.orig}")
        raise UserConflictError("A user with this email already exists") from e


def create_user(
    db: Session,
    name: str | None,
    age: int | None,
    email: str | None,
    role_id: int = DEFAULT_ROLE_ID,
) -> User:
    """Create a user holding exactly one role.

    Args:
        db: Database session
        name: Non-empty display name
        age: Positive age
        email: Non-empty email, unique across users
        role_id: Id of the role to attach

    Returns:
        User: The persisted user with its id assigned

    Raises:
        UserValidationError: If a required field is missing or invalid
        UserConflictError: If the email is already registered
        RoleNotFoundError: If ``role_id`` does not resolve to a role
    """
    if not name or not email or age is None or age <= 0 or age > MAX_COLUMN_INT:
        raise UserValidationError("Not all required fields are filled in")

    if _email_taken(db, email):
        logger.warning(f"Rejected creation, email already registered: {email}")
        raise UserConflictError("A user with this email already exists")

    role = db.get(Role, role_id) if MIN_ROLE_ID <= role_id <= MAX_ROLE_ID else None
    if role is None:
        raise RoleNotFoundError(f"Role {role_id} does not exist")

    user = User(name=name, age=age, email=email, roles=[role])
    db.add(user)
    _commit(db, email)
    db.refresh(user)

    logger.info(f"Created user {user.id} with name: {name}, age: {age}, email: {email} and role: {role.name}")
    return user


def update_user(
    db: Session,
    user_id: int,
    name: str | None = None,
    age: int | None = None,
    email: str | None = None,
) -> User:
    """Partially update a user.

    Empty strings and a zero or missing age leave the stored value untouched.

    Raises:
        UserNotFoundError: If no user matches ``user_id``
        UserValidationError: If ``age`` is negative
        UserConflictError: If ``email`` belongs to another user
    """
    if not _is_stored_id(user_id):
        raise UserNotFoundError("User not found")

    user = _users_with_roles(db).filter(User.id == user_id).first()
    if user is None:
        raise UserNotFoundError("User not found")

    if age is not None and (age < 0 or age > MAX_COLUMN_INT):
        raise UserValidationError("Age must be a positive integer")

    if email and _email_taken(db, email, exclude_user_id=user_id):
        logger.warning(f"Rejected update of user {user_id}, email already registered: {email}")
        raise UserConflictError("A user with this email already exists")

    if name:
        user.name = name
    if age:
        user.age = age
    if email:
        user.email = email

    _commit(db, email)
    db.refresh(user)

    logger.info(f"Information about user {user_id} updated")
    return user


def delete_user(db: Session, user_id: int) -> None:
    """Hard delete a user and its role associations.

    Raises:
        UserNotFoundError: If no user matches ``user_id``
    """
    user = db.get(User, user_id) if _is_stored_id(user_id) else None
    if user is None:
        raise UserNotFoundError("User not found")

    db.delete(user)
    db.commit()

    logger.info(f"User with id: {user_id} deleted")


def add_role_to_user(db: Session, user_id: int, role_id: int) -> User:
    """Attach a seeded role to a user.

    Attaching a role the user already holds is a no-op.

    Raises:
        UserNotFoundError: If the id is not positive or no user matches
        RoleNotFoundError: If ``role_id`` is outside the seeded range or missing
    """
    if not _is_stored_id(user_id):
        raise UserNotFoundError("User not found")

    if role_id < MIN_ROLE_ID or role_id > MAX_ROLE_ID:
        raise RoleNotFoundError("Role does not exist")

    user = _users_with_roles(db).filter(User.id == user_id).first()
    if user is None:
        raise UserNotFoundError("User not found")

    role = db.get(Role, role_id)
    if role is None:
        raise RoleNotFoundError("Role does not exist")

    if role in user.roles:
        logger.info(f"User {user_id} already has role {role.name}")
        return user

    user.roles.append(role)
    try:
        db.commit()
    except IntegrityError:
        # Another request attached the same role first
        db.rollback()
        db.refresh(user)
        if role not in user.roles:
            raise
        logger.info(f"User {user_id} already has role {role.name}")
        return user

    db.refresh(user)
    logger.info(f"Role {role.name} added to user with id - {user_id}")
    return user
