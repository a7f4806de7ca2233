"""Users router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from user_service.config import settings
from user_service.core.dependencies import get_token_subject
from user_service.core.users import (
    RoleNotFoundError,
    UserConflictError,
    UserFilters,
    UserNotFoundError,
    UserServiceError,
    UserValidationError,
    add_role_to_user,
    create_user,
    delete_user,
    get_user,
    list_users,
    update_user,
)
from user_service.database import get_db
from user_service.models.role import DEFAULT_ROLE_ID, ROLE_SEED
from user_service.schemas.user import UserListResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/User",
    tags=["users"],
    dependencies=[Depends(get_token_subject)],
)

ROLES_DESCRIPTION = "Roles and their ids: " + "; ".join(
    f"{name} - {role_id}" for role_id, name in ROLE_SEED.items()
)


def _to_http_error(error: UserServiceError) -> HTTPException:
    """Map a user-service error to the HTTP status the API reports."""
    if isinstance(error, UserConflictError):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(error, (UserNotFoundError, RoleNotFoundError, UserValidationError)):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=status_code, detail=str(error))


@router.get("/GetUsers", response_model=UserListResponse)
def get_users(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(alias="pageSize", ge=1)] = 10,
    sort_by: Annotated[str, Query(alias="sortBy")] = "Id",
    sort_order: Annotated[str, Query(alias="sortOrder")] = "asc",
    filter_name: Annotated[str | None, Query(alias="filterName")] = None,
    filter_age: Annotated[int | None, Query(alias="filterAge")] = None,
    filter_email: Annotated[str | None, Query(alias="filterEmail")] = None,
    filter_role_name: Annotated[str | None, Query(alias="filterRoleName")] = None,
) -> UserListResponse:
    """List users with filters, sorting and pagination.

    Args:
        db: Database session
        page: 1-based page number
        page_size: Users per page, capped at the configured maximum
        sort_by: Id, Name, Age or Email
        sort_order: asc or desc
        filter_name: Substring of the user name
        filter_age: Exact age
        filter_email: Substring of the email
        filter_role_name: Exact name of a role the user holds

    Returns:
        UserListResponse: Total match count, paging values and the users
    """
    page_size = min(page_size, settings.max_page_size)

    result = list_users(
        db,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_order=sort_order,
        filters=UserFilters(
            name=filter_name,
            age=filter_age,
            email=filter_email,
            role_name=filter_role_name,
        ),
    )

    return UserListResponse(
        total_items=result.total_items,
        page=result.page,
        page_size=result.page_size,
        users=[UserResponse.model_validate(user) for user in result.users],
    )


@router.get("/GetUser", response_model=UserResponse)
def get_user_by_id(
    id: int,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Get a user by id.

    Raises:
        HTTPException: If the id is not positive or the user does not exist
    """
    try:
        user = get_user(db, id)
    except UserNotFoundError as e:
        raise _to_http_error(e) from e

    return UserResponse.model_validate(user)


@router.post("/AddRoleToUser", response_model=UserResponse, description=ROLES_DESCRIPTION)
def add_role(
    id: int,
    role_id: Annotated[int, Body(description="Id of the role to add")],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Add a role to a user by role id.

    Raises:
        HTTPException: If the user or the role does not exist
    """
    try:
        user = add_role_to_user(db, id, role_id)
    except UserServiceError as e:
        raise _to_http_error(e) from e

    return UserResponse.model_validate(user)


@router.post(
    "/CreateUser",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    description=ROLES_DESCRIPTION,
)
def create_new_user(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    name: str | None = None,
    age: int | None = None,
    email: str | None = None,
    role_id: Annotated[int, Query(alias="roleId")] = DEFAULT_ROLE_ID,
) -> UserResponse:
    """Create a new user with one role.

    The Location header points at the GetUser endpoint for the new id.

    Raises:
        HTTPException: If fields are missing, the role is unknown or the email is taken
    """
    try:
        user = create_user(db, name=name, age=age, email=email, role_id=role_id)
    except UserServiceError as e:
        raise _to_http_error(e) from e

    response.headers["Location"] = str(
        request.url_for("get_user_by_id").include_query_params(id=user.id)
    )
    return UserResponse.model_validate(user)


@router.put("/UpdateUser", response_model=UserResponse, description=ROLES_DESCRIPTION)
def update_existing_user(
    id: int,
    db: Annotated[Session, Depends(get_db)],
    name: str | None = None,
    age: int | None = None,
    email: str | None = None,
) -> UserResponse:
    """Update user fields by id.

    Only supplied, non-empty values are applied.

    Raises:
        HTTPException: If the user does not exist or the email is taken
    """
    try:
        user = update_user(db, id, name=name, age=age, email=email)
    except UserServiceError as e:
        raise _to_http_error(e) from e

    return UserResponse.model_validate(user)


@router.delete("/DeleteUser", status_code=status.HTTP_204_NO_CONTENT)
def delete_existing_user(
    id: int,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Delete a user by id.

    Raises:
        HTTPException: If the user does not exist
    """
    try:
        delete_user(db, id)
    except UserNotFoundError as e:
        raise _to_http_error(e) from e
