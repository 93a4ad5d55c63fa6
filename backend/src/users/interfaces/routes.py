from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from shared.dependencies import get_current_user, get_user_service, require_admin
from shared.exceptions import ConflictError, NotFoundError, ValidationError
from shared.responses import ApiResponse, ok
from users.application.dto import CreateUserModel, RoleCountDto, UserDto, UserListDto
from users.application.services import UserService
from users.domain.entities import UpdateUserDto, UserFilterParams, UserRole
from users.interfaces.schemas import (
    CreateUserRequest,
    SortField,
    SortOrder,
    UpdateRoleRequest,
    UpdateUserRequest,
)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=ApiResponse[UserListDto], response_model_exclude_none=True)
async def list_users(
    email: str | None = None,
    role: UserRole | None = None,
    first_name: str | None = Query(default=None, alias="firstName"),
    last_name: str | None = Query(default=None, alias="lastName"),
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_by: SortField = Query(default="createdAt", alias="sortBy"),
    sort_order: SortOrder = Query(default="desc", alias="sortOrder"),
    users: UserService = Depends(get_user_service),
):
    filters = UserFilterParams(
        email=email, role=role, first_name=first_name, last_name=last_name, search=search
    )
    return ok(await users.find_all(filters, page, limit, sort_by, sort_order))


@router.get(
    "/date-range", response_model=ApiResponse[UserListDto], response_model_exclude_none=True
)
async def list_users_by_date_range(
    start_date: datetime = Query(alias="startDate"),
    end_date: datetime = Query(alias="endDate"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    users: UserService = Depends(get_user_service),
):
    start_date, end_date = _naive_utc(start_date), _naive_utc(end_date)
    if start_date > end_date:
        raise ValidationError("startDate must not be after endDate")
    return ok(await users.find_by_date_range(start_date, end_date, page, limit))


@router.get(
    "/stats/roles",
    response_model=ApiResponse[list[RoleCountDto]],
    response_model_exclude_none=True,
)
async def role_counts(users: UserService = Depends(get_user_service)):
    return ok(await users.count_by_role())


@router.get("/{user_id}", response_model=ApiResponse[UserDto], response_model_exclude_none=True)
async def get_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    user = await users.find_by_id(user_id)
    if not user:
        raise NotFoundError("User", str(user_id))
    return ok(user)


@router.post(
    "",
    response_model=ApiResponse[UserDto],
    response_model_exclude_none=True,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_user(body: CreateUserRequest, users: UserService = Depends(get_user_service)):
    if await users.find_by_email(body.email):
        raise ConflictError("Email already registered")

    user = await users.create(
        CreateUserModel(
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            date_of_birth=body.date_of_birth,
        ),
        body.role,
    )
    return ok(user, "User created")


@router.patch(
    "/{user_id}",
    response_model=ApiResponse[UserDto],
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
async def update_user(
    user_id: UUID,
    body: UpdateUserRequest,
    users: UserService = Depends(get_user_service),
):
    if body.email:
        existing = await users.find_by_email(body.email)
        if existing and existing.id != user_id:
            raise ConflictError("Email already registered")

    user = await users.update(user_id, UpdateUserDto(**body.model_dump(exclude_unset=True)))
    if not user:
        raise NotFoundError("User", str(user_id))
    return ok(user, "User updated")


@router.patch(
    "/{user_id}/role",
    response_model=ApiResponse[UserDto],
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
async def update_user_role(
    user_id: UUID,
    body: UpdateRoleRequest,
    users: UserService = Depends(get_user_service),
):
    user = await users.update_role(user_id, body.role)
    if not user:
        raise NotFoundError("User", str(user_id))
    return ok(user, "Role updated")


@router.delete(
    "/{user_id}",
    response_model=ApiResponse[UserDto],
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
async def delete_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    user = await users.delete(user_id)
    if not user:
        raise NotFoundError("User", str(user_id))
    return ok(user, "User deleted")


def _naive_utc(value: datetime) -> datetime:
    # created_at is stored without a zone
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
