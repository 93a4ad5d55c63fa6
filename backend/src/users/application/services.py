from datetime import datetime
from uuid import UUID

from shared.security import hash_password
from users.application.dto import CreateUserModel, RoleCountDto, UserDto, UserListDto
from users.domain.entities import (
    CreateUserDto,
    UpdateUserDto,
    User,
    UserFilterParams,
    UserPage,
    UserRole,
)
from users.domain.repository import UnitOfWork


class UserService:
    """Maps persisted users to DTOs. Missing users come back as ``None``."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def find_all(
        self,
        filters: UserFilterParams | None = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> UserListDto:
        result = await self.uow.users.find_all(filters, page, limit, sort_by, sort_order)
        return self._convert_page(result)

    async def find_by_date_range(
        self, start_date: datetime, end_date: datetime, page: int = 1, limit: int = 10
    ) -> UserListDto:
        result = await self.uow.users.find_by_date_range(start_date, end_date, page, limit)
        return self._convert_page(result)

    async def find_by_id(self, user_id: UUID) -> UserDto | None:
        user = await self.uow.users.find_by_id(user_id)
        return self.convert_to_dto(user) if user else None

    async def find_by_email(self, email: str, include_password: bool = False) -> UserDto | None:
        user = await self.uow.users.find_by_email(email)
        return self.convert_to_dto(user, include_password) if user else None

    async def create(self, data: CreateUserModel, role: UserRole = UserRole.USER) -> UserDto | None:
        user = await self.uow.users.create(
            CreateUserDto(
                email=data.email,
                password_hash=hash_password(data.password) if data.password else None,
                first_name=data.first_name,
                last_name=data.last_name,
                date_of_birth=data.date_of_birth,
                role=role,
            )
        )
        return self.convert_to_dto(user) if user else None

    async def update(self, user_id: UUID, data: UpdateUserDto) -> UserDto | None:
        user = await self.uow.users.update(user_id, data)
        return self.convert_to_dto(user) if user else None

    async def delete(self, user_id: UUID) -> UserDto | None:
        user = await self.uow.users.delete(user_id)
        return self.convert_to_dto(user) if user else None

    async def update_password(self, user_id: UUID, password_hash: str) -> UserDto | None:
        user = await self.uow.users.update_password(user_id, password_hash)
        return self.convert_to_dto(user) if user else None

    async def update_role(self, user_id: UUID, role: UserRole) -> UserDto | None:
        user = await self.uow.users.update_role(user_id, role)
        return self.convert_to_dto(user) if user else None

    async def count_by_role(self) -> list[RoleCountDto]:
        counts = await self.uow.users.count_by_role()
        return [RoleCountDto(role=role, count=count) for role, count in sorted(counts.items())]

    def convert_to_dto(self, user: User, include_password: bool = False) -> UserDto:
        return UserDto(
            id=user.id,
            email=user.email,
            password_hash=user.password_hash if include_password else None,
            first_name=user.first_name,
            last_name=user.last_name,
            date_of_birth=user.date_of_birth,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _convert_page(self, result: UserPage) -> UserListDto:
        return UserListDto(
            users=[self.convert_to_dto(u) for u in result.users],
            total=result.total,
            page=result.page,
            limit=result.limit,
            total_pages=result.total_pages,
        )
