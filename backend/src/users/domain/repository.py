from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Protocol, TypeVar
from uuid import UUID

from users.domain.entities import (
    CreateUserDto,
    UpdateUserDto,
    User,
    UserFilterParams,
    UserPage,
    UserRole,
)

T = TypeVar("T")


class UserRepository(Protocol):
    async def find_all(
        self,
        filters: UserFilterParams | None = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> UserPage: ...

    async def find_by_id(self, user_id: UUID) -> User | None: ...

    async def find_by_email(self, email: str) -> User | None: ...

    async def create(self, data: CreateUserDto) -> User: ...

    async def update(self, user_id: UUID, data: UpdateUserDto) -> User | None: ...

    async def delete(self, user_id: UUID) -> User | None: ...

    async def update_password(self, user_id: UUID, password_hash: str) -> User | None: ...

    async def update_role(self, user_id: UUID, role: UserRole) -> User | None: ...

    async def find_by_date_range(
        self, start_date: datetime, end_date: datetime, page: int = 1, limit: int = 10
    ) -> UserPage: ...

    async def count_by_role(self) -> dict[UserRole, int]: ...


class UnitOfWork(Protocol):
    users: UserRepository

    async def transaction(self, callback: Callable[["UnitOfWork"], Awaitable[T]]) -> T: ...
