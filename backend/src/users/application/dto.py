from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr

from shared.responses import CamelModel
from users.domain.entities import UserRole


class UserDto(CamelModel):
    id: UUID
    email: str
    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: date | None = None
    role: UserRole
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserListDto(CamelModel):
    users: list[UserDto]
    total: int
    page: int
    limit: int
    total_pages: int


class RoleCountDto(CamelModel):
    role: UserRole
    count: int


class CreateUserModel(CamelModel):
    """Inbound account data; the password is still in plain text here."""

    email: EmailStr
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: date | None = None
