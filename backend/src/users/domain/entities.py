from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


@dataclass
class User:
    email: str
    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: date | None = None
    role: UserRole = UserRole.USER
    id: UUID | None = field(default=None)
    created_at: datetime | None = field(default=None)
    updated_at: datetime | None = field(default=None)


@dataclass
class UserFilterParams:
    email: str | None = None
    role: UserRole | None = None
    first_name: str | None = None
    last_name: str | None = None
    # matched against first name, last name and email
    search: str | None = None


@dataclass
class UserPage:
    users: list[User]
    total: int
    page: int
    limit: int
    total_pages: int


class CreateUserDto(BaseModel):
    email: str
    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: date | None = None
    role: UserRole = UserRole.USER


class UpdateUserDto(BaseModel):
    """Partial update. Only fields that were explicitly set are written."""

    email: str | None = None
    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: date | None = None
    role: UserRole | None = None
