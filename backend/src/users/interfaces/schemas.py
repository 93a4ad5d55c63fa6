from datetime import date
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from shared.responses import CamelModel
from shared.security import Password
from users.domain.entities import UserRole

SortField = Literal[
    "email", "firstName", "lastName", "role", "dateOfBirth", "createdAt", "updatedAt"
]
SortOrder = Literal["asc", "desc"]


class CreateUserRequest(CamelModel):
    email: EmailStr
    password: Password | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    date_of_birth: date | None = None
    role: UserRole = UserRole.USER


class UpdateUserRequest(CamelModel):
    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    date_of_birth: date | None = None

    @field_validator("email")
    @classmethod
    def email_not_null(cls, value: str | None) -> str | None:
        # users.email is NOT NULL; omit the field to leave it unchanged
        if value is None:
            raise ValueError("email cannot be null")
        return value


class UpdateRoleRequest(CamelModel):
    role: UserRole
