from datetime import date

from pydantic import EmailStr, Field

from shared.responses import CamelModel
from shared.security import Password


class RegisterRequest(CamelModel):
    email: EmailStr
    password: Password
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    date_of_birth: date | None = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: Password


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
