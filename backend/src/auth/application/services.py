import logging
from datetime import date
from uuid import UUID

import jwt

from shared.config import Settings
from shared.exceptions import AuthenticationError, ConflictError, NotFoundError
from shared.security import create_token, decode_token, hash_password, verify_password
from users.application.dto import CreateUserModel, UserDto
from users.application.services import UserService
from users.domain.entities import UserRole

logger = logging.getLogger(__name__)


async def register_user(
    users: UserService,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
    date_of_birth: date | None = None,
) -> UserDto:
    if await users.find_by_email(email):
        raise ConflictError("Email already registered")

    return await users.create(
        CreateUserModel(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
        ),
        UserRole.USER,
    )


async def authenticate_user(
    users: UserService, settings: Settings, email: str, password: str
) -> tuple[UserDto, str]:
    user = await users.find_by_email(email, include_password=True)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise AuthenticationError("Invalid email or password")

    token = create_token(str(user.id), settings)
    return user.model_copy(update={"password_hash": None}), token


async def verify_token(users: UserService, settings: Settings, token: str) -> UserDto:
    try:
        payload = decode_token(token, settings)
        user_id = UUID(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        raise AuthenticationError("Invalid or expired token")

    user = await users.find_by_id(user_id)
    if not user:
        raise AuthenticationError("User not found")
    return user


async def change_password(
    users: UserService, user_id: UUID, current_password: str, new_password: str
) -> UserDto:
    current = await users.find_by_id(user_id)
    if not current:
        raise NotFoundError("User", str(user_id))

    with_hash = await users.find_by_email(current.email, include_password=True)
    if not with_hash or not verify_password(current_password, with_hash.password_hash):
        raise AuthenticationError("Current password is incorrect")

    return await users.update_password(user_id, hash_password(new_password))
