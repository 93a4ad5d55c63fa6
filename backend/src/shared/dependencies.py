from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.application.services import verify_token
from shared.config import Settings
from shared.exceptions import AuthenticationError, AuthorizationError
from users.application.dto import UserDto
from users.application.services import UserService
from users.domain.entities import UserRole
from users.infrastructure.unit_of_work import SqlAlchemyUnitOfWork

security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_factory() as session:
        yield session


def get_unit_of_work(db: AsyncSession = Depends(get_db)) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(db)


def get_user_service(uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work)) -> UserService:
    return UserService(uow)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> UserDto:
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    return await verify_token(users, settings, credentials.credentials)


async def require_admin(current_user: UserDto = Depends(get_current_user)) -> UserDto:
    if current_user.role != UserRole.ADMIN:
        raise AuthorizationError("Admin role required")
    return current_user
