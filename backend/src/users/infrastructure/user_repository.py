import logging
import math
from datetime import datetime
from uuid import UUID

from sqlalchemy import ColumnElement, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from users.domain.entities import (
    CreateUserDto,
    UpdateUserDto,
    User,
    UserFilterParams,
    UserPage,
    UserRole,
)
from users.infrastructure.orm_models import UserModel

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "email": UserModel.email,
    "firstName": UserModel.first_name,
    "first_name": UserModel.first_name,
    "lastName": UserModel.last_name,
    "last_name": UserModel.last_name,
    "role": UserModel.role,
    "dateOfBirth": UserModel.date_of_birth,
    "date_of_birth": UserModel.date_of_birth,
    "createdAt": UserModel.created_at,
    "created_at": UserModel.created_at,
    "updatedAt": UserModel.updated_at,
    "updated_at": UserModel.updated_at,
}


class DbUserRepository:
    """User persistence over an AsyncSession.

    With ``autocommit`` (the default) every write commits immediately. Inside a
    unit-of-work transaction the repository only flushes and leaves the commit
    to the caller.
    """

    def __init__(self, session: AsyncSession, autocommit: bool = True):
        self.session = session
        self.autocommit = autocommit

    async def find_all(
        self,
        filters: UserFilterParams | None = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> UserPage:
        column = SORTABLE_COLUMNS.get(sort_by)
        if column is None:
            raise ValueError(f"Cannot sort users by {sort_by!r}")
        order = column.asc() if sort_order.lower() == "asc" else column.desc()
        return await self._paginate(_filter_conditions(filters), order, page, limit)

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self.session.get(UserModel, user_id)
        return _to_entity(model) if model else None

    async def find_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        )
        model = result.scalars().first()
        return _to_entity(model) if model else None

    async def create(self, data: CreateUserDto) -> User:
        model = UserModel(
            email=data.email,
            password_hash=data.password_hash,
            first_name=data.first_name,
            last_name=data.last_name,
            date_of_birth=data.date_of_birth,
            role=data.role.value,
        )
        self.session.add(model)
        await self._save(model)
        logger.info("Created user %s", model.id)
        return _to_entity(model)

    async def update(self, user_id: UUID, data: UpdateUserDto) -> User | None:
        return await self._apply(user_id, data.model_dump(exclude_unset=True))

    async def delete(self, user_id: UUID) -> User | None:
        model = await self.session.get(UserModel, user_id)
        if not model:
            return None
        user = _to_entity(model)
        await self.session.delete(model)
        if self.autocommit:
            await self.session.commit()
        else:
            await self.session.flush()
        logger.info("Deleted user %s", user_id)
        return user

    async def update_password(self, user_id: UUID, password_hash: str) -> User | None:
        return await self._apply(user_id, {"password_hash": password_hash})

    async def update_role(self, user_id: UUID, role: UserRole) -> User | None:
        return await self._apply(user_id, {"role": role})

    async def find_by_date_range(
        self, start_date: datetime, end_date: datetime, page: int = 1, limit: int = 10
    ) -> UserPage:
        conditions = [UserModel.created_at >= start_date, UserModel.created_at <= end_date]
        return await self._paginate(conditions, UserModel.created_at.desc(), page, limit)

    async def count_by_role(self) -> dict[UserRole, int]:
        result = await self.session.execute(
            select(UserModel.role, func.count(UserModel.id)).group_by(UserModel.role)
        )
        return {UserRole(role): count for role, count in result.all()}

    async def _paginate(
        self, conditions: list[ColumnElement[bool]], order, page: int, limit: int
    ) -> UserPage:
        count_stmt = select(func.count()).select_from(UserModel)
        stmt = select(UserModel)
        if conditions:
            count_stmt = count_stmt.where(and_(*conditions))
            stmt = stmt.where(and_(*conditions))

        total = await self.session.scalar(count_stmt) or 0
        result = await self.session.execute(
            stmt.order_by(order, UserModel.id).offset((page - 1) * limit).limit(limit)
        )
        return UserPage(
            users=[_to_entity(m) for m in result.scalars().all()],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )

    async def _apply(self, user_id: UUID, values: dict) -> User | None:
        model = await self.session.get(UserModel, user_id)
        if not model:
            return None
        for name, value in values.items():
            if isinstance(value, UserRole):
                value = value.value
            setattr(model, name, value)
        await self._save(model)
        return _to_entity(model)

    async def _save(self, model: UserModel) -> None:
        if self.autocommit:
            await self.session.commit()
        else:
            await self.session.flush()
        await self.session.refresh(model)


def _filter_conditions(filters: UserFilterParams | None) -> list[ColumnElement[bool]]:
    if not filters:
        return []

    conditions = []
    if filters.email:
        conditions.append(UserModel.email.icontains(filters.email, autoescape=True))
    if filters.role:
        conditions.append(UserModel.role == UserRole(filters.role).value)
    if filters.first_name:
        conditions.append(UserModel.first_name.icontains(filters.first_name, autoescape=True))
    if filters.last_name:
        conditions.append(UserModel.last_name.icontains(filters.last_name, autoescape=True))
    if filters.search:
        conditions.append(
            or_(
                UserModel.first_name.icontains(filters.search, autoescape=True),
                UserModel.last_name.icontains(filters.search, autoescape=True),
                UserModel.email.icontains(filters.search, autoescape=True),
            )
        )
    return conditions


def _to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        email=model.email,
        password_hash=model.password_hash,
        first_name=model.first_name,
        last_name=model.last_name,
        date_of_birth=model.date_of_birth,
        role=UserRole(model.role),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
