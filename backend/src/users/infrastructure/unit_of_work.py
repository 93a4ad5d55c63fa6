import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from users.infrastructure.user_repository import DbUserRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlAlchemyUnitOfWork:
    def __init__(self, session: AsyncSession, autocommit: bool = True):
        self.session = session
        self.autocommit = autocommit
        self.users = DbUserRepository(session, autocommit=autocommit)

    async def transaction(
        self, callback: Callable[["SqlAlchemyUnitOfWork"], Awaitable[T]]
    ) -> T:
        """Run ``callback`` with repositories that share one commit.

        The callback's result is returned after the commit. Any exception rolls
        everything back and is re-raised. Nested calls join the outer
        transaction.
        """
        if not self.autocommit:
            return await callback(self)

        scoped = SqlAlchemyUnitOfWork(self.session, autocommit=False)
        try:
            result = await callback(scoped)
            await self.session.commit()
        except Exception:
            logger.warning("Rolling back transaction", exc_info=True)
            await self.session.rollback()
            raise
        return result
