"""
SQLAlchemy Unit of Work

One session, one transaction, both repositories. Mutations are kept only
when `commit()` is called; any other exit rolls them back.
"""

import logging
from typing import Self

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orderflow.core.domain import TransactionConflictException

from .repositories import SQLAlchemyOrderRepository, SQLAlchemyProductRepository

logger = logging.getLogger(__name__)

# PostgreSQL serialization_failure and deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})
SQLITE_LOCK_MESSAGES = ("database is locked", "database table is locked")


def as_transaction_conflict(exc: BaseException) -> TransactionConflictException | None:
    """Map a driver error caused by a concurrent writer to a retryable domain error."""
    if not isinstance(exc, DBAPIError):
        return None

    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in RETRYABLE_SQLSTATES:
        return TransactionConflictException(str(orig), sqlstate=sqlstate)

    message = str(orig).lower()
    if any(text in message for text in SQLITE_LOCK_MESSAGES):
        return TransactionConflictException(str(orig))
    return None


class SQLAlchemyUnitOfWork:
    """
    Example:
        ```python
        async with SQLAlchemyUnitOfWork(session_factory) as uow:
            await ledger.adjust(uow, product_id, -2)
            await uow.commit()
        ```

    Deadlocks, serialization failures and SQLite lock timeouts leave the
    scope as TransactionConflictException, after the rollback.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> Self:
        self.session = self._session_factory()
        self.products = SQLAlchemyProductRepository(self.session)
        self.orders = SQLAlchemyOrderRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None:
                logger.debug(f"Unit of work rolled back after {exc_type.__name__}")
            await self.rollback()
        finally:
            await self.session.close()
            self.session = None

        conflict = as_transaction_conflict(exc) if exc is not None else None
        if conflict is not None:
            logger.warning(f"Transaction conflict: {conflict.message}")
            raise conflict from exc

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
