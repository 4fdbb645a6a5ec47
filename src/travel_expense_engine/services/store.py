"""Record store: the engine's only path to persistence.

Every method is a suspension point that may fail. Failures come back as
``StoreError`` inside an ``OperationResult``; nothing is retried here.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from travel_expense_engine.errors import NotFoundError, OperationResult, StoreError
from travel_expense_engine.models import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class RecordStore:
    """Generic list/get/create/update access over an async session.

    With ``autocommit`` (the default) each write is committed on its own, so
    a write the store acknowledged stays even if the caller later fails or is
    cancelled. Pass ``autocommit=False`` to leave transaction control to the
    caller; writes are then only flushed.
    """

    def __init__(self, session: AsyncSession, autocommit: bool = True):
        self.session = session
        self.autocommit = autocommit

    async def list(
        self,
        model: type[ModelT],
        *criteria: Any,
        order_by: Any = None,
        limit: int | None = None,
    ) -> OperationResult[list[ModelT]]:
        """List records matching all criteria."""
        stmt = select(model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            return await self._failed("list", model, exc)
        return OperationResult.ok(list(result.scalars().all()))

    async def get(
        self,
        model: type[ModelT],
        record_id: UUID,
        refresh: bool = False,
    ) -> OperationResult[ModelT]:
        """Load one record by primary key.

        ``refresh`` bypasses the session's identity map so the row's current
        state is read back from the database.
        """
        try:
            record = await self.session.get(model, record_id, populate_existing=refresh)
        except SQLAlchemyError as exc:
            return await self._failed("get", model, exc)
        if record is None:
            return OperationResult.fail(NotFoundError(model.__tablename__, record_id))
        return OperationResult.ok(record)

    async def create(self, model: type[ModelT], **fields: Any) -> OperationResult[ModelT]:
        """Insert one record and return it."""
        record = model(**fields)
        self.session.add(record)
        try:
            await self._write()
        except SQLAlchemyError as exc:
            return await self._failed("create", model, exc)
        return OperationResult.ok(record)

    async def create_many(
        self, model: type[ModelT], rows: list[dict[str, Any]]
    ) -> OperationResult[list[ModelT]]:
        """Insert several records in one write."""
        records = [model(**row) for row in rows]
        self.session.add_all(records)
        try:
            await self._write()
        except SQLAlchemyError as exc:
            return await self._failed("create_many", model, exc)
        return OperationResult.ok(records)

    async def update(
        self,
        model: type[ModelT],
        record_id: UUID,
        values: dict[str, Any],
        expected_status: str | None = None,
    ) -> OperationResult[int]:
        """Update one record, optionally only if its status still matches.

        Returns the number of rows changed; 0 means the record is gone or its
        status moved on before this write landed.
        """
        stmt = update(model).where(model.id == record_id)
        if expected_status is not None:
            stmt = stmt.where(model.status == expected_status)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        try:
            result = await self.session.execute(stmt)
            await self._write()
        except SQLAlchemyError as exc:
            return await self._failed("update", model, exc)
        return OperationResult.ok(result.rowcount)

    async def delete(self, model: type[ModelT], record_id: UUID) -> OperationResult[int]:
        """Delete one record by primary key."""
        return await self.delete_where(model, model.id == record_id)

    async def delete_where(self, model: type[ModelT], *criteria: Any) -> OperationResult[int]:
        """Delete all records matching the criteria."""
        stmt = delete(model).where(*criteria).execution_options(synchronize_session=False)
        try:
            result = await self.session.execute(stmt)
            await self._write()
        except SQLAlchemyError as exc:
            return await self._failed("delete", model, exc)
        return OperationResult.ok(result.rowcount)

    def unit(self) -> RecordStore:
        """A store over the same session whose writes are only flushed.

        Writes through the unit land together on ``commit()`` or not at all.
        """
        return type(self)(self.session, autocommit=False)

    async def commit(self) -> OperationResult[None]:
        """Commit everything flushed so far."""
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Store commit failed", exc_info=True)
            await self.session.rollback()
            return OperationResult.fail(StoreError("commit", str(exc)))
        return OperationResult.ok()

    async def rollback(self) -> None:
        """Discard everything flushed since the last commit."""
        await self.session.rollback()

    async def _write(self) -> None:
        if self.autocommit:
            await self.session.commit()
        else:
            await self.session.flush()

    async def _failed(
        self, operation: str, model: type[Base], exc: SQLAlchemyError
    ) -> OperationResult[Any]:
        logger.warning(
            "Store %s on %s failed", operation, model.__tablename__, exc_info=True
        )
        await self.session.rollback()
        return OperationResult.fail(StoreError(operation, str(exc)))
