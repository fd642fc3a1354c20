"""Row-store handles over an async SQLAlchemy session.

Two handles exist and they are never interchangeable:

* ``RowStore`` is the tenant-scoped handle. It can point-lookup any row and
  scan or mutate ordinary tables, but privileged tables (identities,
  profiles) are read-only by primary key through it.
* ``AdminRowStore`` is the privileged handle used by super-admin routes and
  by identity provisioning. It carries the full capability set.
"""

from typing import Any, Iterable, Sequence, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_engine.common.exceptions import ConflictError, StoreCapabilityError
from storefront_engine.common.models import Base

ModelT = TypeVar("ModelT", bound=Base)


class RowStore:
    """Scoped store handle."""

    privileged = False

    def __init__(self, session: AsyncSession):
        self.session = session

    def _require(self, model: type[Base], operation: str) -> None:
        if getattr(model, "__privileged__", False) and not self.privileged:
            raise StoreCapabilityError(
                f"'{operation}' on '{model.__tablename__}' requires the privileged store"
            )

    @staticmethod
    def _conditions(model: type[Base], filters: dict[str, Any], where: Iterable) -> list:
        conditions = [getattr(model, name) == value for name, value in filters.items()]
        conditions.extend(where)
        return conditions

    async def get(self, model: type[ModelT], **filters: Any) -> ModelT | None:
        """Point lookup. ``id=...`` alone goes through the identity map."""
        if set(filters) == {"id"}:
            return await self.session.get(model, filters["id"])
        self._require(model, "get")
        result = await self.session.execute(
            select(model).where(*self._conditions(model, filters, ()))
        )
        return result.scalars().first()

    async def list(
        self,
        model: type[ModelT],
        *,
        filters: dict[str, Any] | None = None,
        where: Sequence = (),
        order_by: Sequence = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[ModelT], int]:
        """Filtered scan. Returns the requested page and the unpaged total."""
        self._require(model, "list")
        conditions = self._conditions(model, filters or {}, where)
        query = select(model).where(*conditions).order_by(*order_by).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        rows = list((await self.session.execute(query)).scalars().all())
        total = await self.count(model, *where, **(filters or {}))
        return rows, total

    async def count(self, model: type[Base], *where: Any, **filters: Any) -> int:
        self._require(model, "count")
        query = select(func.count()).select_from(model).where(
            *self._conditions(model, filters, where)
        )
        return (await self.session.execute(query)).scalar_one()

    async def exists(self, model: type[Base], *where: Any, **filters: Any) -> bool:
        self._require(model, "exists")
        query = select(model.id).where(*self._conditions(model, filters, where)).limit(1)
        return (await self.session.execute(query)).first() is not None

    async def insert(self, model: type[ModelT], **fields: Any) -> ModelT:
        self._require(model, "insert")
        row = model(**fields)
        self.session.add(row)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise ConflictError(f"Duplicate value for {model.__tablename__}") from exc
        return row

    async def update(self, row: ModelT, **fields: Any) -> ModelT:
        self._require(type(row), "update")
        for name, value in fields.items():
            setattr(row, name, value)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise ConflictError(f"Duplicate value for {row.__tablename__}") from exc
        return row

    async def delete(self, row: Base) -> None:
        self._require(type(row), "delete")
        await self.session.delete(row)
        await self.session.flush()

    async def delete_where(self, model: type[Base], **filters: Any) -> int:
        self._require(model, "delete")
        result = await self.session.execute(
            delete(model).where(*self._conditions(model, filters, ()))
        )
        await self.session.flush()
        return result.rowcount or 0


class AdminRowStore(RowStore):
    """Privileged store handle; bypasses the scoped capability checks."""

    privileged = True
