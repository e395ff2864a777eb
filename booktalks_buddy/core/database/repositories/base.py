"""
Base repository and query helpers.

This module provides the repository pattern shared by the service layer: a
generic async CRUD repository bound to one SQLModel entity, and a small query
builder for equality filters and pagination.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select
from sqlmodel.sql.expression import SelectOfScalar

EntityType = TypeVar("EntityType", bound=SQLModel)


class QueryBuilder:
    """Helpers for composing ``select`` statements."""

    @staticmethod
    def apply_filters(statement: SelectOfScalar, model: Type[SQLModel], filters: Optional[Dict[str, Any]]):
        """Add ``column == value`` clauses; ``None`` values are skipped, lists become ``IN``.

        Raises:
            ValueError: If a filter names a column the model does not have.
        """
        for field_name, value in (filters or {}).items():
            if value is None:
                continue
            column = getattr(model, field_name, None)
            if column is None:
                raise ValueError(f"Unknown filter field for {model.__name__}: {field_name}")
            if isinstance(value, (list, tuple, set)):
                statement = statement.where(column.in_(list(value)))
            else:
                statement = statement.where(column == value)
        return statement

    @staticmethod
    def apply_pagination(statement: SelectOfScalar, limit: Optional[int] = None, offset: Optional[int] = None):
        if offset:
            statement = statement.offset(offset)
        if limit is not None:
            statement = statement.limit(limit)
        return statement


class AsyncBaseRepository(Generic[EntityType]):
    """Async CRUD repository for a single SQLModel entity."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    async def create(self, entity: EntityType) -> EntityType:
        """Persist a new entity and return it with generated fields populated."""
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: str | int) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def get_one(self, **filters: Any) -> Optional[EntityType]:
        """First entity matching all equality filters, or None."""
        statement = QueryBuilder.apply_filters(select(self.model), self.model, filters)
        result = await self.session.execute(statement.limit(1))
        return result.scalars().first()

    async def update(self, entity: EntityType, changes: Optional[Dict[str, Any]] = None) -> EntityType:
        """Apply ``changes`` (if any) to ``entity`` and commit."""
        for key, value in (changes or {}).items():
            setattr(entity, key, value)
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: str | int) -> bool:
        """Delete entity by primary key.

        Returns:
            True if deleted, False if not found
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Any = None,
    ) -> List[EntityType]:
        """List entities with optional pagination, equality filters and ordering."""
        statement = QueryBuilder.apply_filters(select(self.model), self.model, filters)
        if order_by is not None:
            statement = statement.order_by(order_by)
        statement = QueryBuilder.apply_pagination(statement, limit, offset)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        statement = QueryBuilder.apply_filters(select(func.count()).select_from(self.model), self.model, filters)
        result = await self.session.execute(statement)
        return int(result.scalar_one())
