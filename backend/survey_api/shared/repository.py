"""
Base repository with common CRUD operations.

Provides generic database operations for all feature repositories.
Uses SQLAlchemy async session for non-blocking database access.

Repositories never commit: the calling service owns the transaction
and decides when to commit or roll back.

Usage:
    class ProjectRepository(BaseRepository[Project]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Project)

        async def list_for_user(self, user_id: str) -> list[Project]:
            result = await self.db.execute(
                select(Project).where(Project.user_id == user_id)
            )
            return list(result.scalars().all())
"""

from typing import Any, TypeVar, Generic, Type
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository for database operations.

    Provides common CRUD methods that can be inherited by feature repositories.
    All methods are async for use with AsyncSession.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        """
        Initialize repository.

        Args:
            db: Async database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    async def get_by_id(self, id: str | int, for_update: bool = False) -> T | None:
        """
        Get entity by primary key ID.

        Args:
            id: Primary key value
            for_update: Lock the row until the transaction ends
                        (ignored by backends without row locks, e.g. SQLite)

        Returns:
            Entity if found, None otherwise
        """
        query = select(self.model).where(self.model.id == id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create(self, **kwargs) -> T:
        """
        Create new entity.

        Args:
            **kwargs: Field values for new entity

        Returns:
            Created entity with generated ID
        """
        entity = self.model(**kwargs)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: T, **kwargs) -> T:
        """
        Update entity fields.

        Args:
            entity: Entity to update
            **kwargs: Field values to update

        Returns:
            Updated entity
        """
        for key, value in kwargs.items():
            setattr(entity, key, value)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def compare_and_set(
        self,
        id: str | int,
        expected: dict[str, Any],
        values: dict[str, Any],
    ) -> bool:
        """
        Update one row only if it still holds the expected field values.

        Args:
            id: Primary key value
            expected: Field name-value pairs the row must still have
                      (None matches SQL NULL)
            values: Field values to write

        Returns:
            True if the row was updated, False if it changed meanwhile
        """
        stmt = update(self.model).where(self.model.id == id)
        for key, value in expected.items():
            column = getattr(self.model, key)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        result = await self.db.execute(
            stmt.values(**values).execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def delete(self, entity: T) -> None:
        """
        Delete entity.

        Args:
            entity: Entity to delete
        """
        await self.db.delete(entity)
        await self.db.flush()

