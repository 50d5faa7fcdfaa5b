"""
Base repositories with generic CRUD and owner-scoped operations.

This module provides a generic repository pattern for database operations.

- BaseRepository: CRUD operations that work with any model
- OwnedRepository: adds queries scoped to a single owner, used by every
  entity that belongs to a user (accounts, cards, transactions)

Type Parameters:
    ModelType: The SQLAlchemy model class (e.g., User, Account, etc.)
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository for database operations.

    Provides common CRUD operations that work with any SQLAlchemy model.

    Type Parameters:
        ModelType: The SQLAlchemy model class

    Usage:
        class UserRepository(BaseRepository[User]):
            def __init__(self, session: AsyncSession):
                super().__init__(User, session)

            async def get_by_email(self, email: str) -> User | None:
                ...
    """

    def __init__(self, model: type[ModelType], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: The SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def add(self, instance: ModelType) -> ModelType:
        """
        Persist a model instance.

        Args:
            instance: Model instance to persist

        Returns:
            Persisted model instance (with ID, timestamps and eager
            relationships populated)
        """
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def get_by_id(self, id: int) -> ModelType | None:
        """
        Get a record by ID.

        Args:
            id: Primary key of the record

        Returns:
            Model instance or None if not found
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def update(self, instance: ModelType) -> ModelType:
        """
        Persist changes to an already-modified model instance.

        The caller is responsible for modifying the instance attributes
        before calling this method. This method only handles persistence
        (flush + refresh).

        Args:
            instance: Model instance with changes already applied

        Returns:
            Updated model instance (with refreshed timestamps)

        Example:
            account = await account_repo.get_by_id(account_id)
            account.name = "Savings"
            account = await account_repo.update(account)
        """
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        """
        Hard delete a record (permanent removal from database).

        Args:
            instance: Model instance to delete
        """
        await self.session.delete(instance)
        await self.session.flush()

    async def exists(self, id: int) -> bool:
        """
        Check if a record exists by ID.

        Args:
            id: Primary key of the record

        Returns:
            True if exists, False otherwise
        """
        result = await self.session.execute(
            select(self.model.id).where(self.model.id == id)
        )
        return result.scalar_one_or_none() is not None


class OwnedRepository(BaseRepository[ModelType]):
    """
    Repository for models that belong to a single user.

    Every query built here filters on the owner column, so rows owned by
    another user are never returned: a foreign id behaves exactly like a
    missing one.

    Subclasses configure:
        owner_column: Name of the owner foreign key (default "user_id")
        name_column: Column used for name lookups and searches (default "name")

    and may override _default_order() to change list ordering.

    Usage:
        class AccountRepository(OwnedRepository[Account]):
            def __init__(self, session: AsyncSession):
                super().__init__(Account, session)
    """

    owner_column: str = "user_id"
    name_column: str = "name"

    def _owner_attr(self) -> Any:
        return getattr(self.model, self.owner_column)

    def _name_attr(self) -> Any:
        return getattr(self.model, self.name_column)

    def _default_order(self) -> tuple[Any, ...]:
        return (self._name_attr().asc(), self.model.id.asc())

    def _owned(self, owner_id: int) -> Select[Any]:
        """Base select restricted to one owner."""
        return select(self.model).where(self._owner_attr() == owner_id)

    async def _list(
        self,
        query: Select[Any],
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[ModelType]:
        query = query.order_by(*self._default_order())
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().unique().all())

    async def _count(self, query: Select[Any]) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        )
        return result.scalar_one()

    async def get_by_id_for_owner(self, id: int, owner_id: int) -> ModelType | None:
        """
        Get a record by ID only if it belongs to the owner.

        Args:
            id: Primary key of the record
            owner_id: ID of the user that must own the record

        Returns:
            Model instance or None if missing or owned by someone else
        """
        result = await self.session.execute(
            self._owned(owner_id).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def list_by_owner(
        self,
        owner_id: int,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[ModelType]:
        """
        List the owner's records in default order.

        Args:
            owner_id: ID of the owning user
            offset: Optional number of records to skip
            limit: Optional maximum number of records to return

        Returns:
            List of model instances
        """
        return await self._list(self._owned(owner_id), offset, limit)

    async def count_by_owner(self, owner_id: int) -> int:
        """Count the owner's records."""
        return await self._count(self._owned(owner_id))

    async def name_exists(
        self,
        owner_id: int,
        name: str,
        exclude_id: int | None = None,
    ) -> bool:
        """
        Check whether the owner already has a record with this name.

        Comparison is case-insensitive.

        Args:
            owner_id: ID of the owning user
            name: Name to look for
            exclude_id: Record to ignore (the one being updated)

        Returns:
            True if another record of the owner uses the name
        """
        query = select(self.model.id).where(
            self._owner_attr() == owner_id,
            func.lower(self._name_attr()) == name.lower(),
        )
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)

        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def search_by_name(self, owner_id: int, term: str) -> list[ModelType]:
        """
        Case-insensitive substring search on the name column.

        Args:
            owner_id: ID of the owning user
            term: Substring to look for

        Returns:
            Matching records in default order
        """
        query = self._owned(owner_id).where(
            self._name_attr().icontains(term, autoescape=True)
        )
        return await self._list(query)
