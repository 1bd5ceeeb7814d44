"""
Base Data Access Object (DAO) classes.

WHY: The DAO pattern separates database operations from business logic,
making the codebase more testable, maintainable, and allowing easier
database technology changes in the future.

HOW: BaseDAO exposes collection-level CRUD over one model. ChildDAO adds
the same operations scoped to a parent document id, which is how task
"subcollections" are addressed. Values equal to SERVER_TIMESTAMP are
resolved by the repository clock at write time.
"""

from typing import Generic, TypeVar, Type, Optional, List, Any, Dict
from sqlalchemy import select, delete, func, inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.models.base import Base, utc_now

# Type variable for model class
ModelType = TypeVar("ModelType", bound=Base)


class _ServerTimestamp:
    """Sentinel type for SERVER_TIMESTAMP."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# WHY: Callers mark timestamp fields with this value instead of computing
# datetimes locally, so every timestamp comes from the same clock.
SERVER_TIMESTAMP = _ServerTimestamp()


def resolve_server_timestamps(values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Replace SERVER_TIMESTAMP sentinels with the repository clock.

    One clock reading is shared by every sentinel in a single write.
    """
    now = None
    resolved = {}
    for field, value in values.items():
        if value is SERVER_TIMESTAMP:
            if now is None:
                now = utc_now()
            value = now
        resolved[field] = value
    return resolved


class BaseDAO(Generic[ModelType]):
    """
    Base Data Access Object providing CRUD operations for all models.

    WHY: Centralizing database operations in DAOs separates data access
    concerns from business logic, making code more testable and maintainable.
    Using generics allows type-safe reuse across different models.

    Type Parameters:
        ModelType: The SQLAlchemy model class this DAO manages
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize DAO with model class and database session.

        WHY: Dependency injection of the session allows easier testing
        with mock sessions and ensures proper session lifecycle management.

        Args:
            model: The SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session
        self.pk = sa_inspect(model).primary_key[0]

    def _apply_filters(self, query, filters: Dict[str, Any]):
        """
        Add equality filters for known model fields.

        WHY: A filter value of None means "not filtered", so optional query
        parameters can be passed straight through.
        """
        for field, value in filters.items():
            if value is None:
                continue
            if not hasattr(self.model, field):
                raise AttributeError(f"{self.model.__name__} has no field '{field}'")
            query = query.where(getattr(self.model, field) == value)
        return query

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Field values for the new record (may contain SERVER_TIMESTAMP)

        Returns:
            The created model instance with repository-generated fields populated
        """
        instance = self.model(**resolve_server_timestamps(kwargs))
        self.session.add(instance)
        await self.session.flush()  # Flush to get auto-generated fields
        await self.session.refresh(instance)
        return instance

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """
        Retrieve a single record by primary key.

        Args:
            id: Primary key value

        Returns:
            The model instance if found, None otherwise
        """
        result = await self.session.execute(select(self.model).where(self.pk == id))
        return result.scalar_one_or_none()

    async def get_for_update(self, id: Any) -> Optional[ModelType]:
        """
        Retrieve a record and lock its row until the transaction ends.

        WHY: Read-modify-write sequences (note append) must not interleave.
        On PostgreSQL this is SELECT ... FOR UPDATE; SQLite ignores the lock.

        Args:
            id: Primary key value

        Returns:
            The model instance if found, None otherwise
        """
        result = await self.session.execute(
            select(self.model).where(self.pk == id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        order_by: Optional[str] = None,
        descending: bool = False,
        skip: int = 0,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[ModelType]:
        """
        Retrieve records matching equality filters, optionally ordered.

        Args:
            order_by: Model attribute name to order by
            descending: Order descending instead of ascending
            skip: Number of records to skip (for pagination)
            limit: Maximum number of records to return (None for all)
            **filters: Field name to value filters (None values are ignored)

        Returns:
            List of model instances matching the filters
        """
        query = self._apply_filters(select(self.model), filters)

        if order_by is not None:
            column = getattr(self.model, order_by)
            query = query.order_by(column.desc() if descending else column.asc())

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(self, id: Any, **kwargs: Any) -> Optional[ModelType]:
        """
        Update an existing record with a partial set of fields.

        WHY: Loading the instance and assigning attributes lets column
        onupdate hooks (updatedAt) fire and keeps the identity map in sync.

        Args:
            id: Primary key of the record to update
            **kwargs: Fields to update (may contain SERVER_TIMESTAMP)

        Returns:
            Updated model instance if found, None otherwise
        """
        instance = await self.get_by_id(id)
        if instance is None:
            return None

        for field, value in resolve_server_timestamps(kwargs).items():
            if not hasattr(self.model, field):
                raise AttributeError(f"{self.model.__name__} has no field '{field}'")
            setattr(instance, field, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: Any) -> bool:
        """
        Delete a record by primary key.

        Args:
            id: Primary key of the record to delete

        Returns:
            True if a record was deleted, False if not found
        """
        result = await self.session.execute(delete(self.model).where(self.pk == id))
        return result.rowcount > 0

    async def count(self, **filters: Any) -> int:
        """
        Count records matching filters.

        Args:
            **filters: Field name to value filters

        Returns:
            Number of records matching the filters
        """
        query = self._apply_filters(select(func.count()).select_from(self.model), filters)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def exists(self, **filters: Any) -> bool:
        """
        Check if any records matching filters exist.

        Args:
            **filters: Field name to value filters

        Returns:
            True if at least one matching record exists
        """
        query = self._apply_filters(select(self.pk), filters).limit(1)
        result = await self.session.execute(query)
        return result.scalar_one_or_none() is not None


class ChildDAO(BaseDAO[ModelType]):
    """
    DAO for documents that live under a parent document.

    WHY: A child addressed through the wrong parent must behave as if it did
    not exist. Every operation here is scoped by parent id.

    Attributes:
        parent_field: Model attribute holding the parent document id
    """

    parent_field: str = "parent_id"

    def _parent_column(self):
        return getattr(self.model, self.parent_field)

    async def get_child(self, parent_id: Any, id: Any) -> Optional[ModelType]:
        """
        Retrieve a child document by id, scoped to its parent.

        Returns:
            The model instance if found under parent_id, None otherwise
        """
        result = await self.session.execute(
            select(self.model).where(self.pk == id, self._parent_column() == parent_id)
        )
        return result.scalar_one_or_none()

    async def get_child_for_update(self, parent_id: Any, id: Any) -> Optional[ModelType]:
        """Same as get_child, holding a row lock until the transaction ends."""
        result = await self.session.execute(
            select(self.model)
            .where(self.pk == id, self._parent_column() == parent_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def list_children(
        self,
        parent_id: Any,
        order_by: Optional[str] = None,
        descending: bool = False,
        **filters: Any,
    ) -> List[ModelType]:
        """
        List the children of one parent.

        Args:
            parent_id: Parent document id
            order_by: Model attribute name to order by
            descending: Order descending instead of ascending
            **filters: Additional equality filters

        Returns:
            List of child instances
        """
        filters[self.parent_field] = parent_id
        return await self.list(order_by=order_by, descending=descending, **filters)

    async def create_child(self, parent_id: Any, **kwargs: Any) -> ModelType:
        """Create a child document under parent_id."""
        kwargs[self.parent_field] = parent_id
        return await self.create(**kwargs)

    async def update_child(self, parent_id: Any, id: Any, **kwargs: Any) -> Optional[ModelType]:
        """
        Update a child document scoped to its parent.

        Returns:
            Updated instance, or None if no such child under parent_id
        """
        instance = await self.get_child(parent_id, id)
        if instance is None:
            return None
        return await self.update(id, **kwargs)

    async def delete_child(self, parent_id: Any, id: Any) -> bool:
        """
        Delete a child document scoped to its parent.

        Returns:
            True if a document was deleted, False if not found under parent_id
        """
        result = await self.session.execute(
            delete(self.model).where(self.pk == id, self._parent_column() == parent_id)
        )
        return result.rowcount > 0
