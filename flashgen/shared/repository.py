"""Base repository pattern with async CRUD operations."""

from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from flashgen.shared.errors import safe

# Type variable for SQLAlchemy models
ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT], ABC):
    """Abstract base repository providing async CRUD operations.

    Infrastructure failures raised by SQLAlchemy are converted into
    ``PersistenceFailedError`` by the ``@safe`` decorator, so services
    only ever see domain errors.

    Type Parameters:
        ModelT: The SQLAlchemy model class.

    Example:
        class GenerationRepository(BaseRepository[Generation]):
            def __init__(self, session: AsyncSession):
                super().__init__(session, Generation)

        repo = GenerationRepository(session)
        generation = await repo.create({"user_id": user_id, "source_text_length": 1200})
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        """Initialize the repository.

        Args:
            session: The async SQLAlchemy session.
            model: The SQLAlchemy model class.
        """
        self._session = session
        self._model = model

    @property
    def session(self) -> AsyncSession:
        """Get the current database session."""
        return self._session

    @property
    def model(self) -> type[ModelT]:
        """Get the model class."""
        return self._model

    @staticmethod
    def _to_dict(data: Any, *, exclude_unset: bool = True) -> dict[str, Any]:
        if hasattr(data, "model_dump"):
            return data.model_dump(exclude_unset=exclude_unset)
        return dict(data)

    @safe
    async def create(self, data: Any) -> ModelT:
        """Create a new record.

        Args:
            data: Pydantic model or mapping with column values.

        Returns:
            The created model instance with server defaults loaded.
        """
        instance = self._model(**self._to_dict(data))
        self._session.add(instance)
        await self._session.flush()
        await self._session.refresh(instance)
        return instance

    @safe
    async def create_many(self, data_list: list[Any]) -> list[ModelT]:
        """Create multiple records in a single flush.

        Args:
            data_list: List of data for creating records.

        Returns:
            List of created model instances, in input order.
        """
        instances = [self._model(**self._to_dict(data)) for data in data_list]

        self._session.add_all(instances)
        await self._session.flush()

        for instance in instances:
            await self._session.refresh(instance)

        return instances

    @safe
    async def get(self, **filters: Any) -> ModelT | None:
        """Get a single record by filters.

        Args:
            **filters: Column equality filters.

        Returns:
            The model instance if found, None otherwise.
        """
        query = select(self._model)
        query = self._apply_filters(query, filters)
        result = await self._session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_id(self, id: int) -> ModelT | None:
        """Get a record by its ID."""
        return await self.get(id=id)

    @safe
    async def update(
        self,
        instance: ModelT,
        data: Any,
        *,
        exclude_unset: bool = True,
    ) -> ModelT:
        """Update an existing record.

        Args:
            instance: The model instance to update.
            data: The update data.
            exclude_unset: Whether to exclude unset fields from the update.

        Returns:
            The updated model instance.
        """
        for field, value in self._to_dict(data, exclude_unset=exclude_unset).items():
            if hasattr(instance, field):
                setattr(instance, field, value)

        await self._session.flush()
        await self._session.refresh(instance)
        return instance

    def _apply_filters(self, query: Select[Any], filters: dict[str, Any]) -> Select[Any]:
        """Apply equality filters to a query.

        Lists and tuples are translated into ``IN`` clauses.

        Args:
            query: The base query.
            filters: Dictionary of column name to value.

        Returns:
            The query with filters applied.
        """
        for field, value in filters.items():
            if not hasattr(self._model, field):
                continue
            column = getattr(self._model, field)
            if isinstance(value, list | tuple):
                query = query.where(column.in_(value))
            elif value is None:
                query = query.where(column.is_(None))
            else:
                query = query.where(column == value)
        return query
