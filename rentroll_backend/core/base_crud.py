"""
Base CRUD operations for consistent data access patterns across all modules.

List queries accept a scope filter from the access policy engine; its dotted
field paths are compiled into relationship ``has()`` / ``any()`` clauses.
"""

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import ColumnElement, Select

from ..modules.commons.schemas import PaginationParams

if TYPE_CHECKING:
    from ..modules.access.policy import ScopeFilter

# Generic type variables for type safety
ModelType = TypeVar("ModelType")


class BaseCRUD(Generic[ModelType]):
    """
    Base CRUD class providing common database operations.

    Writes only flush; committing is the calling service's responsibility so
    that a multi-step operation lands in one transaction.

    Attributes:
        model: SQLAlchemy model class
        search_fields: Fields to search in for text-based queries
        default_relationships: Default relationships to load
        default_order_by: Default ordering field
    """

    def __init__(self, model: type[ModelType]):
        """Initialize CRUD operations for a specific model."""
        self.model = model

    # Configuration attributes that can be overridden by subclasses
    search_fields: list[str] = []
    default_relationships: list[str] = []
    default_order_by: str = "created_at"
    default_order_desc: bool = True

    @staticmethod
    def compile_condition(model: Any, path: list[str], value: Any) -> ColumnElement:
        """Turn ``a.b.c == value`` into a clause rooted at ``model``."""
        attr = getattr(model, path[0])
        if len(path) == 1:
            return attr == value
        relationship = attr.property
        inner = BaseCRUD.compile_condition(
            relationship.mapper.class_, path[1:], value
        )
        if relationship.uselist:
            return attr.any(inner)
        return attr.has(inner)

    def _apply_scope(self, query: Select, scope: "ScopeFilter | None") -> Select:
        """Apply an access-policy scope filter."""
        if scope is None:
            return query
        for condition in scope.conditions:
            query = query.where(
                self.compile_condition(
                    self.model, condition.path.split("."), condition.value
                )
            )
        return query

    def _apply_search_filter(
        self, query: Select, search_query: str | None = None
    ) -> Select:
        """Apply text-based search filtering across configured search fields."""
        if search_query and self.search_fields:
            search_conditions = []
            for field_name in self.search_fields:
                if hasattr(self.model, field_name):
                    field = getattr(self.model, field_name)
                    search_conditions.append(field.ilike(f"%{search_query}%"))
            if search_conditions:
                query = query.where(or_(*search_conditions))
        return query

    def _apply_custom_filters(
        self, query: Select, filters: dict[str, Any] | None = None
    ) -> Select:
        """Apply equality filters, skipping unset values."""
        if not filters:
            return query

        for field_name, value in filters.items():
            if value is not None and hasattr(self.model, field_name):
                field = getattr(self.model, field_name)
                query = query.where(field == value)
        return query

    def _apply_relationships(
        self, query: Select, load_relationships: list[str] | None = None
    ) -> Select:
        """Apply relationship loading."""
        relationships = (
            self.default_relationships
            if load_relationships is None
            else load_relationships
        )
        for relationship_name in relationships:
            if hasattr(self.model, relationship_name):
                relationship = getattr(self.model, relationship_name)
                query = query.options(selectinload(relationship))
        return query

    def _apply_ordering(self, query: Select, order_by: str | None = None) -> Select:
        """Apply ordering to query, with the primary key as tie-breaker."""
        order_field = order_by or self.default_order_by
        if hasattr(self.model, order_field):
            field = getattr(self.model, order_field)
            if self.default_order_desc:
                query = query.order_by(field.desc(), self.model.id.desc())
            else:
                query = query.order_by(field, self.model.id)
        return query

    def _filtered(
        self,
        scope: "ScopeFilter | None" = None,
        filters: dict[str, Any] | None = None,
        conditions: list[ColumnElement] | None = None,
        search_query: str | None = None,
    ) -> Select:
        query = select(self.model)
        query = self._apply_scope(query, scope)
        query = self._apply_custom_filters(query, filters)
        query = self._apply_search_filter(query, search_query)
        for condition in conditions or []:
            query = query.where(condition)
        return query

    async def get(
        self,
        db: AsyncSession,
        id: int,
        load_relationships: list[str] | None = None,
    ) -> ModelType | None:
        """
        Get a single record by primary key.

        Always re-reads the row so callers observe the latest committed state
        even when the object is already in the session's identity map.
        """
        query = select(self.model).where(self.model.id == id)
        query = self._apply_relationships(query, load_relationships)
        query = query.execution_options(populate_existing=True)

        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        db: AsyncSession,
        pagination: PaginationParams,
        scope: "ScopeFilter | None" = None,
        filters: dict[str, Any] | None = None,
        conditions: list[ColumnElement] | None = None,
        search_query: str | None = None,
        load_relationships: list[str] | None = None,
        order_by: str | None = None,
    ) -> tuple[list[ModelType], int]:
        """
        Get multiple records with pagination, scoping, filtering, and search.

        Args:
            db: Database session
            pagination: Pagination parameters
            scope: Access-policy scope filter
            filters: Equality filters to apply
            conditions: Extra SQLAlchemy clauses (ranges, etc.)
            search_query: Text search query
            load_relationships: Relationships to eager load
            order_by: Field to order by

        Returns:
            Tuple of (records, total_count)
        """
        query = self._filtered(scope, filters, conditions, search_query)

        count_query = select(func.count()).select_from(query.subquery())
        total_result = await db.execute(count_query)
        total = total_result.scalar() or 0

        query = self._apply_relationships(query, load_relationships)
        query = self._apply_ordering(query, order_by)
        query = query.offset(pagination.offset).limit(pagination.page_size)

        result = await db.execute(query)
        items = result.scalars().all()

        return list(items), total

    async def create(
        self,
        db: AsyncSession,
        obj_in: BaseModel | dict[str, Any],
        **kwargs,
    ) -> ModelType:
        """
        Create a new record.

        Args:
            db: Database session
            obj_in: Data for creating the record
            **kwargs: Additional fields to set on the model

        Returns:
            The created (flushed) model instance
        """
        if isinstance(obj_in, dict):
            obj_data = dict(obj_in)
        else:
            obj_data = obj_in.model_dump(exclude_unset=True)
        obj_data.update(kwargs)

        db_obj = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def create_many(
        self, db: AsyncSession, rows: list[dict[str, Any]]
    ) -> list[ModelType]:
        """Insert a batch of records in the given order."""
        objs = [self.model(**row) for row in rows]
        db.add_all(objs)
        await db.flush()
        return objs

    async def update(
        self,
        db: AsyncSession,
        db_obj: ModelType,
        obj_in: BaseModel | dict[str, Any],
    ) -> ModelType:
        """
        Update a record with the given fields.

        Args:
            db: Database session
            db_obj: Existing database object
            obj_in: Update data (unset fields are left untouched)

        Returns:
            The updated model instance
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        return db_obj

    async def delete(self, db: AsyncSession, db_obj: ModelType) -> None:
        """Delete a record."""
        await db.delete(db_obj)
        await db.flush()

    async def exists(self, db: AsyncSession, **filters) -> bool:
        """Check if a record exists with the given equality filters."""
        return await self.count(db, **filters) > 0

    async def count(
        self,
        db: AsyncSession,
        scope: "ScopeFilter | None" = None,
        **filters,
    ) -> int:
        """Count records matching the given criteria."""
        query = self._filtered(scope, filters)
        result = await db.execute(select(func.count()).select_from(query.subquery()))
        return result.scalar() or 0
