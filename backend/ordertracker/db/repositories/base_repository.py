"""
Base repository classes with common CRUD operations.
Repositories handle database access using async SQLAlchemy sessions.
"""

from typing import Generic, TypeVar, Type, Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from sqlalchemy.sql import Select

from ordertracker.db.base import Base
from ordertracker.schemas.user import Identity

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations."""
    
    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository.
        
        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session
    
    async def create(self, **kwargs) -> ModelType:
        """
        Create a new record.
        
        Args:
            **kwargs: Model attributes
            
        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance
    
    async def get(self, id: UUID) -> Optional[ModelType]:
        """
        Get a record by ID.
        
        Args:
            id: Record ID
            
        Returns:
            Model instance or None
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()
    
    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        **filters,
    ) -> List[ModelType]:
        """
        List records with pagination and filters.
        
        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            **filters: Filter criteria
            
        Returns:
            List of model instances
        """
        query = select(self.model)
        
        for key, value in filters.items():
            if hasattr(self.model, key):
                query = query.where(getattr(self.model, key) == value)
        
        query = query.offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())
    
    async def update(self, id: UUID, **kwargs) -> Optional[ModelType]:
        """
        Update a record.
        
        Args:
            id: Record ID
            **kwargs: Attributes to update
            
        Returns:
            Updated model instance or None
        """
        await self.session.execute(
            update(self.model)
            .where(self.model.id == id)
            .values(**kwargs)
        )
        await self.session.flush()
        return await self.get(id)
    
    async def delete(self, id: UUID) -> bool:
        """
        Delete a record.
        
        Args:
            id: Record ID
            
        Returns:
            True if deleted, False if not found
        """
        result = await self.session.execute(
            delete(self.model).where(self.model.id == id)
        )
        await self.session.flush()
        return result.rowcount > 0


class OwnedRepository(BaseRepository[ModelType]):
    """
    Repository for rows owned through a user_id column.

    Every read and write goes through scope(): non-admin identities only
    reach their own rows; rows outside the scope behave as missing.
    """
    
    def __init__(self, model: Type[ModelType], session: AsyncSession, identity: Identity):
        super().__init__(model, session)
        self.identity = identity
    
    def scope(self, query: Select) -> Select:
        """Restrict a select to rows visible to the identity."""
        if self.identity.is_admin:
            return query
        return query.where(self.model.user_id == self.identity.user_id)
    
    def base_query(self) -> Select:
        """Scoped select of the model; subclasses add eager loads here."""
        return self.scope(select(self.model))
    
    async def get(self, id: UUID, refresh: bool = False) -> Optional[ModelType]:
        """
        Get a visible row by ID.
        
        Args:
            id: Record ID
            refresh: Reload columns and eager relationships of an
                already-loaded instance
        """
        query = self.base_query().where(self.model.id == id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.unique().scalar_one_or_none()
    
    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        **filters,
    ) -> List[ModelType]:
        query = self.base_query()
        
        for key, value in filters.items():
            if value is not None and hasattr(self.model, key):
                query = query.where(getattr(self.model, key) == value)
        
        query = self.order(query).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.unique().scalars().all())
    
    async def count(self, **filters) -> int:
        """Count visible rows matching filters."""
        query = self.scope(select(func.count(self.model.id)))
        
        for key, value in filters.items():
            if value is not None and hasattr(self.model, key):
                query = query.where(getattr(self.model, key) == value)
        
        result = await self.session.execute(query)
        return result.scalar_one()
    
    def order(self, query: Select) -> Select:
        """Default ordering of list results."""
        return query
    
    async def create(self, **kwargs) -> ModelType:
        """Create a row owned by the identity."""
        kwargs["user_id"] = self.identity.user_id
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        return await self.get(instance.id, refresh=True)
    
    async def update(self, id: UUID, **kwargs) -> Optional[ModelType]:
        """Update a visible row; None when it is missing or out of scope."""
        if await self.get(id) is None:
            return None
        kwargs.pop("user_id", None)
        if not kwargs:
            return await self.get(id)
        await self.session.execute(
            update(self.model)
            .where(self.model.id == id)
            .values(**kwargs)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return await self.get(id, refresh=True)
    
    async def delete(self, id: UUID) -> bool:
        """Delete a visible row; False when it is missing or out of scope."""
        if await self.get(id) is None:
            return False
        return await super().delete(id)
