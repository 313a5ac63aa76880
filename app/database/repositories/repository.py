"""
Repository Pattern Base Classes

Provides the record-store abstraction the payment gateways work against.

The gateways never touch the Session directly; they receive a repository so
tests can run against SQLite and the HTTP layer can share one Session per
request.

Architecture:
- BaseRepository: Generic CRUD operations for any model
- Specialized repositories: Domain-specific queries (PaymentRepository, OrderRepository)
"""

from abc import ABC
from typing import Any, Generic, List, Optional, Type, TypeVar
from sqlalchemy.orm import Session
from app.database.session import Base


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """
    Abstract base repository with common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class (Payment, Order, etc.)

    Example:
        class OrderRepository(BaseRepository[Order]):
            def __init__(self, session: Session):
                super().__init__(session, Order)
    """

    def __init__(self, session: Session, model: Type[ModelType]):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy session
            model: The SQLAlchemy model class
        """
        self.session = session
        self.model = model

    def get_by_id(self, id: Any) -> Optional[ModelType]:
        """
        Retrieve a single record by ID.

        Args:
            id: Primary key value

        Returns:
            Model instance or None if not found
        """
        return self.session.get(self.model, id)

    def find_many(self, **filters: Any) -> List[ModelType]:
        """
        Retrieve every record whose columns equal the given values.

        Args:
            **filters: Column name / value pairs, combined with AND

        Returns:
            List of model instances (possibly empty)
        """
        query = self.session.query(self.model)
        for column, value in filters.items():
            query = query.filter(getattr(self.model, column) == value)
        return query.all()

    def create(self, **kwargs) -> ModelType:
        """
        Create and commit a new record.

        Args:
            **kwargs: Column values for the new record

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.commit()
        self.session.refresh(instance)
        return instance

    def save(self, instance: ModelType) -> ModelType:
        """
        Persist pending changes on an instance and commit.

        Args:
            instance: A model instance loaded through this repository

        Returns:
            The refreshed instance
        """
        self.session.add(instance)
        self.session.commit()
        self.session.refresh(instance)
        return instance

    def count(self) -> int:
        return self.session.query(self.model).count()

    def exists(self, id: Any) -> bool:
        return self.get_by_id(id) is not None
