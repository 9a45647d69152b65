from sqlalchemy.orm import Session
from typing import Generic, Type, TypeVar, List, Optional, Dict, Any
from hearth.models.base import BaseModel
from hearth.core.exception import StorageException

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Base repository with common CRUD operations.

    Repositories never commit: they flush into the session owned by the
    current unit of work, which commits or rolls back as a whole.
    """

    def __init__(self, model: Type[T], db: Session):
        """
        Initialize repository with model and database session.

        Args:
            model: The SQLAlchemy model class
            db: Session of the enclosing unit of work
        """
        self.model = model
        self.db = db

    def find_by_id(self, id: str) -> Optional[T]:
        """Get a single record by ID."""
        return self.db.get(self.model, id)

    def find_by_ids(self, ids: List[str]) -> List[T]:
        """Get all records whose ID is in ids (order not guaranteed)."""
        if not ids:
            return []
        return self.db.query(self.model).filter(self.model.id.in_(ids)).all()

    def create(self, obj: T) -> T:
        """Create a new record and read it back."""
        self.db.add(obj)
        self.db.flush()

        created = self.find_by_id(obj.id)
        if created is None:
            raise StorageException(f"Failed to create {self.model.__name__}")
        return created

    def update(self, id: str, data: Dict[str, Any]) -> T:
        """Update a record by ID. The record must exist."""
        obj = self.find_by_id(id)
        if obj is None:
            raise StorageException(f"Failed to update {self.model.__name__} '{id}'")

        for key, value in data.items():
            if hasattr(obj, key):
                setattr(obj, key, value)

        self.db.flush()
        return obj

    def delete_by_id(self, id: str) -> bool:
        """Delete a record by ID. Returns True if deleted, False if not found."""
        obj = self.find_by_id(id)
        if obj is None:
            return False

        self.db.delete(obj)
        self.db.flush()
        return True
