"""
Base repository class for data access layer.

The repository pattern provides:
1. Separation of data access logic from business logic
2. Single place for query logic (easier to maintain)
3. Easier testing (can mock repositories)
4. Consistent interface for data operations

Example:
    class VoteRepository(BaseRepository[Vote]):
        def find_by_matchup(self, matchup_id: str) -> List[Vote]:
            return self.query().filter(Vote.matchup_id == matchup_id).all()
"""
from abc import ABC
from typing import TypeVar, Generic, Type, Optional, List, Any, Dict, Sequence

from sqlalchemy import desc, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Query, Session

T = TypeVar("T")

# Dialects whose INSERT construct supports ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BaseRepository(Generic[T], ABC):
    """
    Base repository class providing common data access methods.

    Attributes:
        model_type: The SQLAlchemy model class this repository manages
        db: The database session
    """

    def __init__(self, model_type: Type[T], db: Session):
        self.model_type = model_type
        self.db = db

    # ========================================================================
    # Reads
    # ========================================================================

    def find_all(self, order_by: Optional[str] = None) -> List[T]:
        """
        Find all records.

        Args:
            order_by: Column name to order by (prefix with '-' for descending)
        """
        query = self.db.query(self.model_type)

        if order_by:
            if order_by.startswith('-'):
                column = getattr(self.model_type, order_by[1:])
                query = query.order_by(desc(column).nulls_last())
            else:
                column = getattr(self.model_type, order_by)
                query = query.order_by(column)

        return query.all()

    def query(self) -> Query:
        """Get a new query object for this model."""
        return self.db.query(self.model_type)

    def filter_by_first(self, **kwargs) -> Optional[T]:
        """Filter records by keyword arguments and return a fresh copy of the first match."""
        return (
            self.db.query(self.model_type)
            .filter_by(**kwargs)
            .populate_existing()
            .first()
        )

    def group_by_and_count(self, group_field: str, *criterion) -> List[tuple]:
        """
        Group by a field and count records in each group.

        Returns:
            List of tuples: [(group_value, count), ...], largest group first
        """
        column = getattr(self.model_type, group_field)
        count = func.count(self.model_type.id)
        query = self.db.query(column, count)

        if criterion:
            query = query.filter(*criterion)

        return query.group_by(column).order_by(desc(count), column).all()

    # ========================================================================
    # Writes
    # ========================================================================

    def create(self, **kwargs) -> T:
        """
        Create a new record.

        Returns:
            The created record (not yet committed to database)
        """
        instance = self.model_type(**kwargs)
        self.db.add(instance)
        return instance

    def upsert(self, values: Dict[str, Any], conflict_fields: Sequence[str]) -> None:
        """
        Insert a row or overwrite the existing one sharing `conflict_fields`.

        Uses the backend's INSERT ... ON CONFLICT DO UPDATE so concurrent
        writers resolve to last-write-wins inside the database.

        Raises:
            NotImplementedError: If the bound dialect has no ON CONFLICT support
        """
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Upsert is not supported for dialect '{dialect}'")

        stmt = insert(self.model_type).values(**values)
        update_columns = {
            key: stmt.excluded[key]
            for key in values
            if key not in conflict_fields
        }
        stmt = stmt.on_conflict_do_update(index_elements=list(conflict_fields), set_=update_columns)
        self.db.execute(stmt)

    def save(self) -> None:
        """Commit pending changes to the database."""
        self.db.commit()

    def flush(self) -> None:
        """Flush pending changes without committing."""
        self.db.flush()

    def refresh(self, instance: T) -> T:
        """Refresh an instance from the database."""
        self.db.refresh(instance)
        return instance

    def rollback(self) -> None:
        """Rollback pending changes."""
        self.db.rollback()
