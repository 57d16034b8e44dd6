"""Base repository pattern for PostgreSQL tables.

Writes are field-level: merge_update() and merge_upsert() only touch the
columns they are given, so two services updating disjoint fields of the
same row never clobber each other.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

import psycopg2
from psycopg2 import errors as pg_errors

from .connection import ConnectionManager

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class NotFoundError(RepositoryError):
    """Entity not found in database."""
    pass


class DuplicateError(RepositoryError):
    """Duplicate entity already exists."""
    pass


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository with common operations.

    Subclasses declare their column order in `columns` (id column first)
    and implement row/entity conversion.
    """

    columns: Tuple[str, ...] = ()
    id_column: str = "id"

    def __init__(
        self,
        connection_manager: ConnectionManager,
        table_name: str,
    ):
        self.connection_manager = connection_manager
        self.table_name = table_name

        logger.info(
            "REPOSITORY_INITIALIZED",
            extra={"table_name": table_name}
        )

    @abstractmethod
    def _row_to_entity(self, row: tuple) -> T:
        """Convert a row (in `columns` order) to an entity."""
        pass

    @abstractmethod
    def _entity_to_params(self, entity: T) -> Dict[str, Any]:
        """Convert an entity to a column -> value mapping."""
        pass

    @property
    def _select_list(self) -> str:
        return ", ".join(self.columns)

    def _check_columns(self, names: Sequence[str]) -> None:
        unknown = [name for name in names if name not in self.columns]
        if unknown:
            raise ValueError(f"Unknown columns for {self.table_name}: {unknown}")

    def _execute(
        self,
        query: str,
        params: Sequence[Any] = (),
        fetch: Optional[str] = None,
        commit: bool = False,
    ) -> Any:
        """Run one statement, translating driver errors to RepositoryError.

        Args:
            query: SQL with %s placeholders
            params: Query parameters
            fetch: "one", "all" or None
            commit: Commit after executing

        Returns:
            Fetched row(s) or the affected row count when fetch is None
        """
        try:
            with self.connection_manager.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    if fetch == "one":
                        result = cur.fetchone()
                    elif fetch == "all":
                        result = cur.fetchall()
                    else:
                        result = cur.rowcount
                    if commit:
                        conn.commit()
                    return result
        except pg_errors.UniqueViolation as e:
            raise DuplicateError(f"Duplicate row in {self.table_name}: {e}") from e
        except psycopg2.Error as e:
            logger.error(
                "REPOSITORY_QUERY_FAILED",
                extra={
                    "table_name": self.table_name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                }
            )
            raise RepositoryError(f"Query on {self.table_name} failed: {e}") from e

    def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find entity by ID, or None."""
        row = self._execute(
            f"SELECT {self._select_list} FROM {self.table_name} WHERE {self.id_column} = %s",
            (entity_id,),
            fetch="one",
        )
        if row is None:
            return None
        return self._row_to_entity(row)

    def get(self, entity_id: str) -> T:
        """Find entity by ID.

        Raises:
            NotFoundError: If no row has this ID
        """
        entity = self.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{self.table_name} row {entity_id} not found")
        return entity

    def insert(self, entity: T) -> T:
        """Insert a new entity.

        Raises:
            DuplicateError: If the ID already exists
        """
        params = self._entity_to_params(entity)
        columns = list(params.keys())
        placeholders = ", ".join(["%s"] * len(columns))

        self._execute(
            f"INSERT INTO {self.table_name} ({', '.join(columns)}) VALUES ({placeholders})",
            list(params.values()),
            commit=True,
        )
        return entity

    def save(self, entity: T) -> T:
        """Insert or fully overwrite an entity."""
        params = self._entity_to_params(entity)
        return self.merge_upsert(params[self.id_column], {
            column: value for column, value in params.items() if column != self.id_column
        }) or entity

    def merge_update(self, entity_id: str, fields: Dict[str, Any]) -> bool:
        """Update only the given columns of an existing row.

        Returns:
            True if a row was updated, False if the ID does not exist
        """
        if not fields:
            return False
        self._check_columns(list(fields))

        assignments = ", ".join(f"{column} = %s" for column in fields)
        rowcount = self._execute(
            f"UPDATE {self.table_name} SET {assignments} WHERE {self.id_column} = %s",
            [*fields.values(), entity_id],
            commit=True,
        )
        return rowcount > 0

    def merge_upsert(self, entity_id: str, fields: Dict[str, Any]) -> Optional[T]:
        """Create the row if missing, otherwise update only the given columns.

        Columns not named in `fields` keep their stored values (or the
        table defaults on insert).
        """
        self._check_columns(list(fields))

        columns = [self.id_column, *fields.keys()]
        placeholders = ", ".join(["%s"] * len(columns))
        if fields:
            conflict = "DO UPDATE SET " + ", ".join(
                f"{column} = EXCLUDED.{column}" for column in fields
            )
        else:
            conflict = "DO NOTHING"

        row = self._execute(
            f"""
            INSERT INTO {self.table_name} ({", ".join(columns)})
            VALUES ({placeholders})
            ON CONFLICT ({self.id_column}) {conflict}
            RETURNING {self._select_list}
            """,
            [entity_id, *fields.values()],
            fetch="one",
            commit=True,
        )
        if row is None:
            return None
        return self._row_to_entity(row)

    def find_where(
        self,
        where: str,
        params: Sequence[Any],
        order_by: Optional[str] = None,
        limit: int = 100,
    ) -> List[T]:
        """Find entities matching a WHERE clause (placeholders only)."""
        query = f"SELECT {self._select_list} FROM {self.table_name} WHERE {where}"
        if order_by:
            query += f" ORDER BY {order_by}"
        query += " LIMIT %s"

        rows = self._execute(query, [*params, limit], fetch="all")
        return [self._row_to_entity(row) for row in rows]

    def count(self) -> int:
        """Count total entities."""
        row = self._execute(f"SELECT COUNT(*) FROM {self.table_name}", fetch="one")
        return row[0] if row else 0
