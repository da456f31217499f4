"""
Base Repository - Best Outgoing Student Award Portal
app/repositories/base.py

Base repository class with Snowflake connection management, plus the
storage interface the scoring layer depends on.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Protocol, Sequence

import snowflake.connector
from snowflake.connector import DictCursor
from snowflake.connector.errors import DatabaseError, InterfaceError, ProgrammingError

from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    RepositoryException,
)
from app.models.applicant import ApplicantRecord
from app.models.evaluation import EvaluationUpdate
from app.services.snowflake import get_snowflake_connection


class ApplicantStore(Protocol):
    """Read/write operations the ranking and evaluation layers need."""

    def get_all(self) -> List[ApplicantRecord]:
        ...

    def get_by_register_number(self, register_number: str) -> Optional[ApplicantRecord]:
        ...

    def update_evaluation(
        self,
        register_number: str,
        faculty_score: float,
        verified: bool,
        discarded_items: Sequence[str],
    ) -> bool:
        ...

    def batch_update_evaluations(self, updates: Sequence[EvaluationUpdate]) -> Dict[str, bool]:
        ...


class BaseRepository:
    """Base repository with Snowflake connection management."""

    @contextmanager
    def get_connection(self) -> Generator[snowflake.connector.SnowflakeConnection, None, None]:
        """Context manager for Snowflake connections."""
        try:
            conn = get_snowflake_connection()
        except (InterfaceError, DatabaseError) as e:
            raise DatabaseConnectionException(f"Failed to connect to Snowflake: {e}")
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def get_cursor(self, dict_cursor: bool = True) -> Generator[Any, None, None]:
        """Context manager for Snowflake cursors with automatic connection cleanup."""
        with self.get_connection() as conn:
            cursor = conn.cursor(DictCursor) if dict_cursor else conn.cursor()
            try:
                yield cursor
            finally:
                cursor.close()

    def execute_query(
        self,
        sql: str,
        params: Optional[tuple] = None,
        fetch_one: bool = False,
        fetch_all: bool = False,
        commit: bool = False,
    ) -> Optional[Any]:
        """
        Execute a SQL query with error handling.

        Args:
            sql: SQL query string
            params: Query parameters
            fetch_one: Return single row
            fetch_all: Return all rows
            commit: Commit transaction after execution

        Returns:
            Query results, or the affected row count
        """
        with self.get_cursor() as cursor:
            try:
                cursor.execute(sql, params or ())

                if commit:
                    cursor.connection.commit()

                if fetch_one:
                    return cursor.fetchone()
                elif fetch_all:
                    return cursor.fetchall()

                return cursor.rowcount

            except ProgrammingError as e:
                error_msg = str(e).upper()
                if "UNIQUE" in error_msg or "DUPLICATE" in error_msg:
                    raise DuplicateEntityException(str(e))
                raise RepositoryException(f"Query error: {e}")
            except DatabaseError as e:
                raise RepositoryException(f"Database error: {e}")

    def row_to_dict(self, row: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Convert Snowflake row (uppercase keys) to lowercase dict."""
        if row is None:
            return {}
        return {k.lower(): v for k, v in row.items()}
