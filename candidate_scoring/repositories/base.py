"""
Base Repositories - Candidate Evaluation Scoring Engine
candidate_scoring/repositories/base.py

Storage contracts used by the batch driver and the auditor, the row
(de)serialization shared by every store, and the Snowflake base class
with connection management.
"""

import json
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Generator, Iterable, List, Mapping, Optional, Tuple

import snowflake.connector
from snowflake.connector import DictCursor
from snowflake.connector.errors import DatabaseError, InterfaceError, ProgrammingError

from candidate_scoring.core.exceptions import DatabaseConnectionException, RepositoryException
from candidate_scoring.models.enumerations import OfficeCategory
from candidate_scoring.models.score import (
    CandidateScore,
    ScoreBreakdown,
    ScoreResult,
    StoredScore,
    UnreadableRow,
)
from candidate_scoring.services.snowflake import get_snowflake_connection

logger = logging.getLogger(__name__)


# =========================================================================
# Contracts
# =========================================================================

class CandidateRepository(ABC):
    """Source of raw candidate records."""

    @abstractmethod
    def list_active_candidates(self) -> List[Dict[str, Any]]:
        """Raw records of every candidate that should be (re)scored."""


class ScoreRepository(ABC):
    """
    Store of ScoreResult / ScoreBreakdown pairs keyed by candidate id.

    upsert_score replaces both rows in full; there is never a partial update.
    """

    @abstractmethod
    def upsert_score(self, score: CandidateScore) -> None:
        ...

    @abstractmethod
    def get_score(self, candidate_id: str) -> Optional[StoredScore]:
        ...

    @abstractmethod
    def list_stored_scores(self) -> List[StoredScore]:
        ...


# =========================================================================
# Row (de)serialization
# =========================================================================

RESULT_COLUMNS = (
    "competence", "integrity", "transparency", "confidence",
    "balanced", "merit_first", "integrity_first",
    "plan_viability", "balanced_p", "merit_first_p", "integrity_first_p",
)


def load_variant(value: Any) -> Any:
    # VARIANT columns come back from the connector as JSON text
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


def score_to_row(
    score: CandidateScore,
    national_id: Optional[str] = None,
    full_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Flat, JSON-ready row: identity + result columns + nested breakdown."""
    row: Dict[str, Any] = {
        "candidate_id": score.candidate_id,
        "office_category": score.office_category.value,
        "national_id": national_id,
        "full_name": full_name,
    }
    row.update(score.result.to_dict())
    row["breakdown"] = score.breakdown.to_dict()
    return row


def stored_score_from_row(row: Mapping[str, Any]) -> StoredScore:
    """
    Build a StoredScore from a flat row (lower-case keys).

    Values are taken as stored, out-of-range ones included, so the auditor
    sees exactly what the store holds.
    """
    breakdown = load_variant(row.get("breakdown"))
    return StoredScore(
        candidate_id=str(row["candidate_id"]),
        office_category=OfficeCategory(row["office_category"]),
        result=ScoreResult.from_dict({k: row.get(k) for k in RESULT_COLUMNS}),
        breakdown=ScoreBreakdown.from_dict(breakdown) if breakdown else None,
        national_id=row.get("national_id"),
        full_name=row.get("full_name"),
    )


def parse_stored_rows(rows: Iterable[Any]) -> Tuple[List[StoredScore], List[UnreadableRow]]:
    """
    Parse every row it can; the rest come back as UnreadableRow entries
    so the auditor can report them instead of stopping.
    """
    stored: List[StoredScore] = []
    unreadable: List[UnreadableRow] = []
    for row in rows:
        if not isinstance(row, Mapping):
            unreadable.append(UnreadableRow("<unknown>", f"Row is not an object: {type(row).__name__}"))
            continue
        try:
            stored.append(stored_score_from_row(row))
        except Exception as e:
            candidate_id = str(row.get("candidate_id") or "<unknown>")
            logger.warning(f"Unreadable stored row for {candidate_id}: {e}")
            unreadable.append(UnreadableRow(candidate_id, f"{type(e).__name__}: {e}"))
    return stored, unreadable


# =========================================================================
# Snowflake base
# =========================================================================

class SnowflakeRepository:
    """Base repository with Snowflake connection management."""

    @contextmanager
    def get_connection(self) -> Generator[snowflake.connector.SnowflakeConnection, None, None]:
        """Context manager for Snowflake connections."""
        conn = None
        try:
            conn = get_snowflake_connection()
            yield conn
        except InterfaceError as e:
            raise DatabaseConnectionException(f"Failed to connect to Snowflake: {e}")
        finally:
            if conn:
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
    ) -> Optional[Any]:
        """
        Execute a read query with error handling.

        Args:
            sql: SQL query string
            params: Query parameters
            fetch_one: Return single row
            fetch_all: Return all rows

        Returns:
            Query results or the affected row count
        """
        with self.get_cursor() as cursor:
            try:
                cursor.execute(sql, params or ())
                if fetch_one:
                    return cursor.fetchone()
                elif fetch_all:
                    return cursor.fetchall()
                return cursor.rowcount
            except ProgrammingError as e:
                raise RepositoryException(f"Query error: {e}")
            except DatabaseError as e:
                raise RepositoryException(f"Database error: {e}")

    def row_to_dict(self, row: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Convert Snowflake row (uppercase keys) to lowercase dict."""
        if row is None:
            return {}
        return {k.lower(): v for k, v in row.items()}
