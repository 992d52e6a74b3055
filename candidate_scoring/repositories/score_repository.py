"""
Score Repository: Snowflake persistence
candidate_scoring/repositories/score_repository.py

Tables:
  - candidates                  (raw records, read only)
  - candidate_scores            (one ScoreResult row per candidate)
  - candidate_score_breakdowns  (one ScoreBreakdown row per candidate, VARIANT)

Both score tables are written with MERGE keyed by candidate_id; every
write replaces the full row.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from snowflake.connector.errors import DatabaseError

from candidate_scoring.core.exceptions import RepositoryException
from candidate_scoring.models.score import CandidateScore, StoredScore
from candidate_scoring.repositories.base import (
    CandidateRepository,
    ScoreRepository,
    SnowflakeRepository,
    load_variant,
    stored_score_from_row,
)

logger = logging.getLogger(__name__)

# JSON-array columns of the candidates table
_VARIANT_COLUMNS = (
    "education_details",
    "experience_details",
    "political_trajectory",
    "penal_sentences",
    "civil_sentences",
    "assets_declaration",
)


class SnowflakeCandidateRepository(SnowflakeRepository, CandidateRepository):
    """Reads active candidate records from the candidates table."""

    def list_active_candidates(self) -> List[Dict[str, Any]]:
        sql = """
        SELECT id, full_name, dni, cargo,
               education_details, experience_details, political_trajectory,
               penal_sentences, civil_sentences, party_resignations,
               assets_declaration, birth_date, data_verified, data_source,
               verification_level, coverage_level,
               declaration_completeness, declaration_consistency, assets_quality,
               plan_viability
        FROM candidates
        WHERE is_active = TRUE
        ORDER BY id
        """
        rows = self.execute_query(sql, fetch_all=True) or []
        records = []
        for row in rows:
            record = self.row_to_dict(row)
            for column in _VARIANT_COLUMNS:
                record[column] = load_variant(record.get(column))
            records.append(record)
        logger.info(f"Loaded {len(records)} active candidates")
        return records


class SnowflakeScoreRepository(SnowflakeRepository, ScoreRepository):
    """Repository for candidate_scores / candidate_score_breakdowns."""

    _SELECT_STORED = """
        SELECT s.candidate_id, s.office_category,
               s.competence, s.integrity, s.transparency, s.confidence,
               s.balanced, s.merit_first, s.integrity_first,
               s.plan_viability, s.balanced_p, s.merit_first_p, s.integrity_first_p,
               b.breakdown,
               c.dni AS national_id, c.full_name
        FROM candidate_scores s
        LEFT JOIN candidate_score_breakdowns b ON b.candidate_id = s.candidate_id
        LEFT JOIN candidates c ON c.id = s.candidate_id
    """

    def upsert_score(self, score: CandidateScore) -> None:
        """Upsert the ScoreResult and ScoreBreakdown rows in one transaction."""
        result = score.result
        score_sql = """
        MERGE INTO candidate_scores t
        USING (SELECT %s AS candidate_id) s
        ON t.candidate_id = s.candidate_id
        WHEN MATCHED THEN UPDATE SET
            office_category = %s,
            competence = %s, integrity = %s, transparency = %s, confidence = %s,
            balanced = %s, merit_first = %s, integrity_first = %s,
            plan_viability = %s, balanced_p = %s, merit_first_p = %s, integrity_first_p = %s,
            updated_at = CURRENT_TIMESTAMP()
        WHEN NOT MATCHED THEN INSERT (
            candidate_id, office_category,
            competence, integrity, transparency, confidence,
            balanced, merit_first, integrity_first,
            plan_viability, balanced_p, merit_first_p, integrity_first_p,
            updated_at
        ) VALUES (
            %s, %s,
            %s, %s, %s, %s,
            %s, %s, %s,
            %s, %s, %s, %s,
            CURRENT_TIMESTAMP()
        )
        """
        values = (
            score.office_category.value,
            result.competence, result.integrity, result.transparency, result.confidence,
            result.balanced, result.merit_first, result.integrity_first,
            result.plan_viability, result.balanced_p, result.merit_first_p, result.integrity_first_p,
        )
        score_params = (score.candidate_id,) + values + (score.candidate_id,) + values

        breakdown_sql = """
        MERGE INTO candidate_score_breakdowns t
        USING (SELECT %s AS candidate_id) s
        ON t.candidate_id = s.candidate_id
        WHEN MATCHED THEN UPDATE SET
            breakdown = PARSE_JSON(%s),
            scoring_version = %s,
            updated_at = CURRENT_TIMESTAMP()
        WHEN NOT MATCHED THEN INSERT (
            candidate_id, breakdown, scoring_version, updated_at
        ) VALUES (
            %s, PARSE_JSON(%s), %s, CURRENT_TIMESTAMP()
        )
        """
        breakdown_json = json.dumps(score.breakdown.to_dict())
        version = score.breakdown.scoring_version
        breakdown_params = (
            score.candidate_id,
            breakdown_json, version,
            score.candidate_id, breakdown_json, version,
        )

        with self.get_connection() as conn:
            cur = conn.cursor()
            try:
                cur.execute(score_sql, score_params)
                cur.execute(breakdown_sql, breakdown_params)
                conn.commit()
            except DatabaseError as e:
                logger.error(f"Failed to upsert score for {score.candidate_id}: {e}")
                conn.rollback()
                raise RepositoryException(f"Failed to upsert score for {score.candidate_id}: {e}")
            finally:
                cur.close()

    def get_score(self, candidate_id: str) -> Optional[StoredScore]:
        row = self.execute_query(
            self._SELECT_STORED + " WHERE s.candidate_id = %s",
            (candidate_id,),
            fetch_one=True,
        )
        if not row:
            return None
        return stored_score_from_row(self.row_to_dict(row))

    def list_stored_rows(self) -> List[Dict[str, Any]]:
        """Raw joined rows, unparsed, for the auditor."""
        rows = self.execute_query(self._SELECT_STORED + " ORDER BY s.candidate_id", fetch_all=True) or []
        return [self.row_to_dict(row) for row in rows]

    def list_stored_scores(self) -> List[StoredScore]:
        return [stored_score_from_row(row) for row in self.list_stored_rows()]
