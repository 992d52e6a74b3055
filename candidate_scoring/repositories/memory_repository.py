"""
In-Memory Repositories - Candidate Evaluation Scoring Engine
candidate_scoring/repositories/memory_repository.py

Process-local stores used by tests, dry runs and file-based runs of the
CLI scripts. Writes are full-row replacements under a lock, matching the
semantics of the Snowflake MERGE upsert.
"""

import copy
import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional

from candidate_scoring.models.score import CandidateScore, StoredScore
from candidate_scoring.repositories.base import (
    CandidateRepository,
    ScoreRepository,
    score_to_row,
    stored_score_from_row,
)
from candidate_scoring.scoring.record_mapper import resolve_field

logger = logging.getLogger(__name__)


class InMemoryCandidateRepository(CandidateRepository):
    """
    Serves a fixed list of raw candidate records.

    Items that are not objects are kept as-is so the batch driver reports
    them as failed candidates instead of dropping them silently.
    """

    def __init__(self, records: Optional[Iterable[Any]] = None):
        self._records: List[Any] = [
            dict(r) if isinstance(r, Mapping) else r for r in (records or [])
        ]

    def list_active_candidates(self) -> List[Any]:
        return [
            copy.deepcopy(r) for r in self._records
            if not isinstance(r, Mapping) or r.get("is_active", True) is not False
        ]


class InMemoryScoreRepository(ScoreRepository):
    """
    Dict-backed score store keyed by candidate id.

    ``identities`` maps candidate id -> raw record; national id and full name
    are read from it when rows are listed for the auditor.
    """

    def __init__(self, identities: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self._rows: Dict[str, CandidateScore] = {}
        self._identities: Dict[str, Mapping[str, Any]] = dict(identities or {})
        self._lock = threading.Lock()

    def upsert_score(self, score: CandidateScore) -> None:
        with self._lock:
            self._rows[score.candidate_id] = copy.deepcopy(score)
        logger.debug("Upserted score for %s", score.candidate_id)

    def _to_stored(self, score: CandidateScore) -> StoredScore:
        identity = self._identities.get(score.candidate_id, {})
        national_id = resolve_field(identity, "national_id")
        full_name = resolve_field(identity, "full_name")
        return stored_score_from_row(score_to_row(
            score,
            national_id=str(national_id) if national_id is not None else None,
            full_name=full_name,
        ))

    def get_score(self, candidate_id: str) -> Optional[StoredScore]:
        with self._lock:
            score = self._rows.get(candidate_id)
        return self._to_stored(score) if score is not None else None

    def get_candidate_score(self, candidate_id: str) -> Optional[CandidateScore]:
        with self._lock:
            score = self._rows.get(candidate_id)
        return copy.deepcopy(score) if score is not None else None

    def list_stored_scores(self) -> List[StoredScore]:
        with self._lock:
            scores = [self._rows[key] for key in sorted(self._rows)]
        return [self._to_stored(s) for s in scores]

    def export_rows(self) -> List[Dict[str, Any]]:
        """Flat JSON-ready rows, as written by ``recompute_all --output``."""
        with self._lock:
            scores = [self._rows[key] for key in sorted(self._rows)]
        rows = []
        for score in scores:
            stored = self._to_stored(score)
            rows.append(score_to_row(score, national_id=stored.national_id, full_name=stored.full_name))
        return rows

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)
