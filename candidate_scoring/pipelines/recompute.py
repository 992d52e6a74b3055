"""
Batch recompute driver.

Iterates every active candidate, scores it and upserts the result:

    raw record → record mapper → four calculators → composites → upsert

Candidates are independent, so they are fanned out over a thread pool.
A failure while scoring or storing one candidate becomes a failed
ItemOutcome; it is logged with the candidate id and never aborts the
batch. Re-running after a partial failure is safe because every write is
a full-row replacement keyed by candidate id.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from candidate_scoring.repositories.base import CandidateRepository, ScoreRepository
from candidate_scoring.scoring.integration_service import CandidateScoringService
from candidate_scoring.scoring.record_mapper import resolve_field

logger = logging.getLogger(__name__)


@dataclass
class ItemOutcome:
    """Result of one candidate in a batch: ok, or the error text."""
    candidate_id: str
    ok: bool
    error: Optional[str] = None
    balanced: Optional[float] = None


@dataclass
class BatchReport:
    """Summary of one recompute pass."""
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    dry_run: bool = False
    duration_seconds: float = 0.0
    failures: List[ItemOutcome] = field(default_factory=list)

    def add(self, outcome: ItemOutcome) -> None:
        self.processed += 1
        if outcome.ok:
            self.succeeded += 1
        else:
            self.failed += 1
            self.failures.append(outcome)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "dry_run": self.dry_run,
            "duration_seconds": round(self.duration_seconds, 2),
            "failures": [
                {"candidate_id": f.candidate_id, "error": f.error}
                for f in self.failures
            ],
        }


class RecomputeService:
    """Recompute and store scores for all active candidates."""

    def __init__(
        self,
        candidate_repository: CandidateRepository,
        score_repository: ScoreRepository,
        scoring_service: Optional[CandidateScoringService] = None,
        workers: Optional[int] = None,
        dry_run: bool = False,
    ):
        if workers is None:
            from candidate_scoring.config import get_settings
            workers = get_settings().RECOMPUTE_WORKERS

        self.candidates = candidate_repository
        self.scores = score_repository
        self.scoring_service = scoring_service or CandidateScoringService()
        self.workers = max(1, workers)
        self.dry_run = dry_run

    def recompute_one(self, record: Mapping[str, Any]) -> ItemOutcome:
        """Score and store one record. Never raises."""
        candidate_id = "<unknown>"
        try:
            if isinstance(record, Mapping):
                candidate_id = str(resolve_field(record, "candidate_id", "<unknown>"))
            score = self.scoring_service.score_record(record)
            if not self.dry_run:
                self.scores.upsert_score(score)
            return ItemOutcome(candidate_id=candidate_id, ok=True, balanced=float(score.result.balanced))
        except Exception as e:
            logger.error(f"Failed to recompute candidate {candidate_id}: {e}", exc_info=True)
            return ItemOutcome(candidate_id=candidate_id, ok=False, error=f"{type(e).__name__}: {e}")

    def recompute_all(self, records: Optional[Iterable[Mapping[str, Any]]] = None) -> BatchReport:
        """
        Recompute every active candidate (or the given records).

        Returns:
            BatchReport with processed / succeeded / failed counts and failures.
        """
        start = time.monotonic()
        if records is None:
            records = self.candidates.list_active_candidates()
        records = list(records)

        logger.info("=" * 60)
        logger.info("SCORE RECOMPUTE STARTED")
        logger.info(f"  Candidates: {len(records)}")
        logger.info(f"  Workers:    {self.workers}")
        logger.info(f"  Dry run:    {self.dry_run}")
        logger.info("=" * 60)

        report = BatchReport(dry_run=self.dry_run)
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            for outcome in pool.map(self.recompute_one, records):
                report.add(outcome)
                if report.processed % 100 == 0:
                    logger.info(f"  [{report.processed}/{len(records)}] processed, {report.failed} failed")

        report.duration_seconds = time.monotonic() - start

        logger.info("=" * 60)
        logger.info("SCORE RECOMPUTE COMPLETE")
        logger.info(f"  Duration:   {report.duration_seconds:.1f}s")
        logger.info(f"  Processed:  {report.processed}")
        logger.info(f"  Succeeded:  {report.succeeded}")
        logger.info(f"  Failed:     {report.failed}")
        logger.info("=" * 60)
        return report
