"""
Recompute scores for every active candidate.

Usage:
    python -m candidate_scoring.scripts.recompute_all                          # Snowflake → Snowflake
    python -m candidate_scoring.scripts.recompute_all --dry-run                # score only, no writes
    python -m candidate_scoring.scripts.recompute_all --input records.json \
        --output scores.json                                                   # file → file
    python -m candidate_scoring.scripts.recompute_all --workers 16 --fail-on-error
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recompute candidate scores and upsert them")
    parser.add_argument("--dry-run", action="store_true", help="Score every candidate without writing")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads (default: RECOMPUTE_WORKERS)")
    parser.add_argument("--input", type=Path, default=None,
                        help="JSON file with a list of raw candidate records instead of Snowflake")
    parser.add_argument("--output", type=Path, default=None,
                        help="With --input: write the stored score rows to this JSON file")
    parser.add_argument("--fail-on-error", action="store_true",
                        help="Exit 1 when any candidate failed")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    from candidate_scoring.config import settings
    from candidate_scoring.core.logging_config import configure_logging
    from candidate_scoring.pipelines.recompute import RecomputeService

    configure_logging(settings.LOG_LEVEL)

    if args.input is not None:
        from candidate_scoring.repositories.memory_repository import (
            InMemoryCandidateRepository,
            InMemoryScoreRepository,
        )
        from candidate_scoring.scoring.record_mapper import resolve_field

        records = json.loads(args.input.read_text(encoding="utf-8"))
        if not isinstance(records, list):
            logger.error(f"{args.input} must contain a JSON list of candidate records")
            return 2
        candidates = InMemoryCandidateRepository(records)
        scores = InMemoryScoreRepository({
            str(resolve_field(r, "candidate_id")): r
            for r in records
            if isinstance(r, dict) and resolve_field(r, "candidate_id") is not None
        })
        logger.info(f"Loaded {len(records)} records from {args.input}")
    else:
        from candidate_scoring.repositories.score_repository import (
            SnowflakeCandidateRepository,
            SnowflakeScoreRepository,
        )
        candidates = SnowflakeCandidateRepository()
        scores = SnowflakeScoreRepository()

    service = RecomputeService(candidates, scores, workers=args.workers, dry_run=args.dry_run)
    report = service.recompute_all()

    if args.output is not None:
        if args.input is None:
            logger.warning("--output is only supported together with --input; ignoring")
        else:
            args.output.write_text(json.dumps(scores.export_rows(), indent=2), encoding="utf-8")
            logger.info(f"Wrote {len(scores)} score rows to {args.output}")

    print(json.dumps(report.to_dict(), indent=2))

    if args.fail_on_error and report.failed:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
