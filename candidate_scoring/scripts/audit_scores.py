"""
Audit stored scores for drift, range violations and anomalies.

Read-only: the store is never modified. The exit status is 1 when the
anomaly count exceeds --max-anomalies (default 0), so the audit can gate
a CI job. Rows that cannot be parsed are reported as critical anomalies;
an --input file that is not a JSON list exits 2.

Usage:
    python -m candidate_scoring.scripts.audit_scores                       # audit Snowflake
    python -m candidate_scoring.scripts.audit_scores --input scores.json   # audit an exported file
    python -m candidate_scoring.scripts.audit_scores --json --max-anomalies 25
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the invariant checker over stored scores")
    parser.add_argument("--input", type=Path, default=None,
                        help="JSON file of stored score rows instead of Snowflake")
    parser.add_argument("--json", action="store_true", help="Print the full report as JSON")
    parser.add_argument("--max-anomalies", type=int, default=0,
                        help="Exit 1 when more anomalies than this are found (default: 0)")
    return parser


def _print_summary(report) -> None:
    print("=" * 60)
    print("SCORE AUDIT")
    print(f"  Rows checked: {report.rows_checked}")
    print(f"  Anomalies:    {report.anomaly_count}")
    for severity, count in sorted(report.counts_by_severity.items()):
        print(f"    {severity:<10} {count}")
    print("=" * 60)
    for code, count in sorted(report.counts_by_code.items()):
        print(f"  {code:<24} {count}")
    for anomaly in report.anomalies[:50]:
        print(f"  [{anomaly.severity.value.upper():<8}] {anomaly.label}: {anomaly.message}")
    if report.anomaly_count > 50:
        print(f"  ... {report.anomaly_count - 50} more")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    from candidate_scoring.config import settings
    from candidate_scoring.core.logging_config import configure_logging
    from candidate_scoring.repositories.base import parse_stored_rows
    from candidate_scoring.scoring.invariant_checker import InvariantChecker

    configure_logging(settings.LOG_LEVEL)

    if args.input is not None:
        rows = json.loads(args.input.read_text(encoding="utf-8"))
        if not isinstance(rows, list):
            logger.error(f"{args.input} must contain a JSON list of stored score rows")
            return 2
        logger.info(f"Loaded {len(rows)} stored rows from {args.input}")
    else:
        from candidate_scoring.repositories.score_repository import SnowflakeScoreRepository
        rows = SnowflakeScoreRepository().list_stored_rows()

    stored, unreadable = parse_stored_rows(rows)
    report = InvariantChecker().audit(stored, unreadable=unreadable)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, default=str))
    else:
        _print_summary(report)

    return 1 if report.anomaly_count > args.max_anomalies else 0


if __name__ == "__main__":
    sys.exit(main())
