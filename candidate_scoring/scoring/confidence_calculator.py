"""
scoring/confidence_calculator.py

Computes the confidence sub-score: how much the other three sub-scores can
be trusted given the evidence behind them.

Formula:
    verification = round(verification_level / 100 × 50)
    coverage     = round(coverage_level / 100 × 50)
    confidence   = verification + coverage

Confidence is reported on its own and never folded into integrity or
transparency; composites weigh it explicitly.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from candidate_scoring.scoring.utils import HUNDRED, round_score

logger = logging.getLogger(__name__)


@dataclass
class ConfidenceResult:
    """Output of ConfidenceCalculator.calculate()."""
    verification: int     # 0-50
    coverage: int         # 0-50
    score: int            # 0-100


class ConfidenceCalculator:
    """Calculate the confidence sub-score from verification and coverage."""

    VERIFICATION_WEIGHT = Decimal("50")
    COVERAGE_WEIGHT = Decimal("50")

    def calculate(self, verification_level: int, coverage_level: int) -> ConfidenceResult:
        """
        Args:
            verification_level: Share of the record corroborated against authoritative sources (0-100).
            coverage_level: Share of expected record sections that are populated (0-100).

        Returns:
            ConfidenceResult with both parts and their sum.
        """
        verification = round_score(Decimal(verification_level) / HUNDRED * self.VERIFICATION_WEIGHT)
        coverage = round_score(Decimal(coverage_level) / HUNDRED * self.COVERAGE_WEIGHT)
        score = verification + coverage

        logger.debug(
            "Confidence: verification=%d coverage=%d score=%d",
            verification, coverage, score,
        )
        return ConfidenceResult(verification=verification, coverage=coverage, score=score)
