# candidate_scoring/scoring/transparency_calculator.py
"""
Transparency Calculator
-----------------------
Weighted average of the three declaration indicators, each already 0-100:

    completeness  × 0.35
    consistency   × 0.35
    assets        × 0.30

Each part is rounded half-up to whole points before summing. An absent
indicator defaults to the neutral 50, so missing-but-not-contradictory
data does not read the same as actively poor disclosure.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from candidate_scoring.scoring.utils import HUNDRED, round_score

logger = structlog.get_logger(__name__)

NEUTRAL_DEFAULT = 50

COMPLETENESS_WEIGHT = Decimal("35")
CONSISTENCY_WEIGHT = Decimal("35")
ASSETS_QUALITY_WEIGHT = Decimal("30")


@dataclass
class TransparencyResult:
    """Output of TransparencyCalculator.calculate()."""
    completeness: int
    consistency: int
    assets_quality: int
    score: int


def _weighted_part(value: Optional[int], weight: Decimal) -> int:
    level = NEUTRAL_DEFAULT if value is None else value
    return round_score(Decimal(level) / HUNDRED * weight)


class TransparencyCalculator:

    def calculate(
        self,
        declaration_completeness: Optional[int],
        declaration_consistency: Optional[int],
        assets_quality: Optional[int],
    ) -> TransparencyResult:
        completeness = _weighted_part(declaration_completeness, COMPLETENESS_WEIGHT)
        consistency = _weighted_part(declaration_consistency, CONSISTENCY_WEIGHT)
        assets = _weighted_part(assets_quality, ASSETS_QUALITY_WEIGHT)
        score = completeness + consistency + assets

        logger.info(
            "transparency_calculated",
            completeness=completeness,
            consistency=consistency,
            assets_quality=assets,
            defaulted=[
                name for name, value in (
                    ("completeness", declaration_completeness),
                    ("consistency", declaration_consistency),
                    ("assets_quality", assets_quality),
                ) if value is None
            ],
            score=score,
        )
        return TransparencyResult(
            completeness=completeness,
            consistency=consistency,
            assets_quality=assets,
            score=score,
        )
