# candidate_scoring/scoring/composite_calculator.py
"""
Composite Combiner
------------------
Folds the four rounded sub-scores into the named composites.

    composite = Σ weight_k × subscore_k  (+ weight_plan × plan_viability)

rounded half-up to one decimal. Composites are linear with non-negative
weights, so they stay in [0, 100] whenever the inputs do and never fall
when a positively weighted input rises.

Plan-aware composites are produced only when a plan viability value is
supplied; the scoring service supplies one for the president office only.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Mapping, Optional

from candidate_scoring.core.exceptions import InvalidWeightsError
from candidate_scoring.scoring.utils import Number, ZERO, clamp, round_composite, to_decimal
from candidate_scoring.scoring.weights import (
    DEFAULT_PRESET_FAMILY,
    SUBSCORE_NAMES,
    PresetFamily,
    WeightPreset,
)

logger = structlog.get_logger(__name__)


@dataclass
class CompositeResult:
    """Output of CompositeCombiner.combine()."""
    balanced: Decimal
    merit_first: Decimal
    integrity_first: Decimal
    plan_composites: Optional[Dict[str, Decimal]] = None   # balanced_p / merit_first_p / integrity_first_p
    custom: Optional[Decimal] = None


def weighted_score(
    subscores: Mapping[str, Number],
    weights: WeightPreset,
    plan_viability: Optional[Number] = None,
) -> Decimal:
    """
    Weighted sum of the sub-scores for one preset or custom weight set.

    Raises:
        InvalidWeightsError: weights include plan viability but no value was given.
    """
    total = ZERO
    for name in SUBSCORE_NAMES:
        total += getattr(weights, name) * to_decimal(subscores[name])
    if weights.uses_plan_viability:
        if plan_viability is None:
            raise InvalidWeightsError(
                f"{weights.name}: weighs plan viability but no plan viability value was supplied",
                weights=weights.as_dict(),
            )
        total += weights.plan_viability * to_decimal(plan_viability)
    return round_composite(clamp(total))


class CompositeCombiner:
    """Combine sub-scores into the preset composites of one PresetFamily."""

    def __init__(self, family: PresetFamily = DEFAULT_PRESET_FAMILY):
        self.family = family

    def combine(
        self,
        subscores: Mapping[str, Number],
        plan_viability: Optional[Number] = None,
        custom_weights: Optional[WeightPreset] = None,
    ) -> CompositeResult:
        """
        Args:
            subscores: competence / integrity / transparency / confidence, each 0-100.
            plan_viability: External plan rating (0-100), president office only.
            custom_weights: Optional caller weights; adds CompositeResult.custom.

        Returns:
            CompositeResult with the three standard composites, plus the
            plan-aware ones when plan_viability is given.
        """
        result = CompositeResult(
            balanced=weighted_score(subscores, self.family.balanced),
            merit_first=weighted_score(subscores, self.family.merit_first),
            integrity_first=weighted_score(subscores, self.family.integrity_first),
        )

        if plan_viability is not None:
            result.plan_composites = {
                preset.name: weighted_score(subscores, preset, plan_viability)
                for preset in self.family.plan_aware
            }

        if custom_weights is not None:
            result.custom = weighted_score(subscores, custom_weights, plan_viability)

        logger.info(
            "composites_calculated",
            preset_family=self.family.version,
            balanced=float(result.balanced),
            merit_first=float(result.merit_first),
            integrity_first=float(result.integrity_first),
            plan_aware=plan_viability is not None,
            custom=custom_weights.name if custom_weights is not None else None,
        )
        return result
