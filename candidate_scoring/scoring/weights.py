# candidate_scoring/scoring/weights.py
"""
Weight presets for the composite scores.

A WeightPreset maps each sub-score (and optionally plan viability) to a
weight; weights are non-negative Decimals summing to exactly 1.0. Presets
are immutable and grouped into a versioned PresetFamily that the
CompositeCombiner receives explicitly.

    preset              C     I     T     Conf  Plan
    balanced            0.30  0.30  0.20  0.20  -
    merit_first         0.45  0.25  0.15  0.15  -
    integrity_first     0.25  0.45  0.15  0.15  -
    balanced_p          0.25  0.25  0.15  0.15  0.20   (president only)
    merit_first_p       0.35  0.20  0.10  0.10  0.25   (president only)
    integrity_first_p   0.20  0.35  0.10  0.10  0.25   (president only)
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Mapping, Tuple

from candidate_scoring.core.exceptions import InvalidWeightsError
from candidate_scoring.scoring.utils import Number, ZERO

SUBSCORE_NAMES: Tuple[str, ...] = ("competence", "integrity", "transparency", "confidence")
WEIGHT_NAMES: Tuple[str, ...] = SUBSCORE_NAMES + ("plan_viability",)

SUM_TOLERANCE = Decimal("1e-9")


@dataclass(frozen=True)
class WeightPreset:
    """Named, validated weight set."""
    name: str
    competence: Decimal
    integrity: Decimal
    transparency: Decimal
    confidence: Decimal
    plan_viability: Decimal = ZERO

    def __post_init__(self):
        for attr in WEIGHT_NAMES:
            raw = getattr(self, attr)
            try:
                value = raw if isinstance(raw, Decimal) else Decimal(str(raw))
            except ArithmeticError as exc:
                raise InvalidWeightsError(f"{self.name}: weight '{attr}' is not a number: {raw!r}") from exc
            if not value.is_finite() or value < ZERO:
                raise InvalidWeightsError(f"{self.name}: weight '{attr}' must be a non-negative number, got {raw!r}")
            object.__setattr__(self, attr, value)

        total = self.total
        if abs(total - Decimal("1")) > SUM_TOLERANCE:
            raise InvalidWeightsError(
                f"{self.name}: weights must sum to 1.0, got {total}",
                weights=self.as_dict(),
            )

    @property
    def total(self) -> Decimal:
        return sum((getattr(self, attr) for attr in WEIGHT_NAMES), ZERO)

    @property
    def uses_plan_viability(self) -> bool:
        return self.plan_viability > ZERO

    def as_dict(self) -> Dict[str, Decimal]:
        return {attr: getattr(self, attr) for attr in WEIGHT_NAMES}


class CustomWeights(WeightPreset):
    """
    Caller-supplied weights.

    Validated exactly like a preset: weights that do not sum to 1.0 raise
    InvalidWeightsError and are never renormalized.
    """

    @classmethod
    def from_mapping(cls, weights: Mapping[str, Number], name: str = "custom") -> "CustomWeights":
        unknown = set(weights) - set(WEIGHT_NAMES)
        if unknown:
            raise InvalidWeightsError(
                f"{name}: unknown weight keys {sorted(unknown)}; expected a subset of {list(WEIGHT_NAMES)}",
                weights=dict(weights),
            )
        return cls(name=name, **{attr: weights.get(attr, ZERO) for attr in WEIGHT_NAMES})


@dataclass(frozen=True)
class PresetFamily:
    """Versioned set of the three standard presets and their plan-aware variants."""
    version: str
    balanced: WeightPreset
    merit_first: WeightPreset
    integrity_first: WeightPreset
    balanced_p: WeightPreset
    merit_first_p: WeightPreset
    integrity_first_p: WeightPreset

    def __post_init__(self):
        for preset in self.standard:
            if preset.uses_plan_viability:
                raise InvalidWeightsError(f"{self.version}: standard preset '{preset.name}' must not weigh plan viability")
        for preset in self.plan_aware:
            if not preset.uses_plan_viability:
                raise InvalidWeightsError(f"{self.version}: plan-aware preset '{preset.name}' has no plan viability weight")

    @property
    def standard(self) -> Tuple[WeightPreset, WeightPreset, WeightPreset]:
        return (self.balanced, self.merit_first, self.integrity_first)

    @property
    def plan_aware(self) -> Tuple[WeightPreset, WeightPreset, WeightPreset]:
        return (self.balanced_p, self.merit_first_p, self.integrity_first_p)

    def get(self, name: str) -> WeightPreset:
        for preset in self.standard + self.plan_aware:
            if preset.name == name:
                return preset
        raise KeyError(name)


def _d(value: str) -> Decimal:
    return Decimal(value)


DEFAULT_PRESET_FAMILY = PresetFamily(
    version="v1",
    balanced=WeightPreset("balanced", _d("0.30"), _d("0.30"), _d("0.20"), _d("0.20")),
    merit_first=WeightPreset("merit_first", _d("0.45"), _d("0.25"), _d("0.15"), _d("0.15")),
    integrity_first=WeightPreset("integrity_first", _d("0.25"), _d("0.45"), _d("0.15"), _d("0.15")),
    balanced_p=WeightPreset("balanced_p", _d("0.25"), _d("0.25"), _d("0.15"), _d("0.15"), _d("0.20")),
    merit_first_p=WeightPreset("merit_first_p", _d("0.35"), _d("0.20"), _d("0.10"), _d("0.10"), _d("0.25")),
    integrity_first_p=WeightPreset("integrity_first_p", _d("0.20"), _d("0.35"), _d("0.10"), _d("0.10"), _d("0.25")),
)
