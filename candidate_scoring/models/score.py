"""
Score output models.

ScoreResult and ScoreBreakdown are produced together by the scoring
service and persisted 1:1 per candidate; every recompute replaces both
rows in full. They are plain dataclasses (not pydantic models) because the
auditor must be able to load stored rows whose values are out of range.
"""

from dataclasses import asdict, dataclass, field, fields
from decimal import Decimal
from typing import Any, Dict, List, Optional

from candidate_scoring.models.enumerations import OfficeCategory


def _dec(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def _to_jsonable(obj):
    if isinstance(obj, dict):
        return {k: _to_jsonable(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_to_jsonable(v) for v in obj]
    elif isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, OfficeCategory):
        return obj.value
    return obj


@dataclass(frozen=True)
class CivilPenaltyItem:
    type: str
    penalty: int


@dataclass
class ScoreBreakdown:
    """Every itemized point contribution behind one ScoreResult."""
    # Competence: education
    education_points: int = 0
    education_level_points: int = 0
    education_depth_points: int = 0
    # Competence: experience
    experience_total_points: int = 0
    experience_relevant_points: Decimal = Decimal("0.00")
    experience_raw_years: int = 0
    experience_unique_years: int = 0
    experience_has_overlap: bool = False
    # Competence: leadership
    leadership_points: int = 0
    leadership_seniority_points: int = 0
    leadership_stability_points: int = 0
    # Integrity
    integrity_base: int = 100
    penal_penalty: Decimal = Decimal("0.0")
    civil_penalties: List[CivilPenaltyItem] = field(default_factory=list)
    civil_penalty: int = 0
    resignation_penalty: int = 0
    # Transparency
    completeness_points: int = 0
    consistency_points: int = 0
    assets_quality_points: int = 0
    # Confidence
    verification_points: int = 0
    coverage_points: int = 0
    # Provenance
    plan_viability_imputed: bool = False
    scoring_version: str = "v1"

    def to_dict(self) -> Dict[str, Any]:
        return _to_jsonable(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreBreakdown":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["civil_penalties"] = [
            item if isinstance(item, CivilPenaltyItem)
            else CivilPenaltyItem(type=str(item["type"]), penalty=int(item["penalty"]))
            for item in values.get("civil_penalties") or []
        ]
        for name in ("experience_relevant_points", "penal_penalty"):
            if name in values:
                values[name] = _dec(values[name])
        return cls(**values)


@dataclass
class ScoreResult:
    """Four sub-scores (ints) and the composites (one decimal place)."""
    competence: int
    integrity: int
    transparency: int
    confidence: int
    balanced: Decimal
    merit_first: Decimal
    integrity_first: Decimal
    plan_viability: Optional[Decimal] = None
    balanced_p: Optional[Decimal] = None
    merit_first_p: Optional[Decimal] = None
    integrity_first_p: Optional[Decimal] = None

    @property
    def subscores(self) -> Dict[str, int]:
        return {
            "competence": self.competence,
            "integrity": self.integrity,
            "transparency": self.transparency,
            "confidence": self.confidence,
        }

    @property
    def composites(self) -> Dict[str, Optional[Decimal]]:
        return {
            "balanced": self.balanced,
            "merit_first": self.merit_first,
            "integrity_first": self.integrity_first,
            "balanced_p": self.balanced_p,
            "merit_first_p": self.merit_first_p,
            "integrity_first_p": self.integrity_first_p,
        }

    def to_dict(self) -> Dict[str, Any]:
        return _to_jsonable(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreResult":
        return cls(
            competence=int(data["competence"]),
            integrity=int(data["integrity"]),
            transparency=int(data["transparency"]),
            confidence=int(data["confidence"]),
            balanced=_dec(data["balanced"]),
            merit_first=_dec(data["merit_first"]),
            integrity_first=_dec(data["integrity_first"]),
            plan_viability=_dec(data.get("plan_viability")),
            balanced_p=_dec(data.get("balanced_p")),
            merit_first_p=_dec(data.get("merit_first_p")),
            integrity_first_p=_dec(data.get("integrity_first_p")),
        )


@dataclass
class CandidateScore:
    """Output of the scoring service for one candidate."""
    candidate_id: str
    office_category: OfficeCategory
    result: ScoreResult
    breakdown: ScoreBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "office_category": self.office_category.value,
            "result": self.result.to_dict(),
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass
class StoredScore:
    """A persisted score row joined with the candidate identity, as read by the auditor."""
    candidate_id: str
    office_category: OfficeCategory
    result: ScoreResult
    breakdown: Optional[ScoreBreakdown] = None
    national_id: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def label(self) -> str:
        name = self.full_name or self.candidate_id
        return f"{name} ({self.office_category.value})"


@dataclass
class UnreadableRow:
    """A stored row that could not be turned into a StoredScore."""
    candidate_id: str
    error: str
