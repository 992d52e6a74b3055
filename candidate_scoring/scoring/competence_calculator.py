# candidate_scoring/scoring/competence_calculator.py
"""
Competence Calculator
---------------------
Scores a candidate's preparation for the office from the normalized
education list and the merged experience + political-trajectory list.

    education   = level points (highest entry) + depth bonus      capped at 30
    experience  = total tier on unique years                      capped at 25
                + Σ min(years, 10) × role × seniority × relevance  capped at 25
    leadership  = max seniority points + stability tier           capped at 20

    competence  = clamp(round(education + experience + leadership), 0, 100)

Role weights are points per year and depend on the office being sought:
an international post matters more for the Andean Parliament than for the
Senate. Open-ended roles close at the configured as_of_year, never at the
wall clock, so identical input always yields identical points.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from candidate_scoring.models.candidate import EducationEntry, ExperienceEntry
from candidate_scoring.models.enumerations import (
    EducationLevel,
    OfficeCategory,
    RoleType,
    SeniorityLevel,
)
from candidate_scoring.scoring.taxonomy import fold_text
from candidate_scoring.scoring.utils import ZERO, clamp, duration_years, round_score, to_decimal

logger = structlog.get_logger(__name__)

EDUCATION_POINTS: Dict[EducationLevel, int] = {
    EducationLevel.NONE:                  0,
    EducationLevel.PRIMARY:               2,
    EducationLevel.SECONDARY_INCOMPLETE:  4,
    EducationLevel.SECONDARY_COMPLETE:    6,
    EducationLevel.TECHNICAL_INCOMPLETE:  7,
    EducationLevel.TECHNICAL_COMPLETE:    10,
    EducationLevel.UNIVERSITY_INCOMPLETE: 9,
    EducationLevel.UNIVERSITY_COMPLETE:   14,
    EducationLevel.PROFESSIONAL_TITLE:    16,
    EducationLevel.MASTERS:               18,
    EducationLevel.DOCTORATE:             22,
}

EDUCATION_CAP = 30
DEPTH_CAP = 8
HIGHER_EDUCATION_MIN_POINTS = 10
RECENT_EDUCATION_YEARS = 10

# Fields of study treated as relevant to public office
PUBLIC_OFFICE_FIELDS: Tuple[str, ...] = (
    "derecho", "law", "ciencia politica", "ciencias politicas", "political",
    "economia", "economics", "administracion", "administration",
    "gestion publica", "gobierno", "government", "politicas publicas",
    "public policy", "relaciones internacionales", "international relations",
)

# (min_years, points), first satisfied tier wins
EXPERIENCE_TOTAL_TIERS: Tuple[Tuple[int, int], ...] = ((15, 25), (11, 20), (8, 16), (5, 12), (2, 6))
EXPERIENCE_RELEVANT_CAP = Decimal("25")
MAX_YEARS_PER_ENTRY = 10

_EXECUTIVE_TABLE: Dict[RoleType, Decimal] = {
    RoleType.ELECTED_HIGH:           Decimal("3.0"),
    RoleType.EXEC_PUBLIC_HIGH:       Decimal("3.0"),
    RoleType.EXEC_PRIVATE_HIGH:      Decimal("2.8"),
    RoleType.EXEC_PUBLIC_MID:        Decimal("2.0"),
    RoleType.EXEC_PRIVATE_MID:       Decimal("1.8"),
    RoleType.INTERNATIONAL:          Decimal("1.8"),
    RoleType.ELECTED_MID:            Decimal("1.5"),
    RoleType.TECHNICAL_PROFESSIONAL: Decimal("1.2"),
    RoleType.ACADEMIA:               Decimal("1.0"),
    RoleType.PARTY_OFFICIAL:         Decimal("0.6"),
}

_LEGISLATIVE_TABLE: Dict[RoleType, Decimal] = {
    RoleType.ELECTED_HIGH:           Decimal("3.0"),
    RoleType.EXEC_PUBLIC_HIGH:       Decimal("2.6"),
    RoleType.ELECTED_MID:            Decimal("2.2"),
    RoleType.EXEC_PUBLIC_MID:        Decimal("2.0"),
    RoleType.EXEC_PRIVATE_HIGH:      Decimal("1.8"),
    RoleType.TECHNICAL_PROFESSIONAL: Decimal("1.6"),
    RoleType.EXEC_PRIVATE_MID:       Decimal("1.4"),
    RoleType.ACADEMIA:               Decimal("1.4"),
    RoleType.INTERNATIONAL:          Decimal("1.2"),
    RoleType.PARTY_OFFICIAL:         Decimal("0.8"),
}

_ANDEAN_TABLE: Dict[RoleType, Decimal] = {
    RoleType.INTERNATIONAL:          Decimal("3.0"),
    RoleType.ELECTED_HIGH:           Decimal("2.2"),
    RoleType.EXEC_PUBLIC_HIGH:       Decimal("2.2"),
    RoleType.ACADEMIA:               Decimal("1.8"),
    RoleType.TECHNICAL_PROFESSIONAL: Decimal("1.6"),
    RoleType.EXEC_PRIVATE_HIGH:      Decimal("1.6"),
    RoleType.EXEC_PUBLIC_MID:        Decimal("1.6"),
    RoleType.ELECTED_MID:            Decimal("1.6"),
    RoleType.EXEC_PRIVATE_MID:       Decimal("1.2"),
    RoleType.PARTY_OFFICIAL:         Decimal("0.8"),
}

ROLE_WEIGHTS: Dict[OfficeCategory, Dict[RoleType, Decimal]] = {
    OfficeCategory.PRESIDENT:         _EXECUTIVE_TABLE,
    OfficeCategory.VICE_PRESIDENT:    _EXECUTIVE_TABLE,
    OfficeCategory.SENATOR:           _LEGISLATIVE_TABLE,
    OfficeCategory.DEPUTY:            _LEGISLATIVE_TABLE,
    OfficeCategory.ANDEAN_PARLIAMENT: _ANDEAN_TABLE,
}

SENIORITY_WEIGHTS: Dict[SeniorityLevel, Decimal] = {
    SeniorityLevel.INDIVIDUAL_CONTRIBUTOR: Decimal("0.8"),
    SeniorityLevel.COORDINATOR:            Decimal("0.9"),
    SeniorityLevel.SUPERVISORY:            Decimal("1.0"),
    SeniorityLevel.MANAGEMENT:             Decimal("1.1"),
    SeniorityLevel.EXECUTIVE:              Decimal("1.2"),
}

# Public-sector, elected and international roles count at full relevance
FULL_RELEVANCE_ROLES = frozenset({
    RoleType.ELECTED_HIGH,
    RoleType.ELECTED_MID,
    RoleType.EXEC_PUBLIC_HIGH,
    RoleType.EXEC_PUBLIC_MID,
    RoleType.INTERNATIONAL,
})
REDUCED_RELEVANCE = Decimal("0.6")

SENIORITY_POINTS: Dict[SeniorityLevel, int] = {
    SeniorityLevel.INDIVIDUAL_CONTRIBUTOR: 2,
    SeniorityLevel.COORDINATOR:            6,
    SeniorityLevel.SUPERVISORY:            8,
    SeniorityLevel.MANAGEMENT:             10,
    SeniorityLevel.EXECUTIVE:              14,
}
STABILITY_TIERS: Tuple[Tuple[int, int], ...] = ((7, 6), (4, 4), (2, 2))
STABLE_LEADERSHIP_SENIORITY = frozenset({SeniorityLevel.MANAGEMENT, SeniorityLevel.EXECUTIVE})
LEADERSHIP_CAP = 20


@dataclass
class EducationPoints:
    level: int
    depth: int
    total: int


@dataclass
class ExperiencePoints:
    total: int
    relevant: Decimal        # quantized to 0.01
    raw_years: int
    unique_years: int
    has_overlap: bool


@dataclass
class LeadershipPoints:
    seniority: int
    stability: int
    total: int


@dataclass
class CompetenceResult:
    """Output of CompetenceCalculator.calculate()."""
    education: EducationPoints
    experience: ExperiencePoints
    leadership: LeadershipPoints
    score: int               # clamped to [0, 100]


def _tier(value: int, tiers: Sequence[Tuple[int, int]]) -> int:
    for min_value, points in tiers:
        if value >= min_value:
            return points
    return 0


def merge_year_intervals(intervals: Sequence[Tuple[int, int]]) -> int:
    """Total years covered by the union of [start, end) intervals."""
    covered = 0
    current_start: Optional[int] = None
    current_end: Optional[int] = None
    for start, end in sorted(i for i in intervals if i[1] > i[0]):
        if current_end is None or start > current_end:
            if current_end is not None:
                covered += current_end - current_start
            current_start, current_end = start, end
        else:
            current_end = max(current_end, end)
    if current_end is not None:
        covered += current_end - current_start
    return covered


class CompetenceCalculator:
    """Calculate the competence sub-score for one office category."""

    def __init__(self, as_of_year: int):
        self.as_of_year = as_of_year

    def _years(self, entry: ExperienceEntry) -> int:
        return duration_years(entry.start_year, entry.end_year, self.as_of_year)

    def _capped_years(self, entry: ExperienceEntry) -> int:
        return min(self._years(entry), MAX_YEARS_PER_ENTRY)

    def education_points(self, education: List[EducationEntry]) -> EducationPoints:
        if not education:
            return EducationPoints(level=0, depth=0, total=0)

        ranked = sorted(
            enumerate(education),
            key=lambda pair: (-EDUCATION_POINTS[pair[1].level], pair[0]),
        )
        highest = ranked[0][1]
        level = EDUCATION_POINTS[highest.level]

        depth = 0
        for _, entry in ranked[1:]:
            if EDUCATION_POINTS[entry.level] >= HIGHER_EDUCATION_MIN_POINTS:
                depth += 2
        field = fold_text(highest.field)
        if field and any(p in field for p in PUBLIC_OFFICE_FIELDS):
            depth += 1
        if highest.is_verified:
            depth += 1
        if highest.year is not None and highest.year >= self.as_of_year - RECENT_EDUCATION_YEARS:
            depth += 1
        depth = min(depth, DEPTH_CAP)

        return EducationPoints(level=level, depth=depth, total=min(level + depth, EDUCATION_CAP))

    def experience_points(
        self,
        experience: List[ExperienceEntry],
        office_category: OfficeCategory,
    ) -> ExperiencePoints:
        intervals = []
        raw_years = 0
        for entry in experience:
            years = self._years(entry)
            if years <= 0:
                continue
            raw_years += years
            intervals.append((entry.start_year, entry.start_year + years))
        unique_years = merge_year_intervals(intervals)

        role_table = ROLE_WEIGHTS[office_category]
        relevant = ZERO
        for entry in experience:
            relevance = Decimal("1") if entry.role_type in FULL_RELEVANCE_ROLES else REDUCED_RELEVANCE
            relevant += (
                Decimal(self._capped_years(entry))
                * role_table[entry.role_type]
                * SENIORITY_WEIGHTS[entry.seniority_level]
                * relevance
            )
        relevant = to_decimal(min(relevant, EXPERIENCE_RELEVANT_CAP), places=2)

        return ExperiencePoints(
            total=_tier(unique_years, EXPERIENCE_TOTAL_TIERS),
            relevant=relevant,
            raw_years=raw_years,
            unique_years=unique_years,
            has_overlap=raw_years > unique_years,
        )

    def leadership_points(self, experience: List[ExperienceEntry]) -> LeadershipPoints:
        leadership = [e for e in experience if e.is_leadership]
        if not leadership:
            return LeadershipPoints(seniority=0, stability=0, total=0)

        seniority = max(SENIORITY_POINTS[e.seniority_level] for e in leadership)
        stable_years = sum(
            self._capped_years(e) for e in leadership
            if e.seniority_level in STABLE_LEADERSHIP_SENIORITY
        )
        stability = _tier(stable_years, STABILITY_TIERS)

        return LeadershipPoints(
            seniority=seniority,
            stability=stability,
            total=min(seniority + stability, LEADERSHIP_CAP),
        )

    def calculate(
        self,
        education: List[EducationEntry],
        experience: List[ExperienceEntry],
        office_category: OfficeCategory,
    ) -> CompetenceResult:
        """
        Args:
            education: Normalized education entries.
            experience: Merged experience and political-trajectory entries.
            office_category: Office sought; selects the role-weight table.

        Returns:
            CompetenceResult with every component and the rounded score.
        """
        edu = self.education_points(education)
        exp = self.experience_points(experience, office_category)
        lead = self.leadership_points(experience)

        raw = Decimal(edu.total) + Decimal(exp.total) + exp.relevant + Decimal(lead.total)
        score = round_score(clamp(raw))

        logger.info(
            "competence_calculated",
            office=office_category.value,
            education=edu.total,
            experience_total=exp.total,
            experience_relevant=float(exp.relevant),
            leadership=lead.total,
            score=score,
        )
        return CompetenceResult(education=edu, experience=exp, leadership=lead, score=score)
