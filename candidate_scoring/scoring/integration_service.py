"""
scoring/integration_service.py

Full pipeline for one candidate: normalized profile → CandidateScore.

Class: CandidateScoringService
Methods:
    score_profile(candidate_id, profile, office_category, plan_viability) → CandidateScore
    score_record(record) → CandidateScore

Pipeline steps:
  1. CompetenceCalculator   → competence   (uses the office role-weight table)
  2. IntegrityCalculator    → integrity    (PenaltyTable)
  3. TransparencyCalculator → transparency
  4. ConfidenceCalculator   → confidence
  5. Plan viability: president only; imputed neutral 50 when absent
  6. CompositeCombiner      → composites from the rounded sub-scores
  7. ScoreResult + ScoreBreakdown

The four calculators are independent of each other. Nothing here reads
the clock, random state or a store, so identical input always yields an
identical CandidateScore.
"""

import logging
from decimal import Decimal
from typing import Any, Mapping, Optional

from candidate_scoring.core.exceptions import ScoringException
from candidate_scoring.models.candidate import CandidateProfile
from candidate_scoring.models.enumerations import OfficeCategory
from candidate_scoring.models.score import CandidateScore, ScoreBreakdown, ScoreResult
from candidate_scoring.scoring.competence_calculator import CompetenceCalculator
from candidate_scoring.scoring.composite_calculator import CompositeCombiner
from candidate_scoring.scoring.confidence_calculator import ConfidenceCalculator
from candidate_scoring.scoring.integrity_calculator import DEFAULT_PENALTY_TABLE, IntegrityCalculator, PenaltyTable
from candidate_scoring.scoring.record_mapper import (
    build_profile,
    parse_office_category,
    parse_plan_viability,
    resolve_field,
)
from candidate_scoring.scoring.transparency_calculator import TransparencyCalculator
from candidate_scoring.scoring.utils import Number, clamp, to_decimal
from candidate_scoring.scoring.weights import DEFAULT_PRESET_FAMILY, PresetFamily

logger = logging.getLogger(__name__)

NEUTRAL_PLAN_VIABILITY = Decimal("50.0")


class CandidateScoringService:
    """Score one candidate from a profile or a raw record."""

    def __init__(
        self,
        as_of_year: Optional[int] = None,
        penalty_table: PenaltyTable = DEFAULT_PENALTY_TABLE,
        preset_family: PresetFamily = DEFAULT_PRESET_FAMILY,
        scoring_version: Optional[str] = None,
    ):
        if as_of_year is None or scoring_version is None:
            from candidate_scoring.config import get_settings
            settings = get_settings()
            as_of_year = settings.AS_OF_YEAR if as_of_year is None else as_of_year
            scoring_version = settings.SCORING_VERSION if scoring_version is None else scoring_version

        self.as_of_year = as_of_year
        self.scoring_version = scoring_version

        self.competence_calculator = CompetenceCalculator(as_of_year)
        self.integrity_calculator = IntegrityCalculator(penalty_table)
        self.transparency_calculator = TransparencyCalculator()
        self.confidence_calculator = ConfidenceCalculator()
        self.combiner = CompositeCombiner(preset_family)

    # ------------------------------------------------------------------
    # Main pipeline
    # ------------------------------------------------------------------

    def score_profile(
        self,
        candidate_id: str,
        profile: CandidateProfile,
        office_category: OfficeCategory,
        plan_viability: Optional[Number] = None,
    ) -> CandidateScore:
        """
        Score a normalized profile for one office.

        Args:
            candidate_id: Store key of the candidate.
            profile: Normalized CandidateProfile.
            office_category: Office sought; selects role weights and plan handling.
            plan_viability: External plan rating (0-100). Used only for the
                            president office; ignored for every other office.

        Returns:
            CandidateScore with the ScoreResult and its full ScoreBreakdown.
        """
        competence = self.competence_calculator.calculate(
            profile.education, profile.experience, office_category
        )
        integrity = self.integrity_calculator.calculate(
            profile.penal_sentences, profile.civil_sentences, profile.party_resignations
        )
        transparency = self.transparency_calculator.calculate(
            profile.declaration_completeness,
            profile.declaration_consistency,
            profile.assets_quality,
        )
        confidence = self.confidence_calculator.calculate(
            profile.verification_level, profile.coverage_level
        )

        plan_value: Optional[Decimal] = None
        plan_imputed = False
        if office_category == OfficeCategory.PRESIDENT:
            if plan_viability is None:
                plan_value = NEUTRAL_PLAN_VIABILITY
                plan_imputed = True
            else:
                plan_value = to_decimal(clamp(to_decimal(plan_viability)), places=1)
        elif plan_viability is not None:
            logger.debug(
                "Dropping plan viability for non-presidential candidate %s (%s)",
                candidate_id, office_category.value,
            )

        subscores = {
            "competence": competence.score,
            "integrity": integrity.score,
            "transparency": transparency.score,
            "confidence": confidence.score,
        }
        composites = self.combiner.combine(subscores, plan_viability=plan_value)
        plan_composites = composites.plan_composites or {}

        result = ScoreResult(
            competence=competence.score,
            integrity=integrity.score,
            transparency=transparency.score,
            confidence=confidence.score,
            balanced=composites.balanced,
            merit_first=composites.merit_first,
            integrity_first=composites.integrity_first,
            plan_viability=plan_value,
            balanced_p=plan_composites.get("balanced_p"),
            merit_first_p=plan_composites.get("merit_first_p"),
            integrity_first_p=plan_composites.get("integrity_first_p"),
        )

        breakdown = ScoreBreakdown(
            education_points=competence.education.total,
            education_level_points=competence.education.level,
            education_depth_points=competence.education.depth,
            experience_total_points=competence.experience.total,
            experience_relevant_points=competence.experience.relevant,
            experience_raw_years=competence.experience.raw_years,
            experience_unique_years=competence.experience.unique_years,
            experience_has_overlap=competence.experience.has_overlap,
            leadership_points=competence.leadership.total,
            leadership_seniority_points=competence.leadership.seniority,
            leadership_stability_points=competence.leadership.stability,
            integrity_base=integrity.base,
            penal_penalty=integrity.penal_penalty,
            civil_penalties=list(integrity.civil_penalties),
            civil_penalty=integrity.civil_penalty,
            resignation_penalty=integrity.resignation_penalty,
            completeness_points=transparency.completeness,
            consistency_points=transparency.consistency,
            assets_quality_points=transparency.assets_quality,
            verification_points=confidence.verification,
            coverage_points=confidence.coverage,
            plan_viability_imputed=plan_imputed,
            scoring_version=self.scoring_version,
        )

        logger.info(
            "Scored %s (%s): C=%d I=%d T=%d Conf=%d balanced=%s",
            candidate_id, office_category.value,
            result.competence, result.integrity, result.transparency, result.confidence,
            result.balanced,
        )
        return CandidateScore(
            candidate_id=candidate_id,
            office_category=office_category,
            result=result,
            breakdown=breakdown,
        )

    def score_record(self, record: Mapping[str, Any]) -> CandidateScore:
        """
        Map a raw candidate record and score it.

        Raises:
            ScoringException: the record is not an object, or has no candidate id
                or no recognizable office.
        """
        if not isinstance(record, Mapping):
            raise ScoringException(f"Candidate record is not an object: {type(record).__name__}")

        candidate_id = resolve_field(record, "candidate_id")
        if candidate_id is None:
            raise ScoringException("Candidate record has no identifier")

        raw_office = resolve_field(record, "office_category")
        office_category = parse_office_category(raw_office)
        if office_category is None:
            raise ScoringException(f"Candidate {candidate_id}: unknown office category {raw_office!r}")

        profile = build_profile(record)
        plan_viability = parse_plan_viability(resolve_field(record, "plan_viability"))
        return self.score_profile(str(candidate_id), profile, office_category, plan_viability)
