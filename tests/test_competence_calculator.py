# tests/test_competence_calculator.py
"""
Competence Calculator tests: education depth, experience tiers and
relevance, leadership stability.
"""

from decimal import Decimal

import pytest

from candidate_scoring.models.candidate import EducationEntry, ExperienceEntry
from candidate_scoring.models.enumerations import (
    EducationLevel,
    OfficeCategory,
    RoleType,
    SeniorityLevel,
)
from candidate_scoring.scoring.competence_calculator import (
    CompetenceCalculator,
    EDUCATION_CAP,
    EDUCATION_POINTS,
    merge_year_intervals,
)

AS_OF_YEAR = 2026


@pytest.fixture
def calculator():
    return CompetenceCalculator(as_of_year=AS_OF_YEAR)


def _job(start, end=None, role_type=RoleType.TECHNICAL_PROFESSIONAL,
         seniority=SeniorityLevel.INDIVIDUAL_CONTRIBUTOR, leadership=False):
    return ExperienceEntry(
        role="role",
        role_type=role_type,
        start_year=start,
        end_year=end,
        is_leadership=leadership,
        seniority_level=seniority,
    )


class TestMergeYearIntervals:

    @pytest.mark.parametrize("intervals, expected", [
        ([], 0),
        ([(2010, 2015)], 5),
        ([(2010, 2015), (2015, 2020)], 10),
        ([(2010, 2020), (2012, 2014)], 10),
        ([(2000, 2005), (2010, 2012)], 7),
        ([(2010, 2010)], 0),
    ])
    def test_union(self, intervals, expected):
        assert merge_year_intervals(intervals) == expected


class TestEducationPoints:

    def test_empty(self, calculator):
        points = calculator.education_points([])
        assert (points.level, points.depth, points.total) == (0, 0, 0)

    def test_highest_level_only(self, calculator):
        points = calculator.education_points([EducationEntry(level=EducationLevel.SECONDARY_COMPLETE)])
        assert points.level == EDUCATION_POINTS[EducationLevel.SECONDARY_COMPLETE]
        assert points.depth == 0

    def test_depth_bonuses(self, calculator, clean_profile):
        points = calculator.education_points(clean_profile.education)
        # masters 18; +2 title entry, +1 public field, +1 verified, +1 recent
        assert (points.level, points.depth, points.total) == (18, 5, 23)

    def test_lower_entries_below_threshold_add_nothing(self, calculator):
        points = calculator.education_points([
            EducationEntry(level=EducationLevel.SECONDARY_COMPLETE),
            EducationEntry(level=EducationLevel.UNIVERSITY_COMPLETE, field="Biología", year=1990),
        ])
        assert (points.level, points.depth) == (14, 0)

    def test_capped(self, calculator):
        education = [
            EducationEntry(level=EducationLevel.DOCTORATE, field="Ciencia Política", year=2022, is_verified=True),
            EducationEntry(level=EducationLevel.MASTERS),
            EducationEntry(level=EducationLevel.MASTERS),
            EducationEntry(level=EducationLevel.PROFESSIONAL_TITLE),
        ]
        points = calculator.education_points(education)
        assert points.depth == 8
        assert points.total == EDUCATION_CAP


class TestExperiencePoints:

    def test_total_tiers_on_unique_years(self, calculator):
        experience = [_job(2010, 2020), _job(2012, 2018)]
        points = calculator.experience_points(experience, OfficeCategory.DEPUTY)
        assert points.raw_years == 16
        assert points.unique_years == 10
        assert points.has_overlap is True
        assert points.total == 16

    @pytest.mark.parametrize("years, tier", [(1, 0), (2, 6), (5, 12), (8, 16), (11, 20), (15, 25), (30, 25)])
    def test_tier_boundaries(self, calculator, years, tier):
        points = calculator.experience_points([_job(2000, 2000 + years)], OfficeCategory.SENATOR)
        assert points.total == tier

    def test_open_role_closes_at_as_of_year(self, calculator):
        points = calculator.experience_points([_job(2020)], OfficeCategory.DEPUTY)
        assert points.unique_years == AS_OF_YEAR - 2020

    def test_unknown_start_counts_zero(self, calculator):
        points = calculator.experience_points([_job(None, 2020)], OfficeCategory.DEPUTY)
        assert (points.raw_years, points.total, points.relevant) == (0, 0, Decimal("0.00"))

    def test_relevant_weighting(self, calculator):
        # technical 1.6 × individual 0.8 × reduced 0.6 × 5 years (legislative table)
        points = calculator.experience_points([_job(2010, 2015)], OfficeCategory.DEPUTY)
        assert points.relevant == Decimal("3.84")

    def test_relevant_years_capped_per_entry(self, calculator):
        # academia 1.0 × coordinator 0.9 × reduced 0.6 × min(20, 10)
        entry = _job(2000, 2020, role_type=RoleType.ACADEMIA, seniority=SeniorityLevel.COORDINATOR)
        points = calculator.experience_points([entry], OfficeCategory.PRESIDENT)
        assert points.relevant == Decimal("5.40")

    def test_office_changes_role_weight(self, calculator):
        entry = _job(2015, 2020, role_type=RoleType.INTERNATIONAL, seniority=SeniorityLevel.SUPERVISORY)
        andean = calculator.experience_points([entry], OfficeCategory.ANDEAN_PARLIAMENT)
        senate = calculator.experience_points([entry], OfficeCategory.SENATOR)
        assert andean.relevant == Decimal("15.00")
        assert senate.relevant == Decimal("6.00")

    def test_relevant_capped(self, calculator, clean_profile):
        points = calculator.experience_points(clean_profile.experience, OfficeCategory.DEPUTY)
        assert points.relevant == Decimal("25.00")


class TestLeadershipPoints:

    def test_no_leadership(self, calculator):
        points = calculator.leadership_points([_job(2010, 2020)])
        assert points.total == 0

    def test_supervisory_gets_no_stability(self, calculator):
        points = calculator.leadership_points([
            _job(2000, 2020, seniority=SeniorityLevel.SUPERVISORY, leadership=True),
        ])
        assert (points.seniority, points.stability, points.total) == (8, 0, 8)

    @pytest.mark.parametrize("years, stability", [(1, 0), (2, 2), (4, 4), (7, 6), (15, 6)])
    def test_stability_tiers(self, calculator, years, stability):
        points = calculator.leadership_points([
            _job(2000, 2000 + years, seniority=SeniorityLevel.MANAGEMENT, leadership=True),
        ])
        assert points.seniority == 10
        assert points.stability == stability

    def test_capped(self, calculator, clean_profile):
        points = calculator.leadership_points(clean_profile.experience)
        assert (points.seniority, points.stability, points.total) == (14, 6, 20)


class TestCalculate:

    def test_clean_profile(self, calculator, clean_profile):
        result = calculator.calculate(clean_profile.education, clean_profile.experience, OfficeCategory.DEPUTY)
        # 23 education + 20 total tier + 25 relevant + 20 leadership
        assert result.score == 88

    def test_empty(self, calculator, empty_profile):
        result = calculator.calculate(empty_profile.education, empty_profile.experience, OfficeCategory.PRESIDENT)
        assert result.score == 0

    def test_fractional_relevant_points_round_half_up(self, calculator):
        # 3 years technical, individual, legislative: 1.6 × 0.8 × 0.6 × 3 = 2.304; tier 6
        result = calculator.calculate([], [_job(2010, 2013)], OfficeCategory.DEPUTY)
        assert result.experience.relevant == Decimal("2.30")
        assert result.score == 8
