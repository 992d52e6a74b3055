# tests/conftest.py

"""
Pytest Fixtures - Shared profiles, raw records and stored rows

All scoring fixtures pin as_of_year=2026 so results never depend on the
configured AS_OF_YEAR.
"""

from decimal import Decimal

import pytest

from candidate_scoring.models.candidate import (
    CandidateProfile,
    CivilSentence,
    EducationEntry,
    ExperienceEntry,
    PenalSentence,
)
from candidate_scoring.models.enumerations import (
    CivilSentenceType,
    EducationLevel,
    OfficeCategory,
    RoleType,
    SeniorityLevel,
)
from candidate_scoring.models.score import ScoreBreakdown, ScoreResult, StoredScore
from candidate_scoring.scoring.integration_service import CandidateScoringService

AS_OF_YEAR = 2026


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def scoring_service():
    return CandidateScoringService(as_of_year=AS_OF_YEAR, scoring_version="test")


# =============================================================================
# PROFILE FIXTURES
# =============================================================================

@pytest.fixture
def clean_profile():
    """A lawyer with a public-sector career and no judgments."""
    return CandidateProfile(
        education=[
            EducationEntry(level=EducationLevel.PROFESSIONAL_TITLE, field="Derecho", year=2005, is_verified=True),
            EducationEntry(level=EducationLevel.MASTERS, field="Gestión Pública", year=2018, is_verified=True),
        ],
        experience=[
            ExperienceEntry(
                role="Director General",
                role_type=RoleType.EXEC_PUBLIC_HIGH,
                organization="Ministerio de Salud",
                start_year=2010,
                end_year=2016,
                is_leadership=True,
                seniority_level=SeniorityLevel.MANAGEMENT,
            ),
            ExperienceEntry(
                role="Congresista",
                role_type=RoleType.ELECTED_HIGH,
                organization="Congreso de la República",
                start_year=2016,
                end_year=2021,
                is_leadership=True,
                seniority_level=SeniorityLevel.EXECUTIVE,
            ),
        ],
        party_resignations=1,
        verification_level=80,
        coverage_level=90,
        declaration_completeness=90,
        declaration_consistency=80,
        assets_quality=70,
    )


@pytest.fixture
def sentenced_profile(clean_profile):
    """The clean profile plus one firm penal sentence and one violence civil sentence."""
    return clean_profile.model_copy(update={
        "penal_sentences": [PenalSentence(description="Peculado doloso", is_firm=True, year=2019)],
        "civil_sentences": [CivilSentence(type=CivilSentenceType.VIOLENCE, description="Violencia familiar")],
    })


@pytest.fixture
def empty_profile():
    return CandidateProfile()


# =============================================================================
# RAW RECORD FIXTURES
# =============================================================================

@pytest.fixture
def raw_record():
    """A raw record shaped like the upstream hoja de vida export."""
    return {
        "id": "cand-001",
        "full_name": "María Quispe Huamán",
        "dni": "40123456",
        "cargo": "presidente",
        "education_details": [
            {"level": "Universitario", "degree": "Abogada", "field_of_study": "Derecho",
             "institution": "Universidad Nacional Mayor de San Marcos", "bachelor_year": "2004",
             "is_verified": True},
            {"level": "Posgrado", "degree": "Maestría en Gestión Pública", "year": 2017},
        ],
        "experience_details": [
            {"position": "Gerente General", "organization": "Municipalidad de Lima",
             "start_year": "2008", "end_year": "2014"},
            {"position": "Consultora", "organization": "Banco Mundial",
             "start_date": "2014-03-01", "is_current": True},
        ],
        "political_trajectory": [
            {"type": "cargo_electivo", "position": "Alcaldesa distrital", "party": "Partido X",
             "year_start": 2019, "year_end": 2022},
        ],
        "penal_sentences": [
            {"delito": "Difamación agravada", "status": "en apelación", "date": "2021-06-10"},
        ],
        "civil_sentences": [
            {"type": "Obligación de dar suma de dinero", "description": "Incumplimiento de contrato"},
        ],
        "party_resignations": 2,
        "assets_declaration": {"properties": 2},
        "birth_date": "1978-05-02",
        "data_verified": True,
        "data_source": "jne_verified",
        "declaration_completeness": 85,
        "declaration_consistency": 75,
        "assets_quality": 60,
        "plan_viability": 64.5,
    }


# =============================================================================
# STORED ROW FIXTURES
# =============================================================================

def make_stored(
    candidate_id="cand-x",
    office=OfficeCategory.DEPUTY,
    competence=60,
    integrity=80,
    transparency=70,
    confidence=75,
    breakdown=None,
    plan_viability=None,
    national_id=None,
    full_name=None,
    **overrides,
):
    """
    Build a StoredScore whose composites are consistent with its sub-scores
    (balanced / merit_first / integrity_first of the default preset family).
    """
    from candidate_scoring.scoring.composite_calculator import CompositeCombiner

    subscores = {
        "competence": competence,
        "integrity": integrity,
        "transparency": transparency,
        "confidence": confidence,
    }
    composites = CompositeCombiner().combine(subscores, plan_viability=plan_viability)
    plan = composites.plan_composites or {}
    values = dict(
        balanced=composites.balanced,
        merit_first=composites.merit_first,
        integrity_first=composites.integrity_first,
        plan_viability=None if plan_viability is None else Decimal(str(plan_viability)),
        balanced_p=plan.get("balanced_p"),
        merit_first_p=plan.get("merit_first_p"),
        integrity_first_p=plan.get("integrity_first_p"),
    )
    values.update(overrides)
    return StoredScore(
        candidate_id=candidate_id,
        office_category=office,
        result=ScoreResult(**subscores, **values),
        breakdown=breakdown,
        national_id=national_id,
        full_name=full_name,
    )


def consistent_breakdown(competence=60, integrity=80, transparency=70, confidence=75):
    """A breakdown whose itemized points re-derive the given sub-scores."""
    assert transparency <= 100 and confidence <= 100
    completeness = min(transparency, 35)
    consistency = min(transparency - completeness, 35)
    return ScoreBreakdown(
        education_points=min(competence, 30),
        experience_total_points=max(0, min(competence - 30, 25)),
        experience_relevant_points=Decimal(max(0, min(competence - 55, 25))),
        leadership_points=max(0, competence - 80),
        integrity_base=100,
        penal_penalty=Decimal(100 - integrity),
        completeness_points=completeness,
        consistency_points=consistency,
        assets_quality_points=transparency - completeness - consistency,
        verification_points=min(confidence, 50),
        coverage_points=confidence - min(confidence, 50),
    )


@pytest.fixture
def stored_factory():
    return make_stored


@pytest.fixture
def breakdown_factory():
    return consistent_breakdown
