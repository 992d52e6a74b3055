# tests/test_property_based.py
"""
Property-Based Tests

Hypothesis properties over randomly generated candidate profiles:
  - every sub-score and composite stays in [0, 100]
  - identical input yields identical output
  - a clean judicial record always scores integrity 100
  - an additional firm penal sentence never raises integrity
  - an additional experience entry never lowers competence
  - composites never fall when a sub-score rises
  - plan-aware fields exist for the president office only
"""

from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

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
    PenalSeverity,
    RoleType,
    SeniorityLevel,
)
from candidate_scoring.scoring.composite_calculator import CompositeCombiner
from candidate_scoring.scoring.integration_service import CandidateScoringService

SERVICE = CandidateScoringService(as_of_year=2026, scoring_version="property")

# ---------------------------------------------------------------------------
# Shared strategies
# ---------------------------------------------------------------------------

percent_st = st.integers(min_value=0, max_value=100)
office_st = st.sampled_from(list(OfficeCategory))
plan_st = st.one_of(st.none(), st.decimals(min_value=0, max_value=100, places=1))


@st.composite
def education_st(draw):
    return EducationEntry(
        level=draw(st.sampled_from(list(EducationLevel))),
        field=draw(st.sampled_from([None, "Derecho", "Economía", "Biología", "Gestión Pública"])),
        year=draw(st.one_of(st.none(), st.integers(min_value=1960, max_value=2026))),
        is_verified=draw(st.booleans()),
    )


@st.composite
def experience_st(draw):
    start = draw(st.one_of(st.none(), st.integers(min_value=1970, max_value=2026)))
    end = None
    if start is not None and draw(st.booleans()):
        end = start + draw(st.integers(min_value=0, max_value=25))
    return ExperienceEntry(
        role="role",
        role_type=draw(st.sampled_from(list(RoleType))),
        start_year=start,
        end_year=end,
        is_leadership=draw(st.booleans()),
        seniority_level=draw(st.sampled_from(list(SeniorityLevel))),
    )


@st.composite
def penal_st(draw):
    return PenalSentence(
        description=draw(st.sampled_from(["Peculado", "Difamación", "Delito no tipificado", ""])),
        is_firm=draw(st.booleans()),
        severity=draw(st.one_of(st.none(), st.sampled_from(list(PenalSeverity)))),
    )


@st.composite
def civil_st(draw):
    return CivilSentence(type=draw(st.sampled_from(list(CivilSentenceType))))


@st.composite
def profile_st(draw, with_judgments=True):
    return CandidateProfile(
        education=draw(st.lists(education_st(), max_size=4)),
        experience=draw(st.lists(experience_st(), max_size=6)),
        penal_sentences=draw(st.lists(penal_st(), max_size=3)) if with_judgments else [],
        civil_sentences=draw(st.lists(civil_st(), max_size=3)) if with_judgments else [],
        party_resignations=draw(st.integers(min_value=0, max_value=8)),
        verification_level=draw(percent_st),
        coverage_level=draw(percent_st),
        declaration_completeness=draw(st.one_of(st.none(), percent_st)),
        declaration_consistency=draw(st.one_of(st.none(), percent_st)),
        assets_quality=draw(st.one_of(st.none(), percent_st)),
    )


# ---------------------------------------------------------------------------
# Pipeline properties
# ---------------------------------------------------------------------------


class TestScoringPropertyBased:

    @given(profile_st(), office_st, plan_st)
    @settings(max_examples=200, deadline=None)
    def test_scores_always_bounded(self, profile, office, plan):
        """Every sub-score and composite stays within [0, 100]."""
        result = SERVICE.score_profile("p", profile, office, plan).result
        for value in result.subscores.values():
            assert 0 <= value <= 100
        for value in result.composites.values():
            if value is not None:
                assert Decimal("0") <= value <= Decimal("100")

    @given(profile_st(), office_st, plan_st)
    @settings(max_examples=200, deadline=None)
    def test_deterministic(self, profile, office, plan):
        """Scoring the same profile twice yields the same result and breakdown."""
        first = SERVICE.score_profile("p", profile, office, plan)
        second = SERVICE.score_profile("p", profile, office, plan)
        assert first.to_dict() == second.to_dict()

    @given(profile_st(with_judgments=False), office_st)
    @settings(max_examples=200, deadline=None)
    def test_clean_record_full_integrity(self, profile, office):
        """No judgments and at most one resignation means integrity 100."""
        profile = profile.model_copy(update={"party_resignations": min(profile.party_resignations, 1)})
        assert SERVICE.score_profile("p", profile, office).result.integrity == 100

    @given(profile_st(), penal_st(), office_st)
    @settings(max_examples=200, deadline=None)
    def test_additional_firm_sentence_never_raises_integrity(self, profile, sentence, office):
        """Adding a firm penal sentence leaves integrity equal or lower."""
        firm = sentence.model_copy(update={"is_firm": True})
        worse = profile.model_copy(update={"penal_sentences": profile.penal_sentences + [firm]})
        before = SERVICE.score_profile("p", profile, office).result.integrity
        after = SERVICE.score_profile("p", worse, office).result.integrity
        assert after <= before

    @given(profile_st(), experience_st(), office_st)
    @settings(max_examples=200, deadline=None)
    def test_additional_experience_never_lowers_competence(self, profile, entry, office):
        """Adding an experience entry leaves competence equal or higher."""
        richer = profile.model_copy(update={"experience": profile.experience + [entry]})
        before = SERVICE.score_profile("p", profile, office).result.competence
        after = SERVICE.score_profile("p", richer, office).result.competence
        assert after >= before

    @given(profile_st(), office_st, plan_st)
    @settings(max_examples=200, deadline=None)
    def test_plan_fields_only_for_president(self, profile, office, plan):
        """Plan viability and plan-aware composites exist if and only if the office is president."""
        result = SERVICE.score_profile("p", profile, office, plan).result
        plan_fields = (result.plan_viability, result.balanced_p, result.merit_first_p, result.integrity_first_p)
        if office == OfficeCategory.PRESIDENT:
            assert all(v is not None for v in plan_fields)
        else:
            assert all(v is None for v in plan_fields)


# ---------------------------------------------------------------------------
# Composite properties
# ---------------------------------------------------------------------------

subscores_st = st.fixed_dictionaries({
    "competence": percent_st,
    "integrity": percent_st,
    "transparency": percent_st,
    "confidence": percent_st,
})


class TestCompositePropertyBased:

    @given(
        subscores_st,
        st.sampled_from(["competence", "integrity", "transparency", "confidence"]),
        st.integers(min_value=1, max_value=100),
        st.decimals(min_value=0, max_value=100, places=1),
    )
    @settings(max_examples=300)
    def test_composites_monotone(self, subscores, name, delta, plan):
        """Raising one sub-score never lowers any composite."""
        combiner = CompositeCombiner()
        raised = dict(subscores)
        raised[name] = min(100, raised[name] + delta)

        low = combiner.combine(subscores, plan_viability=plan)
        high = combiner.combine(raised, plan_viability=plan)

        assert high.balanced >= low.balanced
        assert high.merit_first >= low.merit_first
        assert high.integrity_first >= low.integrity_first
        for preset, value in low.plan_composites.items():
            assert high.plan_composites[preset] >= value

    @given(subscores_st)
    @settings(max_examples=300)
    def test_uniform_subscores_give_that_value(self, subscores):
        """Weights sum to 1, so equal sub-scores produce that same composite."""
        value = subscores["competence"]
        uniform = {k: value for k in subscores}
        result = CompositeCombiner().combine(uniform, plan_viability=value)
        assert result.balanced == Decimal(value)
        assert all(v == Decimal(value) for v in result.plan_composites.values())
