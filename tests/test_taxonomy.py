# tests/test_taxonomy.py
"""
Taxonomy Normalizer tests: ordered rule tables, first match wins.
"""

import pytest

from candidate_scoring.models.enumerations import (
    CivilSentenceType,
    EducationLevel,
    PenalSeverity,
    RoleType,
    SeniorityLevel,
)
from candidate_scoring.scoring.taxonomy import (
    TaxonomyRule,
    classify_civil_sentence,
    classify_penal_severity,
    classify_role_type,
    classify_seniority,
    first_match,
    fold_text,
    is_firm_status,
    normalize_education_level,
)


class TestFoldText:

    def test_strips_accents_and_case(self):
        assert fold_text("  Maestría en   GESTIÓN Pública ") == "maestria en gestion publica"

    def test_none_is_empty(self):
        assert fold_text(None) == ""


class TestFirstMatch:

    RULES = (
        TaxonomyRule("specific", text_any=("teniente alcalde",)),
        TaxonomyRule("broad", text_any=("alcalde",)),
        TaxonomyRule("by_org", context_any=("banco",), text_none=("gerente",)),
    )

    def test_order_is_the_tie_break(self):
        assert first_match(self.RULES, "Teniente Alcalde") == "specific"
        assert first_match(self.RULES, "Alcalde provincial") == "broad"

    def test_exclusion_blocks_rule(self):
        assert first_match(self.RULES, "Analista", "Banco Central") == "by_org"
        assert first_match(self.RULES, "Gerente", "Banco Central", default="none") == "none"

    def test_padded_pattern_matches_whole_word_only(self):
        rules = (TaxonomyRule("exec", text_any=(" ceo ",)),)
        assert first_match(rules, "CEO") == "exec"
        assert first_match(rules, "Profesor de liceo") is None

    def test_rule_without_constraints_never_matches(self):
        assert first_match((TaxonomyRule("x"),), "anything", "anything") is None


class TestEducationLevel:

    @pytest.mark.parametrize("raw, degree, completed, expected", [
        ("Posgrado", "Doctor en Economía", None, EducationLevel.DOCTORATE),
        ("Doctorado", None, None, EducationLevel.DOCTORATE),
        ("Posgrado", "Maestría en Gestión Pública", None, EducationLevel.MASTERS),
        ("Universitario", "Magíster en Finanzas", None, EducationLevel.MASTERS),
        ("Universitario", "Abogado", None, EducationLevel.PROFESSIONAL_TITLE),
        ("Universitario", "Título de Contador Público", None, EducationLevel.PROFESSIONAL_TITLE),
        ("Universitario", "Bachiller en Ingeniería Civil", None, EducationLevel.UNIVERSITY_COMPLETE),
        ("Universitario", None, True, EducationLevel.UNIVERSITY_COMPLETE),
        ("Universitario", None, False, EducationLevel.UNIVERSITY_INCOMPLETE),
        ("Universidad Nacional de Trujillo", None, True, EducationLevel.UNIVERSITY_COMPLETE),
        ("Universidad", None, None, EducationLevel.UNIVERSITY_INCOMPLETE),
        ("University", "Bachelor of Arts", True, EducationLevel.UNIVERSITY_COMPLETE),
        ("Superior no universitaria", None, True, EducationLevel.TECHNICAL_COMPLETE),
        ("Superior no universitaria", None, None, EducationLevel.TECHNICAL_INCOMPLETE),
        ("Técnico", None, True, EducationLevel.TECHNICAL_COMPLETE),
        ("Secundaria completa", None, None, EducationLevel.SECONDARY_COMPLETE),
        ("Secundaria incompleta", None, True, EducationLevel.SECONDARY_INCOMPLETE),
        ("Primaria", None, None, EducationLevel.PRIMARY),
    ])
    def test_free_text(self, raw, degree, completed, expected):
        assert normalize_education_level(raw, degree_text=degree, is_completed=completed) == expected

    def test_title_flag_wins_in_university_branch(self):
        assert normalize_education_level("Universidad", "Bachiller", has_title=True) == EducationLevel.PROFESSIONAL_TITLE

    @pytest.mark.parametrize("code, expected", [
        ("titulo_profesional", EducationLevel.PROFESSIONAL_TITLE),
        ("secundaria_incompleta", EducationLevel.SECONDARY_INCOMPLETE),
        ("primaria_completa", EducationLevel.PRIMARY),
        ("masters", EducationLevel.MASTERS),
    ])
    def test_closed_codes_accepted_verbatim(self, code, expected):
        assert normalize_education_level(code) == expected

    @pytest.mark.parametrize("raw", [None, "", "curso de oratoria", "???"])
    def test_unmapped_is_none(self, raw):
        assert normalize_education_level(raw) == EducationLevel.NONE

    @pytest.mark.parametrize("raw", [7, 3.5, True])
    def test_non_string_level_is_none(self, raw):
        assert normalize_education_level(raw) == EducationLevel.NONE


class TestRoleType:

    @pytest.mark.parametrize("position, organization, expected", [
        ("Teniente Alcalde", "Municipalidad de Lima", RoleType.ELECTED_MID),
        ("Regidor", "Municipalidad Provincial del Cusco", RoleType.ELECTED_MID),
        ("Alcalde", "Municipalidad Distrital de Ate", RoleType.ELECTED_HIGH),
        ("Congresista de la República", "Congreso", RoleType.ELECTED_HIGH),
        ("Ministro de Economía", "MEF", RoleType.EXEC_PUBLIC_HIGH),
        ("Consultor", "Banco Mundial", RoleType.INTERNATIONAL),
        ("Director General", "Ministerio de Salud", RoleType.EXEC_PUBLIC_HIGH),
        ("Asistente administrativo", "Municipalidad de Arequipa", RoleType.EXEC_PUBLIC_MID),
        ("Secretario de organización", "Partido Morado", RoleType.PARTY_OFFICIAL),
        ("Profesor principal", "Universidad Nacional de Ingeniería", RoleType.ACADEMIA),
        ("Investigadora", "Instituto de Estudios Peruanos", RoleType.ACADEMIA),
        ("Director comercial", "Universidad Privada del Norte", RoleType.EXEC_PRIVATE_HIGH),
        ("Gerente General", "Corporación ABC S.A.", RoleType.EXEC_PRIVATE_HIGH),
        ("Jefe de ventas", "Distribuidora XYZ", RoleType.EXEC_PRIVATE_MID),
        ("Analista", "Consultora Andes", RoleType.TECHNICAL_PROFESSIONAL),
    ])
    def test_classification(self, position, organization, expected):
        assert classify_role_type(position, organization) == expected

    def test_missing_text_falls_back(self):
        assert classify_role_type(None, None) == RoleType.TECHNICAL_PROFESSIONAL


class TestSeniority:

    @pytest.mark.parametrize("position, expected", [
        ("Subgerente de Finanzas", SeniorityLevel.SUPERVISORY),
        ("Teniente Alcalde", SeniorityLevel.SUPERVISORY),
        ("Alcalde", SeniorityLevel.EXECUTIVE),
        ("Rector", SeniorityLevel.EXECUTIVE),
        ("CEO", SeniorityLevel.EXECUTIVE),
        ("Gerente de Operaciones", SeniorityLevel.MANAGEMENT),
        ("Director de Ventas", SeniorityLevel.MANAGEMENT),
        ("Jefe de Área", SeniorityLevel.SUPERVISORY),
        ("Asesor legal", SeniorityLevel.SUPERVISORY),
        ("Abogado", SeniorityLevel.COORDINATOR),
        ("Profesor de liceo", SeniorityLevel.COORDINATOR),
        ("Asistente", SeniorityLevel.INDIVIDUAL_CONTRIBUTOR),
        (None, SeniorityLevel.INDIVIDUAL_CONTRIBUTOR),
    ])
    def test_classification(self, position, expected):
        assert classify_seniority(position) == expected


class TestJudgments:

    @pytest.mark.parametrize("type_text, description, expected", [
        ("Violencia familiar", "", CivilSentenceType.VIOLENCE),
        ("Proceso civil", "Agresión física contra cónyuge", CivilSentenceType.VIOLENCE),
        ("Alimentos", "", CivilSentenceType.ALIMONY),
        ("Laboral", "Pago de beneficios sociales", CivilSentenceType.LABOR),
        ("Obligación de dar suma de dinero", "Incumplimiento de contrato", CivilSentenceType.CONTRACTUAL),
        ("alimony", None, CivilSentenceType.ALIMONY),
        (None, None, CivilSentenceType.CONTRACTUAL),
        (3, None, CivilSentenceType.CONTRACTUAL),
        (7, "Proceso de alimentos", CivilSentenceType.ALIMONY),
    ])
    def test_civil_type(self, type_text, description, expected):
        assert classify_civil_sentence(type_text, description) == expected

    @pytest.mark.parametrize("description, expected", [
        ("Peculado doloso", PenalSeverity.SEVERE),
        ("Colusión agravada", PenalSeverity.SEVERE),
        ("Robo agravado", PenalSeverity.SEVERE),
        ("Difamación agravada", PenalSeverity.STANDARD),
        ("Omisión de asistencia familiar", PenalSeverity.STANDARD),
        ("Peculado y difamación", PenalSeverity.SEVERE),
        ("Delito no tipificado", PenalSeverity.SEVERE),
        ("", PenalSeverity.SEVERE),
    ])
    def test_penal_severity(self, description, expected):
        assert classify_penal_severity(description) == expected

    @pytest.mark.parametrize("status, expected", [
        ("Firme", True),
        ("Consentida", True),
        ("Ejecutoriada", True),
        ("No firme", False),
        ("En apelación", False),
        ("En proceso", False),
        (None, False),
    ])
    def test_firm_status(self, status, expected):
        assert is_firm_status(status) is expected
