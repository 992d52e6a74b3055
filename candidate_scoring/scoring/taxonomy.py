"""
Taxonomy Normalizer
candidate_scoring/scoring/taxonomy.py

Maps free-text fields from sworn CVs (hojas de vida) and court records into
the closed enumerations in candidate_scoring.models.enumerations.

Every classifier is an ordered rule table consumed by first_match():
accent-fold and lower-case the inputs, walk the table top to bottom, and
return the category of the first rule that matches. Order is the tie-break
policy, so more specific rules sit above broader ones that share text
fragments:

    "teniente alcalde"          before "alcalde"
    "superior no universitaria" before "universi"
    "subgerente"                before "gerente"

Unmapped input never raises; it resolves to the lowest-information
category of its field (none / technical_professional /
individual_contributor / contractual).
"""

import unicodedata
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from candidate_scoring.models.enumerations import (
    CivilSentenceType,
    EducationLevel,
    PenalSeverity,
    RoleType,
    SeniorityLevel,
)


def fold_text(text: Optional[str]) -> str:
    """Accent-fold, lower-case and collapse whitespace. None becomes ''."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.lower().split())


# ---------------------------------------------------------------------------
# Rule interpreter
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaxonomyRule:
    """
    One (pattern → category) row.

    text_any:    at least one fragment must occur in the primary text
                 (position title, education level, sentence type ...)
    context_any: at least one fragment must occur in the context text
                 (organization, degree, description ...)
    text_none:   none of these fragments may occur in the primary text
    A rule needs at least one positive constraint.
    """
    category: Any
    text_any: Tuple[str, ...] = ()
    context_any: Tuple[str, ...] = ()
    text_none: Tuple[str, ...] = ()

    def matches(self, text: str, context: str) -> bool:
        if not self.text_any and not self.context_any:
            return False
        if self.text_any and not any(p in text for p in self.text_any):
            return False
        if self.context_any and not any(p in context for p in self.context_any):
            return False
        if any(p in text for p in self.text_none):
            return False
        return True


def first_match(
    rules: Sequence[TaxonomyRule],
    text: Optional[str],
    context: Optional[str] = None,
    default: Any = None,
) -> Any:
    """
    Return the category of the first matching rule, or default.

    Both texts are folded and padded with one space on each side, so a
    pattern written as " ceo " only matches the whole word.
    """
    folded_text = f" {fold_text(text)} "
    folded_context = f" {fold_text(context)} "
    for rule in rules:
        if rule.matches(folded_text, folded_context):
            return rule.category
    return default


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------

# Closed codes accepted verbatim (current English values plus legacy codes).
EDUCATION_CODES = {
    **{level.value: level for level in EducationLevel},
    "sin_informacion": EducationLevel.NONE,
    "primaria": EducationLevel.PRIMARY,
    "primaria_completa": EducationLevel.PRIMARY,
    "secundaria_incompleta": EducationLevel.SECONDARY_INCOMPLETE,
    "secundaria_completa": EducationLevel.SECONDARY_COMPLETE,
    "tecnico_incompleto": EducationLevel.TECHNICAL_INCOMPLETE,
    "tecnico_completo": EducationLevel.TECHNICAL_COMPLETE,
    "universitario_incompleto": EducationLevel.UNIVERSITY_INCOMPLETE,
    "universitario_completo": EducationLevel.UNIVERSITY_COMPLETE,
    "titulo_profesional": EducationLevel.PROFESSIONAL_TITLE,
    "maestria": EducationLevel.MASTERS,
    "doctorado": EducationLevel.DOCTORATE,
}

# Branch rules. University / technical / secondary rows name the "complete"
# variant of their branch; completion is refined afterwards.
EDUCATION_RULES: Tuple[TaxonomyRule, ...] = (
    TaxonomyRule(EducationLevel.DOCTORATE, text_any=("doctorado", "doctorate", "phd")),
    TaxonomyRule(EducationLevel.DOCTORATE, text_any=("posgrado", "postgrado"), context_any=("doctor", "phd")),
    TaxonomyRule(EducationLevel.MASTERS, text_any=("maestria", "magister", "master", "posgrado", "postgrado")),
    TaxonomyRule(EducationLevel.MASTERS, context_any=("magister", "maestro en", "maestria", "master", "mba")),
    TaxonomyRule(EducationLevel.TECHNICAL_COMPLETE, text_any=("superior no universitari", "no universitari")),
    TaxonomyRule(EducationLevel.UNIVERSITY_COMPLETE, text_any=("universi", "bachiller", "bachelor", "licenciatura", "college")),
    TaxonomyRule(EducationLevel.TECHNICAL_COMPLETE, text_any=("tecnic", "tecnolog", "technical", "vocational")),
    TaxonomyRule(EducationLevel.SECONDARY_COMPLETE, text_any=("secundaria", "secondary", "high school")),
    TaxonomyRule(EducationLevel.PRIMARY, text_any=("primaria", "primary", "elementary")),
)

# Within the university branch the degree text separates a professional
# title from a generic bachelor's. "bachiller en ingenieria" is a bachelor's,
# "ingeniero civil" is a title, hence bachelor markers sit above professions.
UNIVERSITY_DEGREE_RULES: Tuple[TaxonomyRule, ...] = (
    TaxonomyRule(EducationLevel.PROFESSIONAL_TITLE, context_any=("titulo", "title", "licenciad")),
    TaxonomyRule(EducationLevel.UNIVERSITY_COMPLETE, context_any=("bachiller", "bachelor")),
    TaxonomyRule(
        EducationLevel.PROFESSIONAL_TITLE,
        context_any=(
            "abogad", "lawyer",
            "ingenier", "engineer",
            "medico", "cirujano", "physician",
            "contador", "accountant",
            "arquitect", "architect",
            "psicolog", "psychologist",
            "economista", "economist",
            "notari", "notary",
        ),
    ),
)

_COMPLETION_VARIANTS = {
    EducationLevel.UNIVERSITY_COMPLETE: EducationLevel.UNIVERSITY_INCOMPLETE,
    EducationLevel.TECHNICAL_COMPLETE: EducationLevel.TECHNICAL_INCOMPLETE,
    EducationLevel.SECONDARY_COMPLETE: EducationLevel.SECONDARY_INCOMPLETE,
}


def _completion_from_text(level_text: str, is_completed: Optional[bool]) -> bool:
    # "incompleta" contains "completa": check the negative form first
    if "incomplet" in level_text:
        return False
    if "complet" in level_text or "concluid" in level_text:
        return True
    return bool(is_completed)


def normalize_education_level(
    raw_level: Optional[str],
    degree_text: Optional[str] = None,
    is_completed: Optional[bool] = None,
    has_title: Optional[bool] = None,
) -> EducationLevel:
    """
    Normalize a declared education level into EducationLevel.

    Args:
        raw_level: Level as declared ("Universitario", "Posgrado", "secundaria_completa" ...)
        degree_text: Degree / diploma text, consulted for titles and postgraduate degrees
        is_completed: Completion flag from the source record
        has_title: Professional-title flag from the source record

    Returns:
        The closed category; EducationLevel.NONE when nothing matches.

    Examples:
        >>> normalize_education_level("Universitario", "Abogado")
        <EducationLevel.PROFESSIONAL_TITLE: 'professional_title'>
        >>> normalize_education_level("Secundaria", is_completed=False)
        <EducationLevel.SECONDARY_INCOMPLETE: 'secondary_incomplete'>
    """
    code = fold_text(raw_level)
    if code in EDUCATION_CODES:
        return EDUCATION_CODES[code]

    branch = first_match(EDUCATION_RULES, raw_level, degree_text, default=EducationLevel.NONE)
    level_text = fold_text(raw_level)

    if branch is EducationLevel.UNIVERSITY_COMPLETE:
        if has_title:
            return EducationLevel.PROFESSIONAL_TITLE
        by_degree = first_match(UNIVERSITY_DEGREE_RULES, level_text, degree_text)
        if by_degree is not None:
            return by_degree

    if branch in _COMPLETION_VARIANTS:
        if _completion_from_text(level_text, is_completed):
            return branch
        return _COMPLETION_VARIANTS[branch]

    return branch


# ---------------------------------------------------------------------------
# Role type
# ---------------------------------------------------------------------------

PUBLIC_ORGANIZATIONS = (
    "ministerio", "ministry", "gobierno", "government", "municipalidad", "municipality",
    "congreso", "poder judicial", "fiscalia", "contraloria", "defensoria",
    "fuerzas armadas", "ejercito", "marina de guerra", "fuerza aerea", "policia", "police",
    "jurado nacional", " onpe ", "reniec", "sunat", "essalud", "superintendencia",
)

INTERNATIONAL_ORGANIZATIONS = (
    "naciones unidas", "united nations", "banco mundial", "world bank",
    "banco interamericano", "inter-american", "fondo monetario", "monetary fund",
    "organizacion de estados americanos", "organizacion mundial", "unesco", "unicef",
    "pnud", "cooperacion internacional", "comunidad andina",
)

ROLE_RULES: Tuple[TaxonomyRule, ...] = (
    TaxonomyRule(RoleType.ELECTED_MID, text_any=("teniente alcalde", "regidor", "concejal", "consejero regional", "councillor")),
    TaxonomyRule(
        RoleType.ELECTED_HIGH,
        text_any=(
            "congresista", "senador", "diputado", "alcalde", "gobernador",
            "presidente regional", "presidente de la republica", "parlamentario andino",
            "congressman", "senator", "governor",
        ),
    ),
    TaxonomyRule(
        RoleType.EXEC_PUBLIC_HIGH,
        text_any=(
            "ministro", "minister", "embajador", "ambassador", "secretario general",
            "jefe institucional", "superintendente", "contralor", "defensor del pueblo",
        ),
    ),
    TaxonomyRule(RoleType.INTERNATIONAL, context_any=INTERNATIONAL_ORGANIZATIONS),
    TaxonomyRule(
        RoleType.EXEC_PUBLIC_HIGH,
        text_any=("director", "general", "jefe", "comandante", "oficial superior", "gerente"),
        context_any=PUBLIC_ORGANIZATIONS,
    ),
    TaxonomyRule(RoleType.EXEC_PUBLIC_MID, context_any=PUBLIC_ORGANIZATIONS),
    TaxonomyRule(RoleType.PARTY_OFFICIAL, context_any=("partido", "movimiento regional", "alianza electoral", "political party")),
    TaxonomyRule(RoleType.PARTY_OFFICIAL, text_any=("dirigente", "personero", "militante", "secretario nacional")),
    TaxonomyRule(
        RoleType.ACADEMIA,
        text_any=(" rector", "decano", "catedratico", "profesor", "docente", "investigador", "professor", "lecturer"),
    ),
    TaxonomyRule(
        RoleType.ACADEMIA,
        context_any=("universidad", "university", "instituto"),
        text_none=("director", "gerente", "empresario"),
    ),
    TaxonomyRule(
        RoleType.EXEC_PRIVATE_HIGH,
        text_any=(
            "gerente general", "director", " ceo ", "presidente ejecutivo",
            "presidente del directorio", "empresario", "fundador", "propietario", "founder", "owner",
        ),
    ),
    TaxonomyRule(RoleType.EXEC_PRIVATE_MID, text_any=("gerente", "subgerente", "jefe", "administrador", "supervisor", "manager")),
)

LEGACY_ROLE_CODES = {
    **{role.value: role for role in RoleType},
    "electivo_alto": RoleType.ELECTED_HIGH,
    "electivo_medio": RoleType.ELECTED_MID,
    "ejecutivo_publico_alto": RoleType.EXEC_PUBLIC_HIGH,
    "ejecutivo_publico_medio": RoleType.EXEC_PUBLIC_MID,
    "ejecutivo_privado_alto": RoleType.EXEC_PRIVATE_HIGH,
    "ejecutivo_privado_medio": RoleType.EXEC_PRIVATE_MID,
    "tecnico_profesional": RoleType.TECHNICAL_PROFESSIONAL,
    "academia": RoleType.ACADEMIA,
    "internacional": RoleType.INTERNATIONAL,
    "partidario": RoleType.PARTY_OFFICIAL,
}


def classify_role_type(position_text: Optional[str], organization_text: Optional[str]) -> RoleType:
    """Classify a position/organization pair; technical_professional when nothing matches."""
    return first_match(ROLE_RULES, position_text, organization_text, default=RoleType.TECHNICAL_PROFESSIONAL)


# ---------------------------------------------------------------------------
# Seniority
# ---------------------------------------------------------------------------

SENIORITY_RULES: Tuple[TaxonomyRule, ...] = (
    TaxonomyRule(SeniorityLevel.SUPERVISORY, text_any=("subgerente", "teniente alcalde", "regidor", "concejal")),
    TaxonomyRule(
        SeniorityLevel.EXECUTIVE,
        text_any=(
            "presidente", "president", " rector", "ministro", "minister", "alcalde",
            "gobernador", "governor", "congresista", "senador", "director general", " ceo ",
            "gerente general", "comandante general", "embajador", "ambassador",
            "superintendente", "contralor",
        ),
    ),
    TaxonomyRule(
        SeniorityLevel.MANAGEMENT,
        text_any=("secretario general", "gerente", "manager", "director", "decano", "oficial superior", "empresario"),
    ),
    TaxonomyRule(SeniorityLevel.SUPERVISORY, text_any=("jefe", "coordinador", "asesor", "supervisor", "head of")),
    TaxonomyRule(
        SeniorityLevel.COORDINATOR,
        text_any=(
            "profesor", "catedratico", "docente", "especialista", "analista",
            "abogado", "ingeniero", "consultor", "specialist", "analyst",
        ),
    ),
)

LEGACY_SENIORITY_CODES = {
    **{level.value: level for level in SeniorityLevel},
    "coordinador": SeniorityLevel.COORDINATOR,
    "jefatura": SeniorityLevel.SUPERVISORY,
    "gerencia": SeniorityLevel.MANAGEMENT,
    "direccion": SeniorityLevel.EXECUTIVE,
}

LEADERSHIP_SENIORITY = frozenset({
    SeniorityLevel.SUPERVISORY,
    SeniorityLevel.MANAGEMENT,
    SeniorityLevel.EXECUTIVE,
})


def classify_seniority(position_text: Optional[str]) -> SeniorityLevel:
    """Classify a position title; individual_contributor when nothing matches."""
    return first_match(SENIORITY_RULES, position_text, default=SeniorityLevel.INDIVIDUAL_CONTRIBUTOR)


# ---------------------------------------------------------------------------
# Judgments
# ---------------------------------------------------------------------------

CIVIL_SENTENCE_RULES: Tuple[TaxonomyRule, ...] = (
    TaxonomyRule(CivilSentenceType.VIOLENCE, text_any=("violencia", "violence", "agresion", "maltrato")),
    TaxonomyRule(CivilSentenceType.VIOLENCE, context_any=("violencia", "violence", "agresion", "maltrato")),
    TaxonomyRule(CivilSentenceType.ALIMONY, text_any=("aliment", "alimony", "child support")),
    TaxonomyRule(CivilSentenceType.ALIMONY, context_any=("aliment", "alimony", "child support")),
    TaxonomyRule(CivilSentenceType.LABOR, text_any=("laboral", "labor", "trabaj", "despido", "beneficios sociales")),
    TaxonomyRule(CivilSentenceType.LABOR, context_any=("laboral", "labor", "despido", "beneficios sociales")),
)

# Offences discounted below full weight. Severe patterns sit first so that a
# mixed narrative ("peculado y difamacion") resolves to severe.
PENAL_SEVERITY_RULES: Tuple[TaxonomyRule, ...] = (
    TaxonomyRule(
        PenalSeverity.SEVERE,
        text_any=(
            "colusion", "peculado", "cohecho", "corrupcion", "lavado de activos", "trafico",
            "homicidio", "asesinato", "violacion", "secuestro", " robo", "terroris",
            "negociacion incompatible", "enriquecimiento ilicito", "malversacion",
            "organizacion criminal", "extorsion",
        ),
    ),
    TaxonomyRule(
        PenalSeverity.STANDARD,
        text_any=(
            "omision de asistencia familiar", "conduccion en estado de ebriedad", "peligro comun",
            "difamacion", "injuria", "calumnia", "lesiones leves", "desobediencia",
            "resistencia a la autoridad", "usurpacion",
        ),
    ),
)

FIRMNESS_RULES: Tuple[TaxonomyRule, ...] = (
    TaxonomyRule(
        False,
        text_any=("no firme", "apelacion", "apelada", "en proceso", "impugnad", "casacion", "pending", "appeal"),
    ),
    TaxonomyRule(True, text_any=("firme", "final", "consentida", "ejecutoriada", "enforceable")),
)


def classify_civil_sentence(type_text: Optional[str], description: Optional[str] = None) -> CivilSentenceType:
    code = fold_text(type_text)
    if code in {t.value for t in CivilSentenceType}:
        return CivilSentenceType(code)
    return first_match(CIVIL_SENTENCE_RULES, type_text, description, default=CivilSentenceType.CONTRACTUAL)


def classify_penal_severity(description: Optional[str]) -> PenalSeverity:
    """Unrecognized offences are weighed as severe."""
    return first_match(PENAL_SEVERITY_RULES, description, default=PenalSeverity.SEVERE)


def is_firm_status(status_text: Optional[str]) -> bool:
    """True only for a status that reads as final/enforceable."""
    return first_match(FIRMNESS_RULES, status_text, default=False)
