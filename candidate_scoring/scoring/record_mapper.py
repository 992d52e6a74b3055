# candidate_scoring/scoring/record_mapper.py
"""
Record Mapper
-------------
Turns one raw candidate record (a dict as produced by the upstream
scraping / reconciliation collaborator) into a CandidateProfile.

Upstream sources disagree on field names, so every logical field is read
through FIELD_ALIASES: an explicit, ordered precedence list. The first
alias whose value is present and non-blank wins.

Malformed values never raise. An unparseable year becomes None (duration
zero), an unparseable percentage becomes None (the calculator applies its
neutral baseline), an unmapped label falls back through the taxonomy, and a
structured value (dict or list) in a free-text field is treated as absent.
"""
import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog

from candidate_scoring.models.candidate import (
    CandidateProfile,
    CivilSentence,
    EducationEntry,
    ExperienceEntry,
    PenalSentence,
)
from candidate_scoring.models.enumerations import (
    OfficeCategory,
    PenalSeverity,
    RoleType,
    SeniorityLevel,
)
from candidate_scoring.scoring.taxonomy import (
    LEADERSHIP_SENIORITY,
    LEGACY_ROLE_CODES,
    LEGACY_SENIORITY_CODES,
    classify_civil_sentence,
    classify_role_type,
    classify_seniority,
    fold_text,
    is_firm_status,
    normalize_education_level,
)
from candidate_scoring.scoring.utils import HUNDRED, ZERO, clamp, round_score, to_decimal

logger = structlog.get_logger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2100

# Logical field -> ordered source keys (highest precedence first)
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    # candidate identity
    "candidate_id":             ("candidate_id", "id", "uuid"),
    "full_name":                ("full_name", "nombre_completo", "name", "nombre"),
    "national_id":              ("dni", "national_id", "document_number"),
    "office_category":          ("office_category", "cargo", "position_type", "office"),
    # record sections
    "education":                ("education_details", "education", "educacion"),
    "experience":               ("experience_details", "experience", "experiencia_laboral"),
    "political_trajectory":     ("political_trajectory", "trayectoria_politica"),
    "penal_sentences":          ("penal_sentences", "sentencias_penales"),
    "civil_sentences":          ("civil_sentences", "sentencias_civiles", "sentencias_obligaciones"),
    # education entry
    "education_level":          ("level", "education_level", "nivel"),
    "degree":                   ("degree", "grado", "titulo", "carrera"),
    "field_of_study":           ("field_of_study", "field", "degree", "carrera"),
    "institution":              ("institution", "institucion", "university", "centro_estudios"),
    "education_year":           ("bachelor_year", "year", "end_year", "end_date", "anio"),
    # experience entry
    "position":                 ("position", "role", "cargo", "puesto"),
    "organization":             ("organization", "organizacion", "employer", "entidad", "institution"),
    "start_year":               ("start_year", "year_start", "start_date", "fecha_inicio", "year"),
    "end_year":                 ("end_year", "year_end", "end_date", "fecha_fin"),
    "political_organization":   ("party", "institution", "organization", "organizacion_politica"),
    # sentence entry
    "sentence_description":     ("description", "delito", "materia", "summary", "text"),
    "sentence_status":          ("status", "estado", "situacion"),
    "sentence_year":            ("year", "date", "fecha", "fecha_sentencia"),
    "civil_type":               ("type", "tipo", "materia"),
    # scalar indicators
    "party_resignations":       ("party_resignations", "renuncias_partidos", "resignations"),
    "verification_level":       ("verification_level",),
    "coverage_level":           ("coverage_level",),
    "declaration_completeness": ("declaration_completeness",),
    "declaration_consistency":  ("declaration_consistency",),
    "assets_quality":           ("assets_quality",),
    "plan_viability":           ("plan_viability", "plan_score", "plan_gobierno_score"),
}

# Sections whose presence counts toward the derived coverage level
COVERAGE_SECTIONS: Tuple[str, ...] = (
    "education",
    "experience",
    "political_trajectory",
    "assets_declaration",
    "birth_date",
    "national_id",
)

OFFICE_CODES: Dict[str, OfficeCategory] = {
    **{office.value: office for office in OfficeCategory},
    "presidente": OfficeCategory.PRESIDENT,
    "vicepresidente": OfficeCategory.VICE_PRESIDENT,
    "vice presidente": OfficeCategory.VICE_PRESIDENT,
    "senador": OfficeCategory.SENATOR,
    "diputado": OfficeCategory.DEPUTY,
    "parlamento_andino": OfficeCategory.ANDEAN_PARLIAMENT,
    "parlamento andino": OfficeCategory.ANDEAN_PARLIAMENT,
}

_YEAR_PATTERN = re.compile(r"(?<!\d)(\d{4})(?!\d)")
_ELECTED_TYPES = {"cargo_electivo", "electivo", "elected"}
_PUBLIC_APPOINTMENT_TYPES = {"cargo_publico", "publico", "public_office"}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def resolve_field(record: Mapping[str, Any], field_name: str, default: Any = None) -> Any:
    """
    Resolve a logical field through its alias list.

    Returns the value under the first alias that is present and non-blank;
    fields without an alias entry are read under their own name.
    """
    for key in FIELD_ALIASES.get(field_name, (field_name,)):
        value = record.get(key)
        if not _is_blank(value):
            return value
    return default


def parse_year(value: Any) -> Optional[int]:
    """Extract a calendar year from an int, a date or free text; None when absent or out of range."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (datetime, date)):
        year = value.year
    elif isinstance(value, int):
        year = value
    elif isinstance(value, float):
        if math.isnan(value) or not value.is_integer():
            return None
        year = int(value)
    else:
        match = _YEAR_PATTERN.search(str(value))
        if not match:
            return None
        year = int(match.group(1))
    if MIN_YEAR <= year <= MAX_YEAR:
        return year
    return None


def _parse_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip().rstrip("%").strip().replace(",", ".")
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def parse_percentage(value: Any) -> Optional[int]:
    """Parse a 0-100 indicator, clamping out-of-range numbers; None when unparseable."""
    number = _parse_decimal(value)
    if number is None:
        return None
    return round_score(clamp(number))


def parse_count(value: Any) -> int:
    number = _parse_decimal(value)
    if number is None or number < 0:
        return 0
    return int(number)


def parse_plan_viability(value: Any) -> Optional[Decimal]:
    number = _parse_decimal(value)
    if number is None:
        return None
    return to_decimal(clamp(number, ZERO, HUNDRED), places=1)


def parse_office_category(value: Any) -> Optional[OfficeCategory]:
    if isinstance(value, OfficeCategory):
        return value
    return OFFICE_CODES.get(fold_text(value).replace("-", "_"))


def _as_list(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _as_text(value: Any) -> Optional[str]:
    """Scalar text for free-form string fields; containers and blanks become None."""
    if _is_blank(value) or isinstance(value, (Mapping, list, tuple, set, bool)):
        return None
    return str(value).strip()


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return fold_text(value) in {"true", "1", "si", "yes", "y"}
    return bool(value)


# ---------------------------------------------------------------------------
# Section mappers
# ---------------------------------------------------------------------------

def map_education(items: Any) -> List[EducationEntry]:
    entries = []
    for item in _as_list(items):
        degree = _as_text(resolve_field(item, "degree"))
        entries.append(EducationEntry(
            level=normalize_education_level(
                _as_text(resolve_field(item, "education_level")),
                degree_text=degree,
                is_completed=_as_bool(item.get("is_completed")) or _as_bool(item.get("has_bachelor")),
                has_title=_as_bool(item.get("has_title")),
            ),
            field=_as_text(resolve_field(item, "field_of_study")),
            institution=_as_text(resolve_field(item, "institution")),
            year=parse_year(resolve_field(item, "education_year")),
            is_verified=_as_bool(item.get("is_verified")),
        ))
    return entries


def _explicit_code(value: Any, codes: Mapping[str, Any]) -> Any:
    if value is None:
        return None
    return codes.get(str(value).strip().lower())


def map_experience(items: Any) -> List[ExperienceEntry]:
    entries = []
    for item in _as_list(items):
        position = _as_text(resolve_field(item, "position")) or ""
        organization = _as_text(resolve_field(item, "organization")) or ""

        role_type = _explicit_code(item.get("role_type"), LEGACY_ROLE_CODES) \
            or classify_role_type(position, organization)
        seniority = _explicit_code(item.get("seniority_level"), LEGACY_SENIORITY_CODES) \
            or classify_seniority(position)

        end_year = None
        if not _as_bool(item.get("is_current")):
            end_year = parse_year(resolve_field(item, "end_year"))

        entries.append(ExperienceEntry(
            role=position,
            role_type=role_type,
            organization=organization,
            start_year=parse_year(resolve_field(item, "start_year")),
            end_year=end_year,
            is_leadership=_as_bool(item.get("is_leadership")) or seniority in LEADERSHIP_SENIORITY,
            seniority_level=seniority,
        ))
    return entries


def map_political_trajectory(items: Any) -> List[ExperienceEntry]:
    """Political entries are merged into experience and always leadership-flagged."""
    entries = []
    for item in _as_list(items):
        kind = fold_text(_as_text(item.get("type")))
        if kind in _ELECTED_TYPES or _as_bool(item.get("is_elected")):
            role_type, seniority = RoleType.ELECTED_HIGH, SeniorityLevel.EXECUTIVE
        elif kind in _PUBLIC_APPOINTMENT_TYPES:
            role_type, seniority = RoleType.EXEC_PUBLIC_HIGH, SeniorityLevel.EXECUTIVE
        else:
            role_type, seniority = RoleType.PARTY_OFFICIAL, SeniorityLevel.COORDINATOR

        entries.append(ExperienceEntry(
            role=_as_text(resolve_field(item, "position")) or "",
            role_type=role_type,
            organization=_as_text(resolve_field(item, "political_organization")) or "",
            start_year=parse_year(resolve_field(item, "start_year")),
            end_year=parse_year(resolve_field(item, "end_year")),
            is_leadership=True,
            seniority_level=seniority,
        ))
    return entries


def map_penal_sentences(items: Any) -> List[PenalSentence]:
    sentences = []
    for item in _as_list(items):
        explicit_firm = item.get("is_firm")
        if isinstance(explicit_firm, bool):
            is_firm = explicit_firm
        else:
            is_firm = is_firm_status(_as_text(resolve_field(item, "sentence_status")))

        severity = _explicit_code(item.get("severity"), {s.value: s for s in PenalSeverity})
        sentences.append(PenalSentence(
            description=_as_text(resolve_field(item, "sentence_description")) or "",
            is_firm=is_firm,
            year=parse_year(resolve_field(item, "sentence_year")),
            severity=severity,
        ))
    return sentences


def map_civil_sentences(items: Any) -> List[CivilSentence]:
    sentences = []
    for item in _as_list(items):
        description = _as_text(resolve_field(item, "sentence_description")) or ""
        sentences.append(CivilSentence(
            type=classify_civil_sentence(_as_text(resolve_field(item, "civil_type")), description),
            description=description,
            year=parse_year(resolve_field(item, "sentence_year")),
        ))
    return sentences


def derive_verification_level(record: Mapping[str, Any]) -> int:
    """Explicit level when supplied; otherwise 50, +30 if data_verified, +20 if the source is verified."""
    explicit = parse_percentage(resolve_field(record, "verification_level"))
    if explicit is not None:
        return explicit
    level = 50
    if _as_bool(record.get("data_verified")):
        level += 30
    if "verified" in fold_text(record.get("data_source")):
        level += 20
    return level


def derive_coverage_level(record: Mapping[str, Any]) -> int:
    """Explicit level when supplied; otherwise the populated share of COVERAGE_SECTIONS."""
    explicit = parse_percentage(resolve_field(record, "coverage_level"))
    if explicit is not None:
        return explicit
    populated = 0
    for section in COVERAGE_SECTIONS:
        value = resolve_field(record, section)
        if isinstance(value, (list, tuple, dict)):
            populated += 1 if value else 0
        elif value is not None:
            populated += 1
    return round_score(Decimal(populated) * HUNDRED / Decimal(len(COVERAGE_SECTIONS)))


def build_profile(record: Mapping[str, Any]) -> CandidateProfile:
    """Map one raw record into a CandidateProfile (experience merged with political trajectory)."""
    experience = map_experience(resolve_field(record, "experience"))
    experience += map_political_trajectory(resolve_field(record, "political_trajectory"))

    profile = CandidateProfile(
        education=map_education(resolve_field(record, "education")),
        experience=experience,
        penal_sentences=map_penal_sentences(resolve_field(record, "penal_sentences")),
        civil_sentences=map_civil_sentences(resolve_field(record, "civil_sentences")),
        party_resignations=parse_count(resolve_field(record, "party_resignations")),
        verification_level=derive_verification_level(record),
        coverage_level=derive_coverage_level(record),
        declaration_completeness=parse_percentage(resolve_field(record, "declaration_completeness")),
        declaration_consistency=parse_percentage(resolve_field(record, "declaration_consistency")),
        assets_quality=parse_percentage(resolve_field(record, "assets_quality")),
    )
    logger.debug(
        "profile_mapped",
        candidate_id=resolve_field(record, "candidate_id"),
        education=len(profile.education),
        experience=len(profile.experience),
        penal=len(profile.penal_sentences),
        civil=len(profile.civil_sentences),
    )
    return profile
