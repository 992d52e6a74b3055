from enum import Enum


class EducationLevel(str, Enum):
    """Highest attained education, ordered by attainment."""
    NONE = "none"
    PRIMARY = "primary"
    SECONDARY_INCOMPLETE = "secondary_incomplete"
    SECONDARY_COMPLETE = "secondary_complete"
    TECHNICAL_INCOMPLETE = "technical_incomplete"
    TECHNICAL_COMPLETE = "technical_complete"
    UNIVERSITY_INCOMPLETE = "university_incomplete"
    UNIVERSITY_COMPLETE = "university_complete"
    PROFESSIONAL_TITLE = "professional_title"
    MASTERS = "masters"
    DOCTORATE = "doctorate"

class RoleType(str, Enum):
    ELECTED_HIGH = "elected_high"              # congress, mayor, governor
    ELECTED_MID = "elected_mid"                # councillor, regional councillor
    EXEC_PUBLIC_HIGH = "exec_public_high"      # minister, ambassador, agency head
    EXEC_PUBLIC_MID = "exec_public_mid"
    EXEC_PRIVATE_HIGH = "exec_private_high"
    EXEC_PRIVATE_MID = "exec_private_mid"
    TECHNICAL_PROFESSIONAL = "technical_professional"
    ACADEMIA = "academia"
    INTERNATIONAL = "international"
    PARTY_OFFICIAL = "party_official"

class SeniorityLevel(str, Enum):
    """Ordered from individual contributor up to executive."""
    INDIVIDUAL_CONTRIBUTOR = "individual_contributor"
    COORDINATOR = "coordinator"
    SUPERVISORY = "supervisory"
    MANAGEMENT = "management"
    EXECUTIVE = "executive"

class CivilSentenceType(str, Enum):
    VIOLENCE = "violence"
    ALIMONY = "alimony"          # support-obligation default
    LABOR = "labor"
    CONTRACTUAL = "contractual"

class PenalSeverity(str, Enum):
    SEVERE = "severe"
    STANDARD = "standard"

class OfficeCategory(str, Enum):
    PRESIDENT = "president"
    VICE_PRESIDENT = "vice_president"
    SENATOR = "senator"
    DEPUTY = "deputy"
    ANDEAN_PARLIAMENT = "andean_parliament"
