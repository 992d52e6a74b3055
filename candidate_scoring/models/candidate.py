from pydantic import BaseModel, Field
from typing import Optional, List

from candidate_scoring.models.enumerations import (
    CivilSentenceType,
    EducationLevel,
    PenalSeverity,
    RoleType,
    SeniorityLevel,
)


class EducationEntry(BaseModel):
    """
    One normalized education record.
    """

    level: EducationLevel = Field(
        default=EducationLevel.NONE,
        description="Normalized attainment level"
    )

    field: Optional[str] = Field(
        default=None,
        description="Field of study or degree text"
    )

    institution: Optional[str] = Field(
        default=None,
        description="Granting institution"
    )

    year: Optional[int] = Field(
        default=None,
        ge=1900,
        le=2100,
        description="Year the level was attained, when known"
    )

    is_verified: bool = Field(
        default=False,
        description="Corroborated against an authoritative registry"
    )


class ExperienceEntry(BaseModel):
    """
    One normalized work or political-trajectory record.
    """

    role: str = Field(
        default="",
        description="Position title as declared"
    )

    role_type: RoleType = Field(
        default=RoleType.TECHNICAL_PROFESSIONAL,
        description="Closed role category"
    )

    organization: str = Field(
        default="",
        description="Employer or institution"
    )

    start_year: Optional[int] = Field(
        default=None,
        ge=1900,
        le=2100,
        description="Start year; None when the source value was unparseable"
    )

    end_year: Optional[int] = Field(
        default=None,
        ge=1900,
        le=2100,
        description="End year; None means the role is still held"
    )

    is_leadership: bool = Field(
        default=False,
        description="Leadership-flagged entry (always true for political trajectory)"
    )

    seniority_level: SeniorityLevel = Field(
        default=SeniorityLevel.INDIVIDUAL_CONTRIBUTOR,
        description="Closed seniority category"
    )


class PenalSentence(BaseModel):
    description: str = Field(default="", description="Offence narrative")
    is_firm: bool = Field(default=False, description="Final / enforceable judgment")
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    severity: Optional[PenalSeverity] = Field(
        default=None,
        description="Explicit severity class; classified from the description when absent"
    )


class CivilSentence(BaseModel):
    type: CivilSentenceType = Field(default=CivilSentenceType.CONTRACTUAL)
    description: str = Field(default="")
    year: Optional[int] = Field(default=None, ge=1900, le=2100)


class CandidateProfile(BaseModel):
    """
    Engine input: the normalized view of one candidate's public record.

    Experience and political-trajectory entries are already merged into
    ``experience``. Declaration fields are optional; the transparency
    calculator applies its documented baseline when they are absent.
    """

    education: List[EducationEntry] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    penal_sentences: List[PenalSentence] = Field(default_factory=list)
    civil_sentences: List[CivilSentence] = Field(default_factory=list)

    party_resignations: int = Field(
        default=0,
        ge=0,
        description="Number of times the candidate resigned from a party"
    )

    verification_level: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Share of the record corroborated against authoritative sources"
    )

    coverage_level: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Share of expected record sections that are populated"
    )

    declaration_completeness: Optional[int] = Field(default=None, ge=0, le=100)
    declaration_consistency: Optional[int] = Field(default=None, ge=0, le=100)
    assets_quality: Optional[int] = Field(default=None, ge=0, le=100)
