"""
Data models for the reviewer matching engine
"""

from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from reviewer_matching.config.settings import (
    AVAILABILITY_WARNING_THRESHOLD,
    BALANCE_THRESHOLDS,
    CONDUCTING_LANGUAGE_PROFICIENCIES,
    HARD_COI_TYPES,
    EXPERIENCE_CEILINGS,
    EXPERTISE_PROFICIENCY_MULTIPLIERS,
    EXPERTISE_SCORE_SPLIT,
    LANGUAGE_SCORE_SPLIT,
    MATCHING_WEIGHTS,
    TEAM_GAIN_WEIGHTS,
    TENTATIVE_DAY_WEIGHT,
    VIABILITY_THRESHOLDS,
)


# =============================================================================
# DOMAIN ENUMS
# =============================================================================

class ExpertiseArea(str, Enum):
    """Audit competency a reviewer can cover"""
    ATS = "ATS"
    AIM_AIS = "AIM_AIS"
    FPD = "FPD"
    MAP = "MAP"
    MET = "MET"
    CNS = "CNS"
    SAR = "SAR"
    PANS_OPS = "PANS_OPS"
    SMS_POLICY = "SMS_POLICY"
    SMS_RISK = "SMS_RISK"
    SMS_ASSURANCE = "SMS_ASSURANCE"
    SMS_PROMOTION = "SMS_PROMOTION"
    AERODROME = "AERODROME"
    RFF = "RFF"
    ENGINEERING = "ENGINEERING"
    QMS = "QMS"
    TRAINING = "TRAINING"
    HUMAN_FACTORS = "HUMAN_FACTORS"


class Language(str, Enum):
    """Working language of a review"""
    EN = "EN"
    FR = "FR"
    PT = "PT"
    AR = "AR"
    ES = "ES"


class ProficiencyLevel(str, Enum):
    """Skill tier for an expertise area"""
    BASIC = "BASIC"
    COMPETENT = "COMPETENT"
    PROFICIENT = "PROFICIENT"
    EXPERT = "EXPERT"


class LanguageProficiency(str, Enum):
    """Skill tier for a language"""
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    NATIVE = "NATIVE"


class AvailabilityType(str, Enum):
    """Classification of a day in a reviewer's calendar"""
    AVAILABLE = "AVAILABLE"
    TENTATIVE = "TENTATIVE"
    UNAVAILABLE = "UNAVAILABLE"
    ON_ASSIGNMENT = "ON_ASSIGNMENT"


class COIType(str, Enum):
    """Declared relationship between a reviewer and an organization"""
    HOME_ORGANIZATION = "HOME_ORGANIZATION"
    FAMILY_RELATIONSHIP = "FAMILY_RELATIONSHIP"
    FORMER_EMPLOYEE = "FORMER_EMPLOYEE"
    BUSINESS_INTEREST = "BUSINESS_INTEREST"
    RECENT_REVIEW = "RECENT_REVIEW"
    EMPLOYMENT = "EMPLOYMENT"
    FINANCIAL = "FINANCIAL"
    CONTRACTUAL = "CONTRACTUAL"
    PERSONAL = "PERSONAL"
    PREVIOUS_REVIEW = "PREVIOUS_REVIEW"
    OTHER = "OTHER"


class COISeverity(str, Enum):
    """HARD conflicts block assignment, SOFT conflicts warn"""
    HARD = "HARD"
    SOFT = "SOFT"


class VerificationDecisionType(str, Enum):
    """Admin decision on a declared conflict"""
    CONFIRM = "CONFIRM"
    WAIVE = "WAIVE"
    REJECT = "REJECT"


class SelectionStatus(str, Enum):
    """Programme status of a reviewer"""
    NOMINATED = "NOMINATED"
    UNDER_REVIEW = "UNDER_REVIEW"
    SELECTED = "SELECTED"
    INACTIVE = "INACTIVE"
    WITHDRAWN = "WITHDRAWN"
    REJECTED = "REJECTED"


class TeamBalance(str, Enum):
    """Coarse verdict on how well a team meets its requirements"""
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


def _check_date_order(start: Optional[date], end: Optional[date], label: str) -> None:
    """Raise if an inclusive date range ends before it starts"""
    if start is not None and end is not None and end < start:
        raise ValueError(f"{label}: end date {end} is before start date {start}")


# =============================================================================
# INPUT SNAPSHOTS
# =============================================================================

class ExpertiseRecord(BaseModel):
    """Expertise held by a reviewer"""
    area: ExpertiseArea
    proficiency_level: ProficiencyLevel = Field(default=ProficiencyLevel.PROFICIENT)
    years_experience: float = Field(default=0.0, ge=0)


class LanguageRecord(BaseModel):
    """Language spoken by a reviewer"""
    language: Language
    proficiency: LanguageProficiency = Field(default=LanguageProficiency.INTERMEDIATE)
    is_native: Optional[bool] = Field(default=None)
    can_conduct: Optional[bool] = Field(default=None)

    @model_validator(mode="after")
    def _derive_flags(self) -> "LanguageRecord":
        if self.is_native is None:
            self.is_native = self.proficiency == LanguageProficiency.NATIVE
        if self.can_conduct is None:
            self.can_conduct = self.proficiency.value in CONDUCTING_LANGUAGE_PROFICIENCIES
        return self


class AvailabilitySlot(BaseModel):
    """Inclusive date range with a single availability type"""
    start_date: date
    end_date: date
    availability_type: AvailabilityType
    notes: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def _check_range(self) -> "AvailabilitySlot":
        _check_date_order(self.start_date, self.end_date, "availability slot")
        return self


class VerificationDecision(BaseModel):
    """
    Admin verification of a declared conflict.

    WAIVE and REJECT must carry a justification. A waiver may expire.
    """
    decision: VerificationDecisionType
    justification: str = Field(default="")
    waiver_expiry_date: Optional[date] = Field(default=None)

    @model_validator(mode="after")
    def _require_justification(self) -> "VerificationDecision":
        if self.decision != VerificationDecisionType.CONFIRM and not self.justification.strip():
            raise ValueError(f"{self.decision.value} decision requires a justification")
        if self.decision != VerificationDecisionType.WAIVE and self.waiver_expiry_date is not None:
            raise ValueError("waiver_expiry_date is only valid for a WAIVE decision")
        return self


class ConflictOfInterest(BaseModel):
    """Declared conflict of interest against an organization"""
    organization_id: str
    coi_type: COIType
    is_active: bool = Field(default=True)
    is_verified: bool = Field(default=False)
    start_date: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)
    verification_decision: Optional[VerificationDecisionType] = Field(default=None)
    justification: Optional[str] = Field(default=None)
    waiver_expiry_date: Optional[date] = Field(default=None)

    @model_validator(mode="after")
    def _check_verification(self) -> "ConflictOfInterest":
        _check_date_order(self.start_date, self.end_date, "conflict of interest")
        if self.verification_decision in (VerificationDecisionType.WAIVE, VerificationDecisionType.REJECT):
            if not (self.justification or "").strip():
                raise ValueError(
                    f"{self.verification_decision.value} decision on {self.coi_type.value} conflict "
                    f"with {self.organization_id} requires a justification"
                )
        return self

    @property
    def severity(self) -> COISeverity:
        """Severity is derived from the conflict type"""
        if self.coi_type.value in HARD_COI_TYPES:
            return COISeverity.HARD
        return COISeverity.SOFT


class ReviewerProfile(BaseModel):
    """Read-only snapshot of a reviewer"""
    id: str
    full_name: str = Field(default="")
    home_organization_id: str
    organization_name: str = Field(default="")
    expertise: List[ExpertiseRecord] = Field(default_factory=list)
    languages: List[LanguageRecord] = Field(default_factory=list)
    availability_slots: List[AvailabilitySlot] = Field(default_factory=list)
    conflicts_of_interest: List[ConflictOfInterest] = Field(default_factory=list)
    is_lead_qualified: bool = Field(default=False)
    reviews_completed: int = Field(default=0, ge=0)
    years_experience: float = Field(default=0.0, ge=0)
    selection_status: SelectionStatus = Field(default=SelectionStatus.SELECTED)

    @field_validator("home_organization_id")
    @classmethod
    def _require_home_organization(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("reviewer is missing home_organization_id")
        return value

    @property
    def conducted_languages(self) -> List[Language]:
        """Languages this reviewer can conduct a review in"""
        return [record.language for record in self.languages if record.can_conduct]


class MatchingCriteria(BaseModel):
    """Requirements for one review"""
    target_organization_id: str
    required_expertise: List[ExpertiseArea] = Field(default_factory=list)
    preferred_expertise: List[ExpertiseArea] = Field(default_factory=list)
    required_languages: List[Language] = Field(default_factory=list)
    review_start_date: date
    review_end_date: date
    team_size: int
    must_include_reviewer_ids: List[str] = Field(default_factory=list)
    exclude_reviewer_ids: List[str] = Field(default_factory=list)
    lead_required: bool = Field(default=False)

    @field_validator("team_size", mode="before")
    @classmethod
    def _check_team_size(cls, value):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"team_size must be a non-negative integer, got {value!r}")
        return value

    @model_validator(mode="after")
    def _check_period(self) -> "MatchingCriteria":
        _check_date_order(self.review_start_date, self.review_end_date, "review period")
        return self


# =============================================================================
# CONFIGURATION SNAPSHOT
# =============================================================================

class ScoringConfig(BaseModel):
    """
    Tunable constants used by scoring and team building.
    Defaults come from reviewer_matching.config.settings.
    """
    model_config = ConfigDict(frozen=True)

    weights: Dict[str, float] = Field(default_factory=lambda: dict(MATCHING_WEIGHTS))
    proficiency_multipliers: Dict[str, float] = Field(
        default_factory=lambda: dict(EXPERTISE_PROFICIENCY_MULTIPLIERS)
    )
    required_expertise_ceiling: float = Field(default=EXPERTISE_SCORE_SPLIT["required"], ge=0)
    preferred_expertise_ceiling: float = Field(default=EXPERTISE_SCORE_SPLIT["preferred"], ge=0)
    language_base_share: float = Field(default=LANGUAGE_SCORE_SPLIT["base"], ge=0, le=1)
    language_native_bonus: float = Field(default=LANGUAGE_SCORE_SPLIT["native_bonus"], ge=0, le=1)
    years_ceiling: float = Field(default=EXPERIENCE_CEILINGS["years"], gt=0)
    reviews_ceiling: float = Field(default=EXPERIENCE_CEILINGS["reviews"], gt=0)
    tentative_day_weight: float = Field(default=TENTATIVE_DAY_WEIGHT, ge=0, le=1)
    availability_threshold: float = Field(default=AVAILABILITY_WARNING_THRESHOLD, ge=0, le=1)
    gain_weights: Dict[str, float] = Field(default_factory=lambda: dict(TEAM_GAIN_WEIGHTS))
    balance_thresholds: Dict[str, float] = Field(default_factory=lambda: dict(BALANCE_THRESHOLDS))
    viability_thresholds: Dict[str, float] = Field(default_factory=lambda: dict(VIABILITY_THRESHOLDS))

    @field_validator("weights")
    @classmethod
    def _check_weights(cls, value: Dict[str, float]) -> Dict[str, float]:
        missing = {"expertise", "language", "availability", "experience"} - set(value)
        if missing:
            raise ValueError(f"weights missing components: {sorted(missing)}")
        if any(weight < 0 for weight in value.values()) or sum(value.values()) <= 0:
            raise ValueError("weights must be non-negative and sum to a positive value")
        return value


# =============================================================================
# DERIVED RESULTS
# =============================================================================

class AvailabilitySummary(BaseModel):
    """Day-by-day availability of one reviewer over a date range"""
    model_config = ConfigDict(frozen=True)

    coverage: float = Field(ge=0.0, le=1.0)
    available_days: int = 0
    tentative_days: int = 0
    unavailable_days: int = 0
    on_assignment_days: int = 0
    total_days: int = 0
    per_day_type: Dict[date, AvailabilityType] = Field(default_factory=dict)
    conflicts: List[str] = Field(default_factory=list)


class CommonAvailabilityWindow(BaseModel):
    """Run of consecutive days on which a whole team is available"""
    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    days_count: int


class COICheckResult(BaseModel):
    """Conflict-of-interest verdict for one reviewer and one organization"""
    model_config = ConfigDict(frozen=True)

    organization_id: str
    has_conflict: bool = False
    severity: Optional[COISeverity] = None
    can_override: bool = False
    is_waived: bool = False
    coi_type: Optional[COIType] = None
    reason: str = ""


class ReviewerCOIStatus(BaseModel):
    """COI verdict for one member of a proposed team"""
    model_config = ConfigDict(frozen=True)

    reviewer_id: str
    full_name: str
    status: str  # blocked/override_active/warning/eligible
    check: COICheckResult


class TeamCOICheckResult(BaseModel):
    """COI verdict for a whole proposed team"""
    model_config = ConfigDict(frozen=True)

    organization_id: str
    reviewers: List[ReviewerCOIStatus] = Field(default_factory=list)
    blocked_reviewer_ids: List[str] = Field(default_factory=list)
    warning_reviewer_ids: List[str] = Field(default_factory=list)
    override_reviewer_ids: List[str] = Field(default_factory=list)
    can_proceed: bool = True


class ScoreBreakdown(BaseModel):
    """Component scores, each 0-100"""
    model_config = ConfigDict(frozen=True)

    expertise_score: float = Field(ge=0.0, le=100.0)
    language_score: float = Field(ge=0.0, le=100.0)
    availability_score: float = Field(ge=0.0, le=100.0)
    experience_score: float = Field(ge=0.0, le=100.0)


class ExpertiseDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    matched_required: List[ExpertiseArea] = Field(default_factory=list)
    missing_required: List[ExpertiseArea] = Field(default_factory=list)
    matched_preferred: List[ExpertiseArea] = Field(default_factory=list)


class LanguageDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    matched_languages: List[Language] = Field(default_factory=list)
    missing_languages: List[Language] = Field(default_factory=list)
    native_languages: List[Language] = Field(default_factory=list)


class AvailabilityStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_available: bool
    coverage: float = Field(ge=0.0, le=1.0)
    available_days: int
    tentative_days: int = 0
    total_days: int


class MatchResult(BaseModel):
    """Eligibility and score of one reviewer against one set of criteria"""
    model_config = ConfigDict(frozen=True)

    reviewer_id: str
    full_name: str
    organization_id: str
    is_lead_qualified: bool = False
    years_experience: float = 0.0
    reviews_completed: int = 0
    is_eligible: bool
    ineligibility_reason: Optional[str] = None
    percentage: float = Field(ge=0.0, le=100.0)
    breakdown: ScoreBreakdown
    expertise_details: ExpertiseDetails
    language_details: LanguageDetails
    availability_status: AvailabilityStatus
    coi_status: COICheckResult
    warnings: List[str] = Field(default_factory=list)


class CoverageReport(BaseModel):
    """Aggregate coverage of a team against the criteria"""
    model_config = ConfigDict(frozen=True)

    expertise_coverage: float = Field(ge=0.0, le=1.0)
    expertise_covered: List[ExpertiseArea] = Field(default_factory=list)
    expertise_missing: List[ExpertiseArea] = Field(default_factory=list)
    language_coverage: float = Field(ge=0.0, le=1.0)
    languages_covered: List[Language] = Field(default_factory=list)
    languages_missing: List[Language] = Field(default_factory=list)
    has_lead_qualified: bool = False
    team_balance: TeamBalance


class SelectionStep(BaseModel):
    """One round of team selection"""
    model_config = ConfigDict(frozen=True)

    round: int
    reviewer_id: str
    full_name: str
    marginal_gain: float = 0.0
    forced: bool = False


class TeamBuildResult(BaseModel):
    """Selected team with its coverage report"""
    model_config = ConfigDict(frozen=True)

    team: List[MatchResult] = Field(default_factory=list)
    coverage_report: CoverageReport
    requested_size: int = 0
    total_score: float = 0.0
    average_score: float = 0.0
    is_viable: bool = False
    warnings: List[str] = Field(default_factory=list)
    selection_history: List[SelectionStep] = Field(default_factory=list)
