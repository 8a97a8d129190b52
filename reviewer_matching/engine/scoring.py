"""
Eligibility and scoring of a single reviewer against matching criteria
"""

import logging
from typing import List, Optional, Tuple

from reviewer_matching.config.settings import INELIGIBILITY_REASONS
from reviewer_matching.engine.availability import summarize_availability
from reviewer_matching.engine.coi import evaluate_coi
from reviewer_matching.utils.models import (
    AvailabilityStatus,
    AvailabilitySummary,
    COICheckResult,
    COISeverity,
    COIType,
    ExpertiseDetails,
    LanguageDetails,
    MatchingCriteria,
    MatchResult,
    ReviewerProfile,
    ScoreBreakdown,
    ScoringConfig,
)

logger = logging.getLogger(__name__)


class ReviewerScorer:
    """
    Scores one reviewer against one set of criteria.

    The score reflects capability (expertise, language, availability,
    experience). Eligibility is a separate gate: a blocking conflict, no
    conducted required language, or zero availability makes a reviewer
    ineligible without changing their score.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        """
        Initialize the scorer

        Args:
            config: Optional scoring constants, defaults from settings
        """
        self.config = config or ScoringConfig()

    # -------------------------------------------------------------------------
    # Component scores
    # -------------------------------------------------------------------------

    def score_expertise(self, reviewer: ReviewerProfile,
                        criteria: MatchingCriteria) -> Tuple[float, ExpertiseDetails]:
        """
        Score expertise match on a 0-100 scale

        Required areas share the required ceiling (75 by default) and
        preferred areas share the preferred ceiling (25). When no preferred
        areas are requested the required ceiling becomes 100, so adding a
        preferred area to the criteria lowers the score of a reviewer who
        lacks it (a full required match drops from 100 to 75). With no
        required areas the score is full whatever the preferred areas.

        Args:
            reviewer: Reviewer snapshot
            criteria: Matching criteria

        Returns:
            Tuple of (score, details)
        """
        levels = {record.area: record.proficiency_level for record in reviewer.expertise}
        multipliers = self.config.proficiency_multipliers
        required = list(dict.fromkeys(criteria.required_expertise))
        preferred = [area for area in dict.fromkeys(criteria.preferred_expertise) if area not in required]

        required_ceiling = self.config.required_expertise_ceiling
        preferred_ceiling = self.config.preferred_expertise_ceiling
        if not preferred:
            required_ceiling = 100.0

        matched_required = [area for area in required if area in levels]
        missing_required = [area for area in required if area not in levels]
        matched_preferred = [area for area in preferred if area in levels]

        details = ExpertiseDetails(
            matched_required=matched_required,
            missing_required=missing_required,
            matched_preferred=matched_preferred,
        )
        if not required:
            return 100.0, details

        share = required_ceiling / len(required)
        required_points = sum(share * multipliers.get(levels[area].value, 1.0) for area in matched_required)
        required_points = min(required_points, required_ceiling)

        preferred_points = 0.0
        if preferred:
            share = preferred_ceiling / len(preferred)
            preferred_points = sum(share * multipliers.get(levels[area].value, 1.0) for area in matched_preferred)
            # The bonus never outweighs what required matches can earn
            preferred_points = min(preferred_points, preferred_ceiling, required_ceiling)

        return min(required_points + preferred_points, 100.0), details

    def score_language(self, reviewer: ReviewerProfile,
                       criteria: MatchingCriteria) -> Tuple[float, LanguageDetails]:
        """
        Score language match on a 0-100 scale

        Args:
            reviewer: Reviewer snapshot
            criteria: Matching criteria

        Returns:
            Tuple of (score, details)
        """
        records = {record.language: record for record in reviewer.languages if record.can_conduct}
        required = list(dict.fromkeys(criteria.required_languages))

        matched = [language for language in required if language in records]
        missing = [language for language in required if language not in records]
        native = [language for language in matched if records[language].is_native]

        details = LanguageDetails(matched_languages=matched, missing_languages=missing, native_languages=native)
        if not required:
            return 100.0, details

        share = 100.0 / len(required)
        points = len(matched) * share * self.config.language_base_share
        points += len(native) * share * self.config.language_native_bonus
        return min(points, 100.0), details

    def score_experience(self, reviewer: ReviewerProfile) -> float:
        """Half from years of experience, half from completed reviews, each saturating"""
        years = min(reviewer.years_experience, self.config.years_ceiling) / self.config.years_ceiling
        reviews = min(reviewer.reviews_completed, self.config.reviews_ceiling) / self.config.reviews_ceiling
        return 50.0 * years + 50.0 * reviews

    def combine(self, breakdown: ScoreBreakdown) -> float:
        """Weighted percentage of the component scores"""
        weights = self.config.weights
        total = (
            weights["expertise"] * breakdown.expertise_score
            + weights["language"] * breakdown.language_score
            + weights["availability"] * breakdown.availability_score
            + weights["experience"] * breakdown.experience_score
        )
        return min(max(total / sum(weights.values()), 0.0), 100.0)

    # -------------------------------------------------------------------------
    # Eligibility
    # -------------------------------------------------------------------------

    def determine_eligibility(self, coi_status: COICheckResult, language_details: LanguageDetails,
                              criteria: MatchingCriteria,
                              availability: AvailabilitySummary) -> Tuple[bool, Optional[str]]:
        """
        Apply the hard gate, returning the first failing reason

        Args:
            coi_status: COI verdict against the target organization
            language_details: Language match details
            criteria: Matching criteria
            availability: Availability summary over the review period

        Returns:
            Tuple of (is_eligible, reason)
        """
        if coi_status.severity == COISeverity.HARD and not coi_status.can_override:
            if coi_status.coi_type == COIType.HOME_ORGANIZATION:
                return False, INELIGIBILITY_REASONS["HOME_ORGANIZATION"]
            if coi_status.coi_type == COIType.FAMILY_RELATIONSHIP:
                return False, INELIGIBILITY_REASONS["FAMILY_RELATIONSHIP"]
            return False, INELIGIBILITY_REASONS["COI"]

        if criteria.required_languages and not language_details.matched_languages:
            return False, INELIGIBILITY_REASONS["LANGUAGE"]

        if availability.coverage == 0:
            return False, INELIGIBILITY_REASONS["AVAILABILITY"]

        return True, None

    def build_warnings(self, reviewer: ReviewerProfile, criteria: MatchingCriteria,
                       expertise_details: ExpertiseDetails, language_details: LanguageDetails,
                       availability: AvailabilitySummary, coi_status: COICheckResult) -> List[str]:
        """Non-blocking warnings in a fixed order"""
        warnings = []

        if expertise_details.missing_required:
            areas = ", ".join(area.value for area in expertise_details.missing_required)
            warnings.append(f"Missing expertise: {areas}")

        if language_details.missing_languages:
            languages = ", ".join(language.value for language in language_details.missing_languages)
            warnings.append(f"Missing languages: {languages}")

        if availability.coverage < self.config.availability_threshold:
            warnings.append(f"Low availability: {round(availability.coverage * 100)}%")

        if coi_status.has_conflict:
            if coi_status.severity == COISeverity.HARD:
                suffix = " (waived)" if coi_status.is_waived else ""
                warnings.append(f"Hard COI: {coi_status.reason}{suffix}")
            else:
                warnings.append(f"Soft COI: {coi_status.reason}")

        if criteria.lead_required and not reviewer.is_lead_qualified:
            warnings.append("Not lead-qualified")

        return warnings

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def score(self, reviewer: ReviewerProfile, criteria: MatchingCriteria) -> MatchResult:
        """
        Score a reviewer and decide eligibility

        Args:
            reviewer: Reviewer snapshot
            criteria: Matching criteria

        Returns:
            MatchResult for this reviewer
        """
        availability = summarize_availability(
            reviewer.availability_slots,
            criteria.review_start_date,
            criteria.review_end_date,
            tentative_weight=self.config.tentative_day_weight,
        )
        coi_status = evaluate_coi(
            reviewer,
            criteria.target_organization_id,
            as_of=criteria.review_start_date,
            period_end=criteria.review_end_date,
        )

        expertise_score, expertise_details = self.score_expertise(reviewer, criteria)
        language_score, language_details = self.score_language(reviewer, criteria)
        breakdown = ScoreBreakdown(
            expertise_score=expertise_score,
            language_score=language_score,
            availability_score=availability.coverage * 100.0,
            experience_score=self.score_experience(reviewer),
        )

        is_eligible, reason = self.determine_eligibility(coi_status, language_details, criteria, availability)
        warnings = self.build_warnings(
            reviewer, criteria, expertise_details, language_details, availability, coi_status
        )

        result = MatchResult(
            reviewer_id=reviewer.id,
            full_name=reviewer.full_name,
            organization_id=reviewer.home_organization_id,
            is_lead_qualified=reviewer.is_lead_qualified,
            years_experience=reviewer.years_experience,
            reviews_completed=reviewer.reviews_completed,
            is_eligible=is_eligible,
            ineligibility_reason=reason,
            percentage=self.combine(breakdown),
            breakdown=breakdown,
            expertise_details=expertise_details,
            language_details=language_details,
            availability_status=AvailabilityStatus(
                is_available=availability.coverage >= self.config.availability_threshold,
                coverage=availability.coverage,
                available_days=availability.available_days,
                tentative_days=availability.tentative_days,
                total_days=availability.total_days,
            ),
            coi_status=coi_status,
            warnings=warnings,
        )
        logger.debug(
            f"Scored {reviewer.id}: {result.percentage:.1f}% "
            f"({'eligible' if is_eligible else reason})"
        )
        return result


def score_reviewer(reviewer: ReviewerProfile, criteria: MatchingCriteria,
                   config: Optional[ScoringConfig] = None) -> MatchResult:
    """Score a single reviewer with a one-off scorer"""
    return ReviewerScorer(config).score(reviewer, criteria)
