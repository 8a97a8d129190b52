"""
Configuration settings for the reviewer matching engine
"""

import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

# Pick up overrides from a local .env file, if one exists
load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a float override from the environment"""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got {value!r}") from None


# Score weights (each component is scored 0-100, combined into a percentage)
MATCHING_WEIGHTS = {
    "expertise": _env_float("MATCHING_WEIGHT_EXPERTISE", 40.0),
    "language": _env_float("MATCHING_WEIGHT_LANGUAGE", 20.0),
    "availability": _env_float("MATCHING_WEIGHT_AVAILABILITY", 25.0),
    "experience": _env_float("MATCHING_WEIGHT_EXPERIENCE", 15.0),
}

# Expertise scoring
EXPERTISE_PROFICIENCY_MULTIPLIERS = {
    "BASIC": 0.6,
    "COMPETENT": 0.8,
    "PROFICIENT": 1.0,
    "EXPERT": 1.2,
}
EXPERTISE_SCORE_SPLIT = {
    "required": 75.0,      # Ceiling for required-area matches
    "preferred": 25.0,     # Ceiling for the preferred-area bonus
}

# Language scoring (fractions of the per-language share)
LANGUAGE_SCORE_SPLIT = {
    "base": 0.85,          # Can conduct the review in the language
    "native_bonus": 0.15,  # Native speaker
}

# Proficiency levels at which a reviewer can conduct a review when the
# snapshot does not say so explicitly
CONDUCTING_LANGUAGE_PROFICIENCIES = ["INTERMEDIATE", "ADVANCED", "NATIVE"]

# Experience scoring (linear up to the ceiling, flat beyond)
EXPERIENCE_CEILINGS = {
    "years": _env_float("EXPERIENCE_YEARS_CEILING", 15.0),
    "reviews": _env_float("EXPERIENCE_REVIEWS_CEILING", 10.0),
}

# Availability
TENTATIVE_DAY_WEIGHT = 0.5
AVAILABILITY_WARNING_THRESHOLD = _env_float("AVAILABILITY_WARNING_THRESHOLD", 0.8)
COMMON_AVAILABILITY_MIN_DAYS = 5

# Team building: value of each newly covered requirement
TEAM_GAIN_WEIGHTS = {
    "expertise": 10.0,
    "language": 8.0,
    "lead": 15.0,
}

# Team balance classification
BALANCE_THRESHOLDS = {
    "good_expertise": 0.8,
    "good_language": 1.0,
    "poor_expertise": 0.5,
    "poor_language": 0.5,
}

# Team viability
VIABILITY_THRESHOLDS = {
    "min_size_ratio": 0.8,
    "min_expertise_coverage": 0.5,
    "min_language_coverage": 0.5,
}

# COI types that are always hard conflicts
HARD_COI_TYPES = ["HOME_ORGANIZATION", "FAMILY_RELATIONSHIP"]

COI_REASONS: Dict[str, str] = {
    "HOME_ORGANIZATION": "Current employer",
    "FAMILY_RELATIONSHIP": "Family relationship",
    "FORMER_EMPLOYEE": "Former employee",
    "BUSINESS_INTEREST": "Business interest",
    "RECENT_REVIEW": "Recently reviewed this organization",
    "EMPLOYMENT": "Employment relationship",
    "FINANCIAL": "Financial interest",
    "CONTRACTUAL": "Contractual relationship",
    "PERSONAL": "Personal relationship",
    "PREVIOUS_REVIEW": "Previously reviewed",
    "OTHER": "Other declared conflict",
}

INELIGIBILITY_REASONS: Dict[str, str] = {
    "HOME_ORGANIZATION": "Works at target organization",
    "FAMILY_RELATIONSHIP": "Has family member at target organization",
    "COI": "Conflict of interest with target organization",
    "LANGUAGE": "Cannot conduct review in any required language",
    "AVAILABILITY": "Unavailable during review period",
}

# General settings
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DATA_PATH = PROJECT_ROOT / "reviewers.json"
DEFAULT_CRITERIA_PATH = PROJECT_ROOT / "criteria.json"
DEFAULT_OUTPUT_PATH = PROJECT_ROOT / "team.json"
SHORTLIST_SIZE = 10
