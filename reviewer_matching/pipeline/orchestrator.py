"""
Orchestrator for the reviewer matching pipeline
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from reviewer_matching.config.settings import (
    DEFAULT_CRITERIA_PATH,
    DEFAULT_DATA_PATH,
    DEFAULT_OUTPUT_PATH,
    SHORTLIST_SIZE,
)
from reviewer_matching.engine.matcher import ReviewerMatcher, get_top_candidates
from reviewer_matching.engine.preprocessing import SnapshotLoader
from reviewer_matching.engine.team_builder import TeamBuilder
from reviewer_matching.utils.models import (
    MatchingCriteria,
    MatchResult,
    ReviewerProfile,
    ScoringConfig,
    TeamBuildResult,
)

logger = logging.getLogger(__name__)


class MatchingOrchestrator:
    """
    Orchestrator for the reviewer matching pipeline

    Chains snapshot loading, matching and team building
    """

    def __init__(self,
                 data_path: Union[str, Path] = DEFAULT_DATA_PATH,
                 criteria_path: Union[str, Path] = DEFAULT_CRITERIA_PATH,
                 output_path: Union[str, Path] = DEFAULT_OUTPUT_PATH,
                 team_size: Optional[int] = None,
                 shortlist_size: int = SHORTLIST_SIZE,
                 max_workers: Optional[int] = None,
                 config: Optional[ScoringConfig] = None):
        """
        Initialize the matching orchestrator

        Args:
            data_path: Path to the reviewer snapshot file (JSON or CSV)
            criteria_path: Path to the criteria JSON file
            output_path: Path to the output file
            team_size: Overrides the team size given in the criteria file
            shortlist_size: Number of ranked candidates shown in the shortlist
            max_workers: Thread count for scoring
            config: Optional scoring constants
        """
        logger.info("Initializing MatchingOrchestrator")

        self.data_path = data_path
        self.criteria_path = criteria_path
        self.output_path = output_path
        self.team_size = team_size
        self.shortlist_size = shortlist_size

        self.loader = SnapshotLoader()
        self.matcher = ReviewerMatcher(config, max_workers=max_workers)
        self.team_builder = TeamBuilder(config)

        # Storage for intermediate results
        self.reviewers: List[ReviewerProfile] = []
        self.criteria: Optional[MatchingCriteria] = None
        self.match_results: List[MatchResult] = []
        self.team_result: Optional[TeamBuildResult] = None

    def run(self) -> TeamBuildResult:
        """
        Run the full matching pipeline

        Returns:
            Team build result
        """
        logger.info("Running matching pipeline")

        # Step 1: Load snapshots and criteria
        self._load_data()

        # Step 2: Score and rank every reviewer
        self._match_reviewers()

        # Step 3: Assemble the team
        self._build_team()

        return self.team_result

    def _load_data(self) -> None:
        logger.info(f"Loading reviewers from {self.data_path}")
        self.reviewers = self.loader.load_reviewers(self.data_path)

        criteria = self.loader.load_criteria(self.criteria_path)
        if self.team_size is not None:
            criteria = MatchingCriteria.model_validate(
                {**criteria.model_dump(), "team_size": self.team_size}
            )
        self.criteria = criteria

        logger.info(f"Loaded {len(self.reviewers)} reviewers, team size {criteria.team_size}")

    def _match_reviewers(self) -> None:
        self.match_results = self.matcher.find_matching_reviewers(self.criteria, self.reviewers)

    def _build_team(self) -> None:
        self.team_result = self.team_builder.build_optimal_team(self.criteria, self.match_results)

    def shortlist(self, count: Optional[int] = None) -> List[MatchResult]:
        """Top ranked match results, eligible or not"""
        return get_top_candidates(self.match_results, self.shortlist_size if count is None else count)

    def results_frame(self) -> pd.DataFrame:
        """
        Flatten match results into a DataFrame, one row per reviewer

        Returns:
            DataFrame in ranking order
        """
        rows = []
        for rank, result in enumerate(self.match_results, 1):
            rows.append({
                "rank": rank,
                "reviewer_id": result.reviewer_id,
                "full_name": result.full_name,
                "organization_id": result.organization_id,
                "is_eligible": result.is_eligible,
                "ineligibility_reason": result.ineligibility_reason,
                "percentage": round(result.percentage, 1),
                "expertise_score": round(result.breakdown.expertise_score, 1),
                "language_score": round(result.breakdown.language_score, 1),
                "availability_score": round(result.breakdown.availability_score, 1),
                "experience_score": round(result.breakdown.experience_score, 1),
                "warnings": "; ".join(result.warnings),
            })
        return pd.DataFrame(rows)

    def save_results(self, output_path: Optional[Union[str, Path]] = None) -> None:
        """
        Save results to file

        Args:
            output_path: Optional path to output file
        """
        path = output_path or self.output_path
        logger.info(f"Saving results to {path}")

        if self.team_result is not None:
            results = self.team_result.model_dump(mode="json")
            results["shortlist"] = [
                {
                    "reviewer_id": result.reviewer_id,
                    "full_name": result.full_name,
                    "percentage": round(result.percentage, 1),
                    "is_eligible": result.is_eligible,
                    "ineligibility_reason": result.ineligibility_reason,
                }
                for result in self.shortlist()
            ]
        else:
            results = {"error": "No results available"}

        with open(path, "w", encoding="utf-8") as f:
            json.dump(results, f, indent=2)

        logger.info(f"Results saved to {path}")

    def display_team(self) -> None:
        """
        Display the selected team
        """
        if self.team_result is None:
            logger.warning("No team selected yet")
            return

        result = self.team_result
        report = result.coverage_report

        print("\n" + "=" * 80)
        print("SELECTED REVIEW TEAM".center(80))
        print("=" * 80 + "\n")

        if not result.team:
            print("No reviewers selected")

        forced_ids = {step.reviewer_id for step in result.selection_history if step.forced}
        for i, member in enumerate(result.team, 1):
            lead = " [lead]" if member.is_lead_qualified else ""
            forced = " [required]" if member.reviewer_id in forced_ids else ""
            expertise = ", ".join(area.value for area in member.expertise_details.matched_required) or "None"
            languages = ", ".join(lang.value for lang in member.language_details.matched_languages) or "None"

            print(f"{i}. {member.full_name} ({member.organization_id}){lead}{forced} "
                  f"(Score: {member.percentage:.1f}%)")
            print(f"   Expertise: {expertise}")
            print(f"   Languages: {languages}")
            print(f"   Availability: {member.availability_status.coverage:.0%} "
                  f"of {member.availability_status.total_days} days")
            if not member.is_eligible:
                print(f"   Ineligible: {member.ineligibility_reason}")
            for warning in member.warnings:
                print(f"   Warning: {warning}")
            print("-" * 80)

        print("\nTeam Coverage:")
        print(f"- expertise: {report.expertise_coverage:.0%}")
        print(f"- languages: {report.language_coverage:.0%}")
        print(f"- lead qualified: {'yes' if report.has_lead_qualified else 'no'}")
        print(f"- balance: {report.team_balance.value}")
        print(f"- viable: {'yes' if result.is_viable else 'no'}")

        if result.warnings:
            print("\nTeam Warnings:")
            for warning in result.warnings:
                print(f"- {warning}")

    def display_shortlist(self) -> None:
        """
        Display the top ranked reviewers
        """
        print("\n" + "=" * 80)
        print("TOP RANKED REVIEWERS".center(80))
        print("=" * 80 + "\n")

        for i, result in enumerate(self.shortlist(), 1):
            status = "eligible" if result.is_eligible else result.ineligibility_reason
            print(f"{i}. {result.full_name} - {result.percentage:.1f}% ({status})")

        print("-" * 80)
