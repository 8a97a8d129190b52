"""
Snapshot loading: reviewer profiles and matching criteria from JSON or CSV
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from reviewer_matching.utils.models import MatchingCriteria, ReviewerProfile

logger = logging.getLogger(__name__)

# CSV list cells hold items separated by ";" with fields separated by ":"
ITEM_SEPARATOR = ";"
FIELD_SEPARATOR = ":"
RANGE_SEPARATOR = ".."

_TRUE_VALUES = {"1", "true", "yes", "y", "t"}


class SnapshotLoader:
    """
    Loads read-only reviewer snapshots exported by the profile subsystem
    """

    def __init__(self):
        """Initialize the snapshot loader"""
        logger.info("Initializing SnapshotLoader")

    def load_reviewers(self, file_path: Union[str, Path]) -> List[ReviewerProfile]:
        """
        Load reviewer snapshots, choosing the parser from the file extension

        Args:
            file_path: Path to a .json or .csv file

        Returns:
            List of ReviewerProfile
        """
        file_extension = Path(file_path).suffix.lower()
        if file_extension == ".json":
            return self.process_json_file(file_path)
        if file_extension == ".csv":
            return self.process_csv_file(file_path)
        raise ValueError(f"Unsupported file type: {file_extension}")

    def process_json_file(self, file_path: Union[str, Path]) -> List[ReviewerProfile]:
        """
        Process a JSON file holding a list of reviewer records

        Args:
            file_path: Path to the JSON file

        Returns:
            List of ReviewerProfile
        """
        logger.info(f"Processing JSON file: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                raw_data = json.load(f)

            if isinstance(raw_data, dict):
                raw_data = raw_data.get("reviewers", [])

            reviewers = [ReviewerProfile.model_validate(record) for record in raw_data]
            logger.info(f"Processed {len(reviewers)} reviewers from JSON")
            return reviewers

        except Exception as e:
            logger.error(f"Error processing JSON file: {e}")
            raise

    def process_csv_file(self, file_path: Union[str, Path]) -> List[ReviewerProfile]:
        """
        Process a CSV file with one reviewer per row

        List columns use compact cells, for example
        ``expertise = "ATS:EXPERT:12;MET:BASIC:2"``,
        ``languages = "EN:NATIVE;FR:ADVANCED"``,
        ``availability_slots = "2026-03-01..2026-03-20:AVAILABLE"`` and
        ``conflicts_of_interest = "ORG-7:FAMILY_RELATIONSHIP"``.

        Args:
            file_path: Path to the CSV file

        Returns:
            List of ReviewerProfile
        """
        logger.info(f"Processing CSV file: {file_path}")

        try:
            df = pd.read_csv(file_path, dtype=str, keep_default_na=False)

            reviewers = []
            for _, row in df.iterrows():
                reviewers.append(ReviewerProfile.model_validate(self._process_row(row.to_dict())))

            logger.info(f"Processed {len(reviewers)} reviewers from CSV")
            return reviewers

        except Exception as e:
            logger.error(f"Error processing CSV file: {e}")
            raise

    def load_criteria(self, file_path: Union[str, Path]) -> MatchingCriteria:
        """
        Load matching criteria from a JSON file

        Args:
            file_path: Path to the JSON file

        Returns:
            Validated MatchingCriteria
        """
        logger.info(f"Loading criteria from {file_path}")
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return MatchingCriteria.model_validate(json.load(f))
        except Exception as e:
            logger.error(f"Error loading criteria: {e}")
            raise

    def _process_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """
        Convert a flat CSV row into a reviewer record

        Args:
            row: Column name -> cell text

        Returns:
            Dictionary ready for ReviewerProfile validation
        """
        record: Dict[str, Any] = {
            "id": row.get("id", "").strip(),
            "full_name": row.get("full_name", "").strip(),
            "home_organization_id": row.get("home_organization_id", "").strip(),
            "organization_name": row.get("organization_name", "").strip(),
            "is_lead_qualified": row.get("is_lead_qualified", "").strip().lower() in _TRUE_VALUES,
        }

        if row.get("reviews_completed", "").strip():
            record["reviews_completed"] = int(float(row["reviews_completed"]))
        if row.get("years_experience", "").strip():
            record["years_experience"] = float(row["years_experience"])
        if row.get("selection_status", "").strip():
            record["selection_status"] = row["selection_status"].strip()

        record["expertise"] = [
            self._zip_fields(fields, ["area", "proficiency_level", "years_experience"])
            for fields in self._split_items(row.get("expertise", ""))
        ]
        record["languages"] = [
            self._parse_language(fields) for fields in self._split_items(row.get("languages", ""))
        ]
        record["availability_slots"] = [
            self._parse_slot(fields) for fields in self._split_items(row.get("availability_slots", ""))
        ]
        record["conflicts_of_interest"] = [
            self._zip_fields(fields, ["organization_id", "coi_type"])
            for fields in self._split_items(row.get("conflicts_of_interest", ""))
        ]
        return record

    def _split_items(self, cell: str) -> List[List[str]]:
        items = [item.strip() for item in (cell or "").split(ITEM_SEPARATOR) if item.strip()]
        return [[field.strip() for field in item.split(FIELD_SEPARATOR)] for item in items]

    def _zip_fields(self, fields: List[str], names: List[str]) -> Dict[str, str]:
        return {name: value for name, value in zip(names, fields) if value}

    def _parse_language(self, fields: List[str]) -> Dict[str, Any]:
        record: Dict[str, Any] = self._zip_fields(fields[:2], ["language", "proficiency"])
        # Optional third field overrides the derived conduct flag
        if len(fields) > 2 and fields[2]:
            record["can_conduct"] = fields[2].lower() in _TRUE_VALUES or fields[2].lower() == "conduct"
        return record

    def _parse_slot(self, fields: List[str]) -> Dict[str, Any]:
        if len(fields) < 2 or RANGE_SEPARATOR not in fields[0]:
            raise ValueError(f"Malformed availability slot: {FIELD_SEPARATOR.join(fields)}")
        start, end = fields[0].split(RANGE_SEPARATOR, 1)
        slot = {"start_date": start.strip(), "end_date": end.strip(), "availability_type": fields[1]}
        if len(fields) > 2:
            slot["notes"] = FIELD_SEPARATOR.join(fields[2:])
        return slot
