#!/usr/bin/env python3
"""
Reviewer Matching & Team Composition Engine
Main entry point for the application
"""

import sys
import logging
import argparse
from pathlib import Path

from reviewer_matching.pipeline.orchestrator import MatchingOrchestrator
from reviewer_matching.config.settings import (
    DEFAULT_CRITERIA_PATH,
    DEFAULT_DATA_PATH,
    DEFAULT_OUTPUT_PATH,
    SHORTLIST_SIZE,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reviewer Matching & Team Composition Engine")

    # Data options
    parser.add_argument("--data", type=str, default=str(DEFAULT_DATA_PATH),
                        help=f"Path to reviewer snapshot file, JSON or CSV (default: {DEFAULT_DATA_PATH})")
    parser.add_argument("--criteria", type=str, default=str(DEFAULT_CRITERIA_PATH),
                        help=f"Path to matching criteria JSON (default: {DEFAULT_CRITERIA_PATH})")
    parser.add_argument("--output", type=str, default=str(DEFAULT_OUTPUT_PATH),
                        help=f"Path to output file (default: {DEFAULT_OUTPUT_PATH})")

    # Team selection options
    parser.add_argument("--team-size", type=int, default=None,
                        help="Override the team size from the criteria file")
    parser.add_argument("--top-n", type=int, default=SHORTLIST_SIZE,
                        help=f"Number of ranked reviewers to report (default: {SHORTLIST_SIZE})")
    parser.add_argument("--workers", type=int, default=None,
                        help="Score reviewers on this many threads")

    # Execution options
    parser.add_argument("--save-only", action="store_true",
                        help="Save results without displaying")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable verbose output")
    return parser


def main(argv=None):
    """Main function"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    # Check if input files exist
    for label, path in (("Data", args.data), ("Criteria", args.criteria)):
        if not Path(path).exists():
            logger.error(f"{label} file not found: {path}")
            return 1

    try:
        print("\n" + "=" * 80)
        print("REVIEWER MATCHING & TEAM COMPOSITION".center(80))
        print("=" * 80 + "\n")

        print(f"Loading reviewers from: {args.data}")
        print(f"Loading criteria from: {args.criteria}")

        orchestrator = MatchingOrchestrator(
            data_path=args.data,
            criteria_path=args.criteria,
            output_path=args.output,
            team_size=args.team_size,
            shortlist_size=args.top_n,
            max_workers=args.workers,
        )

        orchestrator.run()
        orchestrator.save_results(args.output)

        if not args.save_only:
            orchestrator.display_shortlist()
            orchestrator.display_team()

        print(f"\nResults saved to {args.output}")
        return 0

    except Exception as e:
        logger.exception(f"Error running reviewer matching: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
