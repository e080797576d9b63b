"""Create or update teacher profiles from a school roster CSV.

Usage:
  python -m scripts.import_teacher_profiles path/to/roster.csv
"""

import argparse
import logging
import sys
from pathlib import Path

from core.database import SessionLocal
from core.exceptions import ValidationError
from utils.csv_workflow import CsvWorkflowManager, parse_csv

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import teacher profiles from a roster CSV.")
    parser.add_argument("csv_path", type=Path, help="Roster CSV exported from the school system")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        rows = parse_csv(args.csv_path.read_bytes())
    except (OSError, ValidationError) as e:
        logger.error("Cannot read %s: %s", args.csv_path, e)
        return 1

    db = SessionLocal()
    try:
        stats = CsvWorkflowManager(db).import_teacher_profiles(rows)
    finally:
        db.close()

    logger.info(
        "Processed %d rows (%d teachers): %d created, %d updated, "
        "%d without e-mail, %d unknown users",
        stats.processed,
        stats.matched_rows,
        stats.created,
        stats.updated,
        stats.missing_email,
        stats.missing_user,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
