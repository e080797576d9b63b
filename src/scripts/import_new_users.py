"""Insert users from a CSV export whose e-mail is not stored yet.

Rows get the default import password unless they carry their own.

Usage:
  python -m scripts.import_new_users path/to/users.csv
"""

import argparse
import logging
import sys
from pathlib import Path

from config import DEFAULT_IMPORT_PASSWORD
from core.database import SessionLocal
from core.exceptions import ValidationError
from utils.csv_workflow import CsvWorkflowManager, NoValidRowsError, parse_csv

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

BATCH_SIZE = 1000


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import new users from a CSV file.")
    parser.add_argument("csv_path", type=Path, help="CSV with email,name,school,role columns")
    parser.add_argument(
        "--default-password",
        default=DEFAULT_IMPORT_PASSWORD,
        help="Password for rows without one",
    )
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
        result = CsvWorkflowManager(db).import_users(
            rows, default_password=args.default_password, batch_size=BATCH_SIZE
        )
    except NoValidRowsError as e:
        for error in e.errors:
            logger.error(error)
        logger.error("No rows to import")
        return 1
    finally:
        db.close()

    for error in result.errors:
        logger.warning(error)
    logger.info("Inserted %d users, skipped %d existing", result.created, result.skipped)
    return 0


if __name__ == "__main__":
    sys.exit(main())
