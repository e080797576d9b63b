"""Create a school admin account without a school record.

Usage:
  python -m scripts.create_admin --email admin@example.com --password "Abcd1234!" --school "SchoolHub"
"""

import argparse
import logging
import sys

from core.database import SessionLocal
from core.exceptions import DuplicateError
from utils.user_manager import UserManager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or update an admin account.")
    parser.add_argument("--email", required=True, help="Admin e-mail")
    parser.add_argument("--password", required=True, help="Admin password")
    parser.add_argument("--name", default="관리자", help="Display name")
    parser.add_argument("--school", default="SchoolHub", help="School the admin belongs to")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite password, name, school and role of an existing account",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    db = SessionLocal()
    try:
        user, action = UserManager(db).provision_account(
            args.email,
            args.password,
            role="admin",
            name=args.name,
            school=args.school,
            force=args.force,
        )
    except DuplicateError:
        logger.error("An account with e-mail %s already exists. Use --force to overwrite it.", args.email)
        return 1
    finally:
        db.close()

    logger.info("Admin %s (%s): %s", user.email, user.school, action)
    return 0


if __name__ == "__main__":
    sys.exit(main())
