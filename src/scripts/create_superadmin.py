"""Create a superadmin account, or reset/overwrite an existing one.

Usage:
  python -m scripts.create_superadmin --email root@example.com --password "Abcd1234!"
  python -m scripts.create_superadmin --email root@example.com --password "New1234!" --reset-password
  python -m scripts.create_superadmin --email root@example.com --password "Abcd1234!" --force
"""

import argparse
import logging
import sys

from core.database import SessionLocal
from core.exceptions import DuplicateError, NotFoundError
from utils.user_manager import UserManager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_NAME = "슈퍼관리자"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or update a superadmin account.")
    parser.add_argument("--email", required=True, help="Superadmin e-mail")
    parser.add_argument("--password", required=True, help="Superadmin password")
    parser.add_argument("--name", default=DEFAULT_NAME, help="Display name")
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--force",
        action="store_true",
        help="Overwrite password, name and role of an existing account",
    )
    group.add_argument(
        "--reset-password",
        action="store_true",
        help="Only reset the password of an existing account",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    db = SessionLocal()
    try:
        user, action = UserManager(db).provision_account(
            args.email,
            args.password,
            role="superadmin",
            name=args.name,
            force=args.force,
            reset_password=args.reset_password,
        )
    except NotFoundError:
        logger.error("No account with e-mail %s; --reset-password needs an existing account", args.email)
        return 1
    except DuplicateError:
        logger.error("An account with e-mail %s already exists. Use --reset-password or --force.", args.email)
        return 1
    finally:
        db.close()

    logger.info("Superadmin %s: %s", user.email, action)
    return 0


if __name__ == "__main__":
    sys.exit(main())
