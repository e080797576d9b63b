"""Backfill the category of calendar events stored without one.

Usage:
  python -m scripts.fix_calendar_events
"""

import argparse
import logging
import sys

from core.database import SessionLocal
from utils.calendar_manager import CalendarManager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    argparse.ArgumentParser(description="Fill missing calendar event types.").parse_args(argv)
    db = SessionLocal()
    try:
        count, events = CalendarManager(db).fill_missing_event_types()
        for event in events:
            logger.info("  %s (%s)", event.title, event.id)
    finally:
        db.close()
    logger.info("Updated %d events", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
