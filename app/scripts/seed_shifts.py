"""
Insert the standard shift blocks (Morning, Afternoon, Night, Project Driver).
Existing shifts with the same name are left alone.

    python -m app.scripts.seed_shifts
"""
import logging
import sys

from app.database import SessionLocal
from app.services.shift_service import shift_service

logger = logging.getLogger(__name__)


def main() -> int:
    db = SessionLocal()
    try:
        created = shift_service.seed_defaults(db)
    finally:
        db.close()

    for s in created:
        logger.info(f"Created shift {s['name']} {s['startTime']}-{s['endTime']}")
    logger.info(f"{len(created)} shift(s) created")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    sys.exit(main())
