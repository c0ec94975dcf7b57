from __future__ import annotations

import structlog
import os
import sys
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from library_data.database import SessionLocal, init_db
from library_data.logging_config import configure_logging
from library_data.seed import seed_roles

logger = structlog.get_logger(__name__)


def run() -> int:
    configure_logging()
    init_db()
    sess = SessionLocal()
    try:
        created = seed_roles(sess)
        if created:
            logger.info("seeded", roles=created, count=len(created))
        else:
            logger.info("roles already present, skip seeding")
    finally:
        sess.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
