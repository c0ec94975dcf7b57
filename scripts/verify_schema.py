#!/usr/bin/env python3
"""
Verify that a migrated database matches the ORM metadata.

Reads DATABASE_URL (or the first CLI argument), introspects the table set
and reports tables missing from, or unexpected in, the live schema.
"""
import os
import sys

import structlog
from sqlalchemy import create_engine, inspect

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

logger = structlog.get_logger(__name__)


def get_tables(url: str) -> set:
    eng = create_engine(url)
    try:
        with eng.connect() as conn:
            return set(inspect(conn).get_table_names())
    finally:
        eng.dispose()


def main(argv=None) -> int:
    from library_data.config import settings
    from library_data.database import Base

    args = sys.argv[1:] if argv is None else argv
    url = args[0] if args else settings.database_url

    expected = set(Base.metadata.tables.keys())
    allowed = expected | {"alembic_version"}
    tables = get_tables(url)

    if not tables:
        logger.error("database has no tables; run alembic upgrade head first")
        return 3

    missing = expected - tables
    extras = tables - allowed

    ok = True
    if missing:
        ok = False
        logger.error("missing tables", tables=sorted(missing))
    if extras:
        ok = False
        logger.error("unexpected tables", tables=sorted(extras))
    if ok:
        logger.info("schema ok", tables=len(tables))
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
