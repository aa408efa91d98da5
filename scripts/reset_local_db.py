"""Utility script to reset the local request database.

Usage:
    STORE_BACKEND=database python scripts/reset_local_db.py

Environment:
    Ensure DATABASE_URL and LINE_TOKEN are available in the current shell
    before running this script.
"""

from __future__ import annotations

import structlog

from outing_approval.config import get_settings
from outing_approval.db import get_engine
from outing_approval.logging_config import configure_logging
from outing_approval.models import Base


def reset_database() -> None:
    settings = get_settings()
    if settings.store_backend != "database":
        raise SystemExit("STORE_BACKEND must be 'database' to reset the local store.")

    engine = get_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    structlog.get_logger().info("local_database_reset", tables=sorted(Base.metadata.tables))


if __name__ == "__main__":
    configure_logging()
    reset_database()
