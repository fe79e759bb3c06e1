"""Utility script to create the database schema and seed the demo data."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata
from recovery_api.repositories.sql_repository import SQLStorage

logger = logging.getLogger(__name__)


def create_all(*, seed: bool = True) -> None:
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    if seed and SQLStorage().ensure_seeded():
        logger.info("Seeded demo data into %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    from recovery_api.core.config import get_settings
    from recovery_api.core.logging import configure_logging

    configure_logging(get_settings().log_level)
    try:
        create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
