from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _validate_env() -> None:
    """
    Check database and assessment configuration before anything connects.

    Every problem is collected into one RuntimeError so a misconfigured
    deployment can be fixed in a single restart.
    """

    from app.config import get_pollution_settings, get_sample_ingestion_settings
    from db.config import resolve_database_url
    from pollution.errors import StandardsConfigurationError
    from pollution.standards import get_builtin_table

    errors: list[str] = []

    try:
        resolve_database_url()
    except RuntimeError as exc:
        errors.append(str(exc))

    try:
        get_sample_ingestion_settings()
    except RuntimeError as exc:
        errors.append(str(exc))

    category = get_pollution_settings().standards_category
    try:
        get_builtin_table(category)
    except StandardsConfigurationError as exc:
        errors.append(f"STANDARDS_CATEGORY: {exc}")

    if errors:
        raise RuntimeError(
            "Startup validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_database() -> None:
    """
    Fail fast when the database is unreachable or migrations have not run.
    """

    from sqlalchemy import inspect as sa_inspect
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    import db.models  # noqa: F401  registers sample_records and heavy_metal_standards
    from db.base import Base
    from db.session import get_engine

    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
            existing = set(sa_inspect(connection).get_table_names())
    except SQLAlchemyError as exc:
        raise RuntimeError("Database unavailable.") from exc

    missing = sorted(set(Base.metadata.tables) - existing)
    if missing:
        logger.critical(
            "Tables missing from the database: %s. Run 'alembic upgrade head' and restart.",
            ", ".join(missing),
        )
        raise RuntimeError(f"Schema mismatch: missing tables {', '.join(missing)}.")


def _warm_standards() -> None:
    from app.config import get_pollution_settings
    from app.services.sample_ingestion_service import get_standards_provider

    category = get_pollution_settings().standards_category
    table = get_standards_provider().get_table(category)
    logger.info("Loaded %s standards for %d metals", table.category, len(table))


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    _check_database()
    logger.info("Database connectivity and schema confirmed")
    _warm_standards()
    yield


def create_app() -> FastAPI:
    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Heavy Metal Pollution API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import sample_ingestion_router

    application.include_router(sample_ingestion_router)

    return application


app = create_app()
