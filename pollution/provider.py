"""
pollution/provider.py

Standards lookup with a time-bounded cache and optional database overrides.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pollution.cache import Clock, TTLCache
from pollution.errors import StandardsConfigurationError
from pollution.repository import StandardsRepository
from pollution.standards import DEFAULT_CATEGORY, StandardsTable, get_builtin_table

logger = logging.getLogger(__name__)

DEFAULT_STANDARDS_TTL_SECONDS = 300.0


class StandardsProvider:
    """
    Resolve a StandardsTable per category.

    Tables are rebuilt at most once per TTL window. When a session factory is
    configured, active ``heavy_metal_standards`` rows are layered over the
    built-in table for the category.
    """

    def __init__(
        self,
        *,
        session_factory: Optional[Callable[[], Session]] = None,
        repository: Optional[StandardsRepository] = None,
        ttl_seconds: float = DEFAULT_STANDARDS_TTL_SECONDS,
        clock: Optional[Clock] = None,
    ) -> None:
        self._session_factory = session_factory
        self._repository = repository or StandardsRepository()
        if clock is None:
            self._cache: TTLCache[StandardsTable] = TTLCache(ttl_seconds)
        else:
            self._cache = TTLCache(ttl_seconds, clock=clock)

    def get_table(self, category: str = DEFAULT_CATEGORY) -> StandardsTable:
        key = (category or DEFAULT_CATEGORY).strip().upper()
        return self._cache.get_or_load(key, lambda: self._load_table(key))

    def invalidate(self, category: Optional[str] = None) -> None:
        if category is None:
            self._cache.clear()
        else:
            self._cache.invalidate(category.strip().upper())

    def _load_table(self, category: str) -> StandardsTable:
        table = get_builtin_table(category)
        if self._session_factory is None:
            return table

        session = self._session_factory()
        try:
            overrides = self._repository.load_overrides(session, category)
        except SQLAlchemyError:
            logger.exception("Failed to load %s standard overrides; using built-in values", category)
            return table
        finally:
            session.close()

        if not overrides:
            return table
        try:
            merged = table.with_overrides(overrides)
        except StandardsConfigurationError:
            logger.exception("Stored %s standard overrides are inconsistent; using built-in values", category)
            return table
        logger.info("Applied %s stored overrides to %s standards", len(overrides), category)
        return merged
