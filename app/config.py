"""
app/config.py

Settings for sample ingestion and the pollution engine, read from the
environment (and `.env` files) once per process.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TypeVar

from db.config import load_env_files

T = TypeVar("T")

DEFAULT_HEAVY_METALS: tuple[str, ...] = ("Fe", "As", "U", "Pb", "Hg", "Cd", "Cr", "Ni", "Zn", "Cu", "Mn")
_ALLOWED_UNKNOWN_UNIT_POLICIES = {"assume", "reject"}
_TRUE_VALUES = {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _env_value(name: str) -> str | None:
    """
    Stripped value of ``name``; blank counts as unset.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parsed_env(name: str, default: T, parse: Callable[[str], T]) -> T:
    value = _env_value(name)
    if value is None:
        return default
    try:
        return parse(value)
    except ValueError:
        return default


def _get_bool_env(name: str, default: bool) -> bool:
    return _parsed_env(name, default, lambda value: value.lower() in _TRUE_VALUES)


def _get_int_env(name: str, default: int) -> int:
    return _parsed_env(name, default, int)


def _get_float_env(name: str, default: float) -> float:
    return _parsed_env(name, default, float)


def _get_str_env(name: str, default: str) -> str:
    return _parsed_env(name, default, str)


def _get_list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Comma-separated list; blank items are dropped and an empty result
    falls back to ``default``.
    """

    items = tuple(item.strip() for item in (_env_value(name) or "").split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class SampleIngestionSettings:
    """
    Runtime settings for spreadsheet sample ingestion.
    """

    heavy_metals: tuple[str, ...] = field(default=DEFAULT_HEAVY_METALS)
    unknown_unit_policy: str = "assume"
    max_file_size_bytes: int = 10 * 1024 * 1024
    result_sample_size: int = 5
    max_reported_errors: int = 10
    log_row_errors: bool = True


@dataclass(frozen=True)
class PollutionSettings:
    """
    Settings for the pollution index engine.
    """

    standards_category: str = "BIS"
    standards_cache_ttl_seconds: float = 300.0
    body_weight_kg: float = 70.0
    water_intake_l: float = 2.0


@lru_cache(maxsize=1)
def get_sample_ingestion_settings() -> SampleIngestionSettings:
    """
    Return cached sample ingestion settings from environment variables.
    """

    policy = _get_str_env("UNKNOWN_UNIT_POLICY", "assume").lower()
    if policy not in _ALLOWED_UNKNOWN_UNIT_POLICIES:
        raise RuntimeError(
            f"UNKNOWN_UNIT_POLICY '{policy}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_UNKNOWN_UNIT_POLICIES)}."
        )

    return SampleIngestionSettings(
        heavy_metals=_get_list_env("HEAVY_METALS", DEFAULT_HEAVY_METALS),
        unknown_unit_policy=policy,
        max_file_size_bytes=max(1, _get_int_env("MAX_FILE_SIZE", 10 * 1024 * 1024)),
        result_sample_size=max(0, _get_int_env("RESULT_SAMPLE_SIZE", 5)),
        max_reported_errors=max(1, _get_int_env("MAX_REPORTED_ERRORS", 10)),
        log_row_errors=_get_bool_env("LOG_ROW_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_pollution_settings() -> PollutionSettings:
    """
    Return cached pollution engine settings from environment variables.
    """

    return PollutionSettings(
        standards_category=_get_str_env("STANDARDS_CATEGORY", "BIS").upper(),
        standards_cache_ttl_seconds=max(1.0, _get_float_env("STANDARDS_CACHE_TTL_SECONDS", 300.0)),
        body_weight_kg=max(1.0, _get_float_env("HRI_BODY_WEIGHT_KG", 70.0)),
        water_intake_l=max(0.0, _get_float_env("HRI_WATER_INTAKE_L", 2.0)),
    )
