"""
tests/test_config.py

Environment-driven settings and JSON log helpers.
"""

from __future__ import annotations

import json
import logging

import pytest

from app.config import (
    DEFAULT_HEAVY_METALS,
    get_pollution_settings,
    get_sample_ingestion_settings,
)
from app.logging_utils import log_event, timed_event


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_sample_ingestion_settings.cache_clear()
    get_pollution_settings.cache_clear()
    yield
    get_sample_ingestion_settings.cache_clear()
    get_pollution_settings.cache_clear()


class TestSampleIngestionSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in ("HEAVY_METALS", "UNKNOWN_UNIT_POLICY", "MAX_FILE_SIZE", "RESULT_SAMPLE_SIZE"):
            monkeypatch.delenv(name, raising=False)

        settings = get_sample_ingestion_settings()

        assert settings.heavy_metals == DEFAULT_HEAVY_METALS
        assert settings.unknown_unit_policy == "assume"
        assert settings.max_file_size_bytes == 10 * 1024 * 1024
        assert settings.result_sample_size == 5

    def test_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("HEAVY_METALS", "Pb, As ,,Se")
        monkeypatch.setenv("UNKNOWN_UNIT_POLICY", "REJECT")
        monkeypatch.setenv("MAX_FILE_SIZE", "2048")
        monkeypatch.setenv("LOG_ROW_ERRORS", "no")

        settings = get_sample_ingestion_settings()

        assert settings.heavy_metals == ("Pb", "As", "Se")
        assert settings.unknown_unit_policy == "reject"
        assert settings.max_file_size_bytes == 2048
        assert settings.log_row_errors is False

    def test_invalid_policy(self, monkeypatch) -> None:
        monkeypatch.setenv("UNKNOWN_UNIT_POLICY", "guess")

        with pytest.raises(RuntimeError):
            get_sample_ingestion_settings()

    def test_malformed_integer_falls_back(self, monkeypatch) -> None:
        monkeypatch.setenv("MAX_REPORTED_ERRORS", "many")

        assert get_sample_ingestion_settings().max_reported_errors == 10


class TestPollutionSettings:
    def test_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("STANDARDS_CATEGORY", "who")
        monkeypatch.setenv("HRI_BODY_WEIGHT_KG", "60")
        monkeypatch.setenv("STANDARDS_CACHE_TTL_SECONDS", "0")

        settings = get_pollution_settings()

        assert settings.standards_category == "WHO"
        assert settings.body_weight_kg == 60.0
        assert settings.standards_cache_ttl_seconds == 1.0


def test_log_event_emits_json(caplog) -> None:
    logger = logging.getLogger("tests.log_event")

    with caplog.at_level(logging.INFO, logger="tests.log_event"):
        log_event(logger, logging.INFO, "sample_ingestion_completed", processed_rows=2)
        log_event(logger, logging.DEBUG, "ignored")

    assert len(caplog.records) == 1
    assert json.loads(caplog.records[0].getMessage()) == {
        "event": "sample_ingestion_completed",
        "processed_rows": 2,
    }


def test_timed_event_merges_block_results(caplog) -> None:
    logger = logging.getLogger("tests.timed_event")

    with caplog.at_level(logging.INFO, logger="tests.timed_event"):
        with timed_event(logger, "sample_ingestion", file_name="survey.csv") as summary:
            summary["processed_rows"] = 3

    payload = json.loads(caplog.records[0].getMessage())
    assert payload["event"] == "sample_ingestion"
    assert payload["file_name"] == "survey.csv"
    assert payload["processed_rows"] == 3
    assert payload["elapsed_ms"] >= 0


def test_timed_event_logs_failure_and_reraises(caplog) -> None:
    logger = logging.getLogger("tests.timed_event")

    with caplog.at_level(logging.INFO, logger="tests.timed_event"):
        with pytest.raises(ValueError):
            with timed_event(logger, "sample_ingestion"):
                raise ValueError("boom")

    record = caplog.records[0]
    assert record.levelno == logging.WARNING
    payload = json.loads(record.getMessage())
    assert payload["event"] == "sample_ingestion_failed"
    assert payload["error"] == "ValueError"
