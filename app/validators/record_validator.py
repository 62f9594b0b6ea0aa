"""
app/validators/record_validator.py

Soft quality checks for extracted sample records.

Nothing here rejects a record. Findings are attached to the record as
warnings and summarized into quality flags.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from app.domain.sample_record import QualityFlags, RecordValidationWarning, SampleRecord
from pollution.units import is_known_unit

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)
MAX_PLAUSIBLE_CONCENTRATION = 10000.0
MIN_SAMPLE_YEAR = 1900

CLEAN_CONFIDENCE = 1.0
ANOMALY_CONFIDENCE = 0.5


def _current_year() -> int:
    return datetime.now(timezone.utc).year


class RecordValidator:
    """
    Checks coordinate bounds, concentration plausibility, sample year, and units.
    """

    def __init__(self, *, current_year: Callable[[], int] = _current_year) -> None:
        self._current_year = current_year

    def validate(self, record: SampleRecord) -> QualityFlags:
        """
        Append warnings to ``record.warnings`` and return its quality flags.
        """

        record.warnings.extend(self.collect_warnings(record))
        anomalies = tuple(warning.message for warning in record.warnings)
        has_anomalies = bool(anomalies)
        return QualityFlags(
            is_validated=True,
            has_anomalies=has_anomalies,
            anomalies=anomalies,
            confidence=ANOMALY_CONFIDENCE if has_anomalies else CLEAN_CONFIDENCE,
        )

    def collect_warnings(self, record: SampleRecord) -> list[RecordValidationWarning]:
        warnings: list[RecordValidationWarning] = []

        latitude = record.coordinates.latitude
        if not LATITUDE_RANGE[0] <= latitude <= LATITUDE_RANGE[1]:
            warnings.append(
                RecordValidationWarning(
                    code="latitude_out_of_range",
                    message=f"Invalid latitude: {latitude}",
                    field="latitude",
                    value=latitude,
                )
            )

        longitude = record.coordinates.longitude
        if not LONGITUDE_RANGE[0] <= longitude <= LONGITUDE_RANGE[1]:
            warnings.append(
                RecordValidationWarning(
                    code="longitude_out_of_range",
                    message=f"Invalid longitude: {longitude}",
                    field="longitude",
                    value=longitude,
                )
            )

        # Negative cells never become readings; the extractor reports them.
        for symbol, reading in record.metals.items():
            if reading.value > MAX_PLAUSIBLE_CONCENTRATION:
                warnings.append(
                    RecordValidationWarning(
                        code="implausible_concentration",
                        message=f"Unusually high value for {symbol}: {reading.value}",
                        field=symbol,
                        value=reading.value,
                    )
                )
            if not is_known_unit(reading.unit):
                warnings.append(
                    RecordValidationWarning(
                        code="unknown_unit",
                        message=f"Unknown unit for {symbol}: {reading.unit}",
                        field=symbol,
                        value=reading.unit,
                    )
                )

        year = record.sample_info.year
        current = self._current_year()
        if year < MIN_SAMPLE_YEAR or year > current + 1:
            warnings.append(
                RecordValidationWarning(
                    code="year_out_of_range",
                    message=f"Invalid year: {year}",
                    field="year",
                    value=year,
                )
            )

        return warnings
