"""
app/mappers/record_extractor.py

Turns one classified spreadsheet row into a SampleRecord.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

from app.domain.errors import RecordExtractionError
from app.domain.sample_record import (
    Coordinates,
    EnvironmentalParam,
    Location,
    RecordValidationWarning,
    SampleInfo,
    SampleRecord,
)
from app.mappers.column_classifier import (
    ROLE_DISTRICT,
    ROLE_LATITUDE,
    ROLE_LONGITUDE,
    ROLE_NAME,
    ROLE_SERIAL,
    ROLE_STATE,
    ROLE_YEAR,
    ColumnClassification,
    parenthesized_token,
)
from pollution.types import MetalReading, MetalReadingSet

MIN_SAMPLE_YEAR = 1900
DEFAULT_COORDINATE = 0.0


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_float(value: Any) -> float | None:
    """
    Strict numeric parse. Booleans and non-finite values are rejected.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _text(value: Any) -> str | None:
    if _is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _current_year() -> int:
    return datetime.now(timezone.utc).year


class RecordExtractor:
    """
    Extracts location, coordinates, sample info, metal readings, and
    environmental parameters from one data row.
    """

    def __init__(self, *, current_year: Callable[[], int] = _current_year) -> None:
        self._current_year = current_year

    def extract(
        self,
        *,
        row_number: int,
        cells: Sequence[Any],
        classification: ColumnClassification,
    ) -> SampleRecord:
        """
        Build a SampleRecord or raise RecordExtractionError when the row has no
        location name or neither coordinate axis.
        """

        def cell(index: int | None) -> Any:
            if index is None or index >= len(cells):
                return None
            return cells[index]

        roles = classification.role_columns

        name = _text(cell(roles.get(ROLE_NAME)))
        if name is None:
            raise RecordExtractionError(row_number, "Missing location name.")

        latitude = parse_float(cell(roles.get(ROLE_LATITUDE)))
        longitude = parse_float(cell(roles.get(ROLE_LONGITUDE)))
        if latitude is None and longitude is None:
            raise RecordExtractionError(row_number, "Missing coordinates: neither latitude nor longitude is present.")

        coordinates = Coordinates(
            longitude=longitude if longitude is not None else DEFAULT_COORDINATE,
            latitude=latitude if latitude is not None else DEFAULT_COORDINATE,
        )
        location = Location(
            name=name,
            state=_text(cell(roles.get(ROLE_STATE))),
            district=_text(cell(roles.get(ROLE_DISTRICT))),
        )
        year, year_warning = self._resolve_year(cell(roles.get(ROLE_YEAR)))
        sample_info = SampleInfo(
            year=year,
            serial_number=_text(cell(roles.get(ROLE_SERIAL))) or f"ROW_{row_number}",
        )

        warnings: list[RecordValidationWarning] = []
        if year_warning is not None:
            warnings.append(year_warning)

        readings: list[MetalReading] = []
        for symbol, column in classification.metal_columns.items():
            value = parse_float(cell(column.index))
            if value is None:
                continue
            if value < 0:
                warnings.append(
                    RecordValidationWarning(
                        code="negative_concentration",
                        message=f"Negative value for {symbol}: {value}",
                        field=symbol,
                        value=value,
                    )
                )
                continue
            readings.append(MetalReading(symbol=symbol, value=value, unit=column.unit))

        environmental: dict[str, EnvironmentalParam] = {}
        for index in classification.environmental_columns:
            raw_value = cell(index)
            if _is_blank(raw_value):
                continue
            header = classification.headers[index]
            numeric = parse_float(raw_value)
            environmental[header] = EnvironmentalParam(
                value=numeric if numeric is not None else str(raw_value).strip(),
                unit=parenthesized_token(header),
            )

        raw_row = {
            header or f"column_{index + 1}": cell(index)
            for index, header in enumerate(classification.headers)
        }

        return SampleRecord(
            row_number=row_number,
            location=location,
            coordinates=coordinates,
            sample_info=sample_info,
            metals=MetalReadingSet(readings),
            environmental_params=environmental,
            raw_row=raw_row,
            warnings=warnings,
        )

    def _resolve_year(self, value: Any) -> tuple[int, RecordValidationWarning | None]:
        current = self._current_year()
        if _is_blank(value):
            return current, None
        number = parse_float(value)
        if number is None or not number.is_integer():
            return current, RecordValidationWarning(
                code="invalid_year",
                message=f"Year '{value}' is not a whole number; defaulted to {current}.",
                field="year",
                value=value,
            )
        year = int(number)
        if year < MIN_SAMPLE_YEAR or year > current + 1:
            return current, RecordValidationWarning(
                code="year_out_of_range",
                message=f"Year {year} is outside {MIN_SAMPLE_YEAR}-{current + 1}; defaulted to {current}.",
                field="year",
                value=year,
            )
        return year, None
