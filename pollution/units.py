"""
pollution/units.py

Concentration unit normalization to mg/L.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from pollution.errors import UnknownUnitError
from pollution.types import CANONICAL_UNIT, MetalReading, MetalReadingSet

logger = logging.getLogger(__name__)

MICROGRAM_PER_LITRE = "µg/L"

CONVERSION_FACTORS: Mapping[str, float] = {
    "mg/L": 1.0,
    "ppm": 1.0,
    "ppb": 0.001,
    MICROGRAM_PER_LITRE: 0.001,
    "g/L": 1000.0,
    "ng/L": 1e-6,
}

_UNIT_SYNONYMS: Mapping[str, str] = {
    "mg/l": "mg/L",
    "ppm": "ppm",
    "ppb": "ppb",
    "ug/l": MICROGRAM_PER_LITRE,
    "µg/l": MICROGRAM_PER_LITRE,  # micro sign
    "μg/l": MICROGRAM_PER_LITRE,  # greek mu
    "g/l": "g/L",
    "ng/l": "ng/L",
}


class UnknownUnitPolicy:
    ASSUME = "assume"
    REJECT = "reject"


def canonical_unit(unit: str | None) -> str | None:
    """
    Map a unit token onto its canonical spelling.

    Unknown tokens are returned trimmed but otherwise untouched.
    """

    if unit is None:
        return None
    stripped = str(unit).strip()
    if not stripped:
        return None
    compact = "".join(stripped.split()).lower()
    return _UNIT_SYNONYMS.get(compact, stripped)


def is_known_unit(unit: str | None) -> bool:
    return canonical_unit(unit) in CONVERSION_FACTORS


@dataclass(frozen=True)
class NormalizedValue:
    value: float
    source_unit: str
    factor: float
    assumed: bool = False


class UnitNormalizer:
    """
    Converts (value, unit) pairs into mg/L-equivalent concentrations.

    Conversion is a pure function of the pair. Units without a factor are
    either passed through unchanged (``assume``) or rejected (``reject``).
    """

    def __init__(self, *, unknown_unit_policy: str = UnknownUnitPolicy.ASSUME) -> None:
        policy = unknown_unit_policy.strip().lower()
        if policy not in {UnknownUnitPolicy.ASSUME, UnknownUnitPolicy.REJECT}:
            raise ValueError(f"Unsupported unknown unit policy: {unknown_unit_policy!r}")
        self._policy = policy

    @property
    def policy(self) -> str:
        return self._policy

    def convert(self, value: float, unit: str | None) -> NormalizedValue:
        unit_key = canonical_unit(unit) or CANONICAL_UNIT
        factor = CONVERSION_FACTORS.get(unit_key)
        if factor is None:
            if self._policy == UnknownUnitPolicy.REJECT:
                raise UnknownUnitError(unit_key)
            logger.warning("No conversion factor for unit %r, assuming %s", unit_key, CANONICAL_UNIT)
            return NormalizedValue(value=float(value), source_unit=unit_key, factor=1.0, assumed=True)
        return NormalizedValue(value=float(value) * factor, source_unit=unit_key, factor=factor)

    def normalize(self, value: float, unit: str | None) -> float:
        return self.convert(value, unit).value

    def normalize_readings(
        self,
        readings: MetalReadingSet,
    ) -> tuple[MetalReadingSet, list[str]]:
        """
        Convert every reading to mg/L.

        Returns the converted set plus human-readable notes for readings that
        were assumed or dropped because of their unit.
        """

        converted: list[MetalReading] = []
        notes: list[str] = []
        for symbol, reading in readings.items():
            try:
                result = self.convert(reading.value, reading.unit)
            except UnknownUnitError as exc:
                notes.append(f"{symbol} reading excluded: {exc}")
                continue
            if result.assumed:
                notes.append(
                    f"Unknown unit '{result.source_unit}' for {symbol}; value used without conversion"
                )
            converted.append(MetalReading(symbol=symbol, value=result.value, unit=CANONICAL_UNIT))
        return MetalReadingSet(converted), notes
