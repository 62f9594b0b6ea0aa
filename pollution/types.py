"""
pollution/types.py

Typed containers for heavy-metal readings.

Readings are keyed by canonical (upper-case) element symbol. The container is
validated when it is built so the index engine never has to guess at key
spelling or value shape.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

CANONICAL_UNIT = "mg/L"


def canonical_symbol(symbol: str) -> str:
    """
    Return the lookup form of an element symbol (``"Fe"`` -> ``"FE"``).
    """

    cleaned = str(symbol).strip().upper()
    if not cleaned or not cleaned.isalpha():
        raise ValueError(f"Invalid element symbol: {symbol!r}")
    return cleaned


@dataclass(frozen=True)
class MetalReading:
    """
    One measured metal concentration.
    """

    symbol: str
    value: float
    unit: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol", canonical_symbol(self.symbol))
        value = float(self.value)
        if math.isnan(value) or math.isinf(value):
            raise ValueError(f"Reading for {self.symbol} must be a finite number.")
        if value < 0:
            raise ValueError(f"Reading for {self.symbol} must be non-negative.")
        object.__setattr__(self, "value", value)

    def to_dict(self) -> dict[str, float | str]:
        return {"value": self.value, "unit": self.unit}


class MetalReadingSet(Mapping[str, MetalReading]):
    """
    Read-only mapping of canonical symbol -> MetalReading.
    """

    __slots__ = ("_readings",)

    def __init__(self, readings: Iterable[MetalReading] = ()) -> None:
        collected: dict[str, MetalReading] = {}
        for reading in readings:
            if not isinstance(reading, MetalReading):
                raise TypeError(f"Expected MetalReading, got {type(reading).__name__}.")
            if reading.symbol in collected:
                raise ValueError(f"Duplicate reading for metal {reading.symbol}.")
            collected[reading.symbol] = reading
        self._readings = collected

    def __getitem__(self, symbol: str) -> MetalReading:
        return self._readings[canonical_symbol(symbol)]

    def __contains__(self, symbol: object) -> bool:
        if not isinstance(symbol, str):
            return False
        try:
            return canonical_symbol(symbol) in self._readings
        except ValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._readings)

    def __len__(self) -> int:
        return len(self._readings)

    def __repr__(self) -> str:
        return f"MetalReadingSet({list(self._readings.values())!r})"

    def to_dict(self) -> dict[str, dict[str, float | str]]:
        return {symbol: reading.to_dict() for symbol, reading in self._readings.items()}
