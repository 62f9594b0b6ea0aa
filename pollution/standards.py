"""
pollution/standards.py

Drinking-water standards for heavy metals.

Concentrations are expressed in mg/L. Auxiliary values feed the indices that
need more than a permissible limit:

- ``background``: geochemical background concentration (Igeo).
- ``toxic_response_factor``: Hakanson toxic response factor (ERI).
- ``reference_dose``: oral reference dose in mg/kg/day (HRI).
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType

from pollution.errors import StandardsConfigurationError
from pollution.types import CANONICAL_UNIT, canonical_symbol

BIS_CATEGORY = "BIS"
WHO_CATEGORY = "WHO"


@dataclass(frozen=True)
class StandardEntry:
    """
    Reference values for one metal in one standards table.
    """

    symbol: str
    permissible_limit: float
    ideal_value: float = 0.0
    weightage: float = 1.0
    unit: str = CANONICAL_UNIT
    background: float | None = None
    toxic_response_factor: float | None = None
    reference_dose: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol", canonical_symbol(self.symbol))
        if not _is_positive(self.permissible_limit):
            raise StandardsConfigurationError(
                f"{self.symbol}: permissible limit must be a positive number."
            )
        if self.ideal_value < 0 or self.ideal_value >= self.permissible_limit:
            raise StandardsConfigurationError(
                f"{self.symbol}: ideal value must be in [0, permissible limit)."
            )
        if not _is_positive(self.weightage):
            raise StandardsConfigurationError(f"{self.symbol}: weightage must be positive.")
        for field_name in ("background", "toxic_response_factor", "reference_dose"):
            value = getattr(self, field_name)
            if value is not None and not _is_positive(value):
                raise StandardsConfigurationError(
                    f"{self.symbol}: {field_name} must be positive when set."
                )

    def with_overrides(
        self,
        *,
        permissible_limit: float | None = None,
        ideal_value: float | None = None,
        weightage: float | None = None,
    ) -> "StandardEntry":
        return replace(
            self,
            permissible_limit=self.permissible_limit if permissible_limit is None else permissible_limit,
            ideal_value=self.ideal_value if ideal_value is None else ideal_value,
            weightage=self.weightage if weightage is None else weightage,
        )


def _is_positive(value: float | None) -> bool:
    if value is None:
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number > 0


class StandardsTable(Mapping[str, StandardEntry]):
    """
    Immutable symbol -> StandardEntry mapping for one standards category.
    """

    __slots__ = ("_category", "_entries")

    def __init__(self, category: str, entries: Iterable[StandardEntry]) -> None:
        collected: dict[str, StandardEntry] = {}
        for entry in entries:
            if entry.symbol in collected:
                raise StandardsConfigurationError(
                    f"Duplicate standard for {entry.symbol} in {category}."
                )
            collected[entry.symbol] = entry
        self._category = category.strip().upper()
        self._entries = MappingProxyType(collected)

    @property
    def category(self) -> str:
        return self._category

    def __getitem__(self, symbol: str) -> StandardEntry:
        return self._entries[canonical_symbol(symbol)]

    def __contains__(self, symbol: object) -> bool:
        if not isinstance(symbol, str):
            return False
        try:
            return canonical_symbol(symbol) in self._entries
        except ValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"StandardsTable({self._category!r}, {len(self._entries)} entries)"

    def with_overrides(self, overrides: Mapping[str, Mapping[str, float | None]]) -> "StandardsTable":
        """
        Return a new table with selected entries overridden.

        Overrides for symbols missing from this table are ignored since the
        auxiliary values cannot be inferred.
        """

        entries: list[StandardEntry] = []
        normalized = {canonical_symbol(symbol): values for symbol, values in overrides.items()}
        for symbol, entry in self._entries.items():
            values = normalized.get(symbol)
            if values:
                entry = entry.with_overrides(
                    permissible_limit=values.get("permissible_limit"),
                    ideal_value=values.get("ideal_value"),
                    weightage=values.get("weightage"),
                )
            entries.append(entry)
        return StandardsTable(self._category, entries)


# Taylor (1964) crustal abundance, mg/kg.
BACKGROUND_VALUES: Mapping[str, float] = MappingProxyType(
    {
        "AS": 1.5,
        "CD": 0.2,
        "CR": 100.0,
        "CU": 55.0,
        "FE": 56300.0,
        "HG": 0.08,
        "MN": 950.0,
        "NI": 75.0,
        "PB": 12.5,
        "ZN": 70.0,
        "U": 2.7,
    }
)

# Hakanson (1980).
TOXIC_RESPONSE_FACTORS: Mapping[str, float] = MappingProxyType(
    {
        "AS": 10.0,
        "CD": 30.0,
        "CR": 2.0,
        "CU": 5.0,
        "HG": 40.0,
        "MN": 1.0,
        "NI": 5.0,
        "PB": 5.0,
        "ZN": 1.0,
    }
)

# US EPA IRIS oral reference doses, mg/kg/day.
REFERENCE_DOSES: Mapping[str, float] = MappingProxyType(
    {
        "AS": 0.0003,
        "CD": 0.0005,
        "CR": 0.003,
        "CU": 0.04,
        "FE": 0.7,
        "HG": 0.0003,
        "MN": 0.14,
        "NI": 0.02,
        "PB": 0.0035,
        "ZN": 0.3,
        "U": 0.003,
    }
)

# symbol: (permissible limit, ideal value, weightage)
_BIS_LIMITS: Mapping[str, tuple[float, float, float]] = {
    "FE": (1.0, 0.3, 1.0),
    "AS": (0.05, 0.01, 5.0),
    "U": (0.03, 0.0, 4.0),
    "PB": (0.01, 0.0, 5.0),
    "HG": (0.001, 0.0, 5.0),
    "CD": (0.003, 0.0, 5.0),
    "CR": (0.05, 0.0, 4.0),
    "NI": (0.02, 0.0, 3.0),
    "ZN": (15.0, 5.0, 1.0),
    "CU": (1.5, 0.05, 2.0),
    "MN": (0.3, 0.1, 2.0),
}

_WHO_LIMITS: Mapping[str, tuple[float, float, float]] = {
    "FE": (0.3, 0.0, 1.0),
    "AS": (0.01, 0.0, 5.0),
    "U": (0.015, 0.0, 4.0),
    "PB": (0.01, 0.0, 5.0),
    "HG": (0.006, 0.0, 5.0),
    "CD": (0.003, 0.0, 5.0),
    "CR": (0.05, 0.0, 4.0),
    "NI": (0.07, 0.0, 3.0),
    "ZN": (3.0, 0.0, 1.0),
    "CU": (2.0, 0.0, 2.0),
    "MN": (0.4, 0.0, 2.0),
}


def _build_table(category: str, limits: Mapping[str, tuple[float, float, float]]) -> StandardsTable:
    return StandardsTable(
        category,
        (
            StandardEntry(
                symbol=symbol,
                permissible_limit=permissible,
                ideal_value=ideal,
                weightage=weightage,
                background=BACKGROUND_VALUES.get(symbol),
                toxic_response_factor=TOXIC_RESPONSE_FACTORS.get(symbol),
                reference_dose=REFERENCE_DOSES.get(symbol),
            )
            for symbol, (permissible, ideal, weightage) in limits.items()
        ),
    )


BIS_STANDARDS = _build_table(BIS_CATEGORY, _BIS_LIMITS)
WHO_STANDARDS = _build_table(WHO_CATEGORY, _WHO_LIMITS)

BUILTIN_TABLES: Mapping[str, StandardsTable] = MappingProxyType(
    {
        BIS_CATEGORY: BIS_STANDARDS,
        WHO_CATEGORY: WHO_STANDARDS,
    }
)
DEFAULT_CATEGORY = BIS_CATEGORY


def get_builtin_table(category: str = DEFAULT_CATEGORY) -> StandardsTable:
    key = (category or DEFAULT_CATEGORY).strip().upper()
    table = BUILTIN_TABLES.get(key)
    if table is None:
        raise StandardsConfigurationError(
            f"Unknown standards category '{category}'. Expected one of {sorted(BUILTIN_TABLES)}."
        )
    return table
