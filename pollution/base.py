"""
pollution/base.py

Abstract base interface and result types for pollution index calculators.
All index implementations must inherit from BaseIndex.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from pollution.errors import IndexCalculationError
from pollution.standards import StandardEntry, StandardsTable

UNKNOWN_CATEGORY = "Unknown"


@dataclass(frozen=True)
class MetalIndexValue:
    """Per-metal contribution to an index."""

    value: float
    category: Optional[str] = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"value": self.value}
        if self.category is not None:
            payload["category"] = self.category
        payload.update(self.extras)
        return payload


@dataclass(frozen=True)
class IndexResult:
    """Outcome of one index for one sample.

    ``value`` is None and ``category`` is "Unknown" when the index could not
    be computed; ``error`` then carries the reason.
    """

    index: str
    value: Optional[float]
    category: str
    metal_count: int = 0
    metals: Mapping[str, MetalIndexValue] = field(default_factory=dict)
    details: Mapping[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_known(self) -> bool:
        return self.value is not None

    @classmethod
    def unknown(cls, index: str, error: str) -> "IndexResult":
        return cls(index=index, value=None, category=UNKNOWN_CATEGORY, error=error)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "value": self.value,
            "category": self.category,
            "metalCount": self.metal_count,
        }
        if self.metals:
            payload["metals"] = {symbol: item.to_dict() for symbol, item in self.metals.items()}
        payload.update(self.details)
        if self.error is not None:
            payload["error"] = self.error
        return payload


def categorize(value: float, bands: Sequence[tuple[float, str]], above: str) -> str:
    """Return the label of the first band whose exclusive upper bound exceeds ``value``.

    Args:
        value: Rounded index value.
        bands: Ascending ``(upper_bound, label)`` pairs.
        above: Label used when ``value`` reaches or passes every bound.
    """
    for upper_bound, label in bands:
        if value < upper_bound:
            return label
    return above


def categorize_around(value: float, pivot: float, below: str, at: str, over: str) -> str:
    """Three-way category split on an exact pivot value."""
    if value < pivot:
        return below
    if value == pivot:
        return at
    return over


class BaseIndex(ABC):
    """Abstract base class for pollution index calculators.

    Subclasses declare which auxiliary standard value they need (if any) and
    implement ``calculate`` over the metals that qualified.
    """

    name: str = ""
    requires: Optional[str] = None

    def matched_metals(
        self,
        concentrations: Mapping[str, float],
        standards: StandardsTable,
    ) -> list[tuple[str, float, StandardEntry]]:
        """Pair each concentration with its standard, skipping metals the index cannot use."""
        matched: list[tuple[str, float, StandardEntry]] = []
        for symbol, value in concentrations.items():
            if symbol not in standards:
                continue
            entry = standards[symbol]
            if self.requires is not None and getattr(entry, self.requires) is None:
                continue
            matched.append((entry.symbol, float(value), entry))
        return matched

    def compute(
        self,
        concentrations: Mapping[str, float],
        standards: StandardsTable,
    ) -> IndexResult:
        """Compute this index for one sample.

        Args:
            concentrations: Canonical symbol -> concentration in mg/L.
            standards: Table supplying limits and auxiliary values.

        Returns:
            The populated IndexResult.

        Raises:
            IndexCalculationError: If no metal qualifies for this index.
        """
        matched = self.matched_metals(concentrations, standards)
        if not matched:
            raise IndexCalculationError(self.name, "no metals matched the standards table")
        return self.calculate(matched)

    @abstractmethod
    def calculate(self, matched: list[tuple[str, float, StandardEntry]]) -> IndexResult:
        raise NotImplementedError("Subclasses must implement calculate()")
