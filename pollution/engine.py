"""
pollution/engine.py

Runs the full set of pollution indices for one sample and synthesizes the
overall assessment. A failing index degrades to "Unknown" on its own; the
other indices are unaffected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from pollution.base import BaseIndex, IndexResult
from pollution.errors import IndexCalculationError
from pollution.indices import (
    ContaminationFactorIndex,
    EcologicalRiskIndex,
    GeoaccumulationIndex,
    HealthRiskIndex,
    HeavyMetalPollutionIndex,
    NemerowIndex,
    PollutionLoadIndex,
)
from pollution.provider import StandardsProvider
from pollution.standards import DEFAULT_CATEGORY, StandardsTable
from pollution.synthesis import AssessmentSynthesizer, OverallAssessment
from pollution.types import MetalReadingSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollutionAssessment:
    indices: Mapping[str, IndexResult]
    overall: OverallAssessment
    standards_category: str

    def __getitem__(self, index_name: str) -> IndexResult:
        return self.indices[index_name]

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {name: result.to_dict() for name, result in self.indices.items()}
        payload["overallAssessment"] = self.overall.to_dict()
        payload["standardsCategory"] = self.standards_category
        return payload


def default_indices(
    *,
    body_weight_kg: float = HealthRiskIndex.DEFAULT_BODY_WEIGHT_KG,
    water_intake_l: float = HealthRiskIndex.DEFAULT_WATER_INTAKE_L,
) -> tuple[BaseIndex, ...]:
    return (
        HeavyMetalPollutionIndex(),
        NemerowIndex(),
        ContaminationFactorIndex(),
        PollutionLoadIndex(),
        EcologicalRiskIndex(),
        GeoaccumulationIndex(),
        HealthRiskIndex(body_weight_kg=body_weight_kg, water_intake_l=water_intake_l),
    )


class PollutionIndexEngine:
    """
    Computes every configured index against one standards table.

    Either a fixed ``standards`` table or a ``provider`` may be injected; with
    neither, the built-in BIS table is served through an uncached provider.
    """

    def __init__(
        self,
        *,
        standards: Optional[StandardsTable] = None,
        provider: Optional[StandardsProvider] = None,
        category: str = DEFAULT_CATEGORY,
        indices: Optional[Sequence[BaseIndex]] = None,
        synthesizer: Optional[AssessmentSynthesizer] = None,
    ) -> None:
        self._standards = standards
        self._provider = provider or StandardsProvider()
        self._category = category
        self._indices: tuple[BaseIndex, ...] = tuple(indices) if indices is not None else default_indices()
        self._synthesizer = synthesizer or AssessmentSynthesizer()

    @property
    def index_names(self) -> tuple[str, ...]:
        return tuple(index.name for index in self._indices)

    def standards(self) -> StandardsTable:
        if self._standards is not None:
            return self._standards
        return self._provider.get_table(self._category)

    def assess(self, readings: MetalReadingSet) -> PollutionAssessment:
        """Assess readings that are already normalized to mg/L."""
        table = self.standards()
        concentrations = {symbol: reading.value for symbol, reading in readings.items()}

        results: dict[str, IndexResult] = {}
        for index in self._indices:
            try:
                results[index.name] = index.compute(concentrations, table)
            except IndexCalculationError as exc:
                logger.debug("Index %s unavailable: %s", index.name, exc.message)
                results[index.name] = IndexResult.unknown(index.name, exc.message)

        return PollutionAssessment(
            indices=results,
            overall=self._synthesizer.synthesize(results),
            standards_category=table.category,
        )
