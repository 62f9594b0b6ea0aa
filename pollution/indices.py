"""
pollution/indices.py

The seven pollution index calculators.

Every calculator consumes concentrations already normalized to mg/L. Values
are rounded before categorization so the reported value and category always
agree.
"""

from __future__ import annotations

import math

import numpy as np

from pollution.base import (
    BaseIndex,
    IndexResult,
    MetalIndexValue,
    categorize,
    categorize_around,
)
from pollution.errors import IndexCalculationError
from pollution.standards import StandardEntry

Matched = list[tuple[str, float, StandardEntry]]

INDEX_DECIMALS = 2
HRI_DECIMALS = 3
DAILY_INTAKE_DECIMALS = 6


def _round(value: float, digits: int = INDEX_DECIMALS) -> float:
    return float(round(float(value), digits))


# ---------------------------------------------------------------------------
# Category bands
# ---------------------------------------------------------------------------

_NEMEROW_BANDS = (
    (1.0, "No pollution"),
    (2.0, "Slight pollution"),
    (3.0, "Moderate pollution"),
)
_NEMEROW_ABOVE = "Severe pollution"

_CF_BANDS = (
    (1.0, "Low contamination"),
    (3.0, "Moderate contamination"),
    (6.0, "Considerable contamination"),
)
_CF_ABOVE = "Very high contamination"

_IGEO_BANDS = (
    (0.0, "Unpolluted"),
    (1.0, "Unpolluted to moderately polluted"),
    (2.0, "Moderately polluted"),
    (3.0, "Moderately to strongly polluted"),
    (4.0, "Strongly polluted"),
)
_IGEO_ABOVE = "Very strongly polluted"

_ERI_BANDS = (
    (40.0, "Low ecological risk"),
    (80.0, "Moderate ecological risk"),
)
_ERI_ABOVE = "High ecological risk"

_HRI_BANDS = ((1.0, "No health risk"),)
_HRI_ABOVE = "Potential health risk"

HPI_UNSAFE = "Unsafe"
NEMEROW_SEVERE = _NEMEROW_ABOVE
PLI_POLLUTED = "Polluted"
ERI_HIGH = _ERI_ABOVE


# ---------------------------------------------------------------------------
# Calculators
# ---------------------------------------------------------------------------

class HeavyMetalPollutionIndex(BaseIndex):
    """Weighted sub-index HPI: Qi = (Mi - Ii) / (Si - Ii) * 100, HPI = sum(Wi*Qi) / sum(Wi)."""

    name = "hpi"

    def calculate(self, matched: Matched) -> IndexResult:
        weighted_sum = 0.0
        weight_total = 0.0
        metals: dict[str, MetalIndexValue] = {}
        for symbol, value, entry in matched:
            sub_index = (value - entry.ideal_value) / (entry.permissible_limit - entry.ideal_value) * 100.0
            weighted_sum += entry.weightage * sub_index
            weight_total += entry.weightage
            metals[symbol] = MetalIndexValue(
                value=_round(sub_index),
                extras={"weightage": entry.weightage},
            )

        hpi = _round(weighted_sum / weight_total)
        return IndexResult(
            index=self.name,
            value=hpi,
            category=categorize_around(hpi, 100.0, "Safe", "Threshold", HPI_UNSAFE),
            metal_count=len(matched),
            metals=metals,
        )


class NemerowIndex(BaseIndex):
    """Nemerow index PN = sqrt(maxRatio^2 + meanRatio^2) with meanRatio = mean(M) / mean(S)."""

    name = "nemerowIndex"

    def calculate(self, matched: Matched) -> IndexResult:
        values = np.array([value for _, value, _ in matched], dtype=float)
        limits = np.array([entry.permissible_limit for _, _, entry in matched], dtype=float)
        ratios = values / limits

        max_ratio = float(np.max(ratios))
        mean_ratio = float(np.mean(values) / np.mean(limits))
        nemerow = _round(math.sqrt(max_ratio**2 + mean_ratio**2))
        return IndexResult(
            index=self.name,
            value=nemerow,
            category=categorize(nemerow, _NEMEROW_BANDS, _NEMEROW_ABOVE),
            metal_count=len(matched),
            metals={
                symbol: MetalIndexValue(value=_round(ratio))
                for (symbol, _, _), ratio in zip(matched, ratios)
            },
            details={
                "maxRatio": _round(max_ratio),
                "meanRatio": _round(mean_ratio),
            },
        )


def _contamination_factors(matched: Matched) -> dict[str, float]:
    return {symbol: value / entry.permissible_limit for symbol, value, entry in matched}


class ContaminationFactorIndex(BaseIndex):
    """Per-metal CF = Mi / Si. The headline value is the worst metal."""

    name = "contaminationFactor"

    def calculate(self, matched: Matched) -> IndexResult:
        factors = _contamination_factors(matched)
        metals = {}
        for symbol, factor in factors.items():
            rounded = _round(factor)
            metals[symbol] = MetalIndexValue(
                value=rounded,
                category=categorize(rounded, _CF_BANDS, _CF_ABOVE),
            )

        worst_symbol = max(factors, key=factors.__getitem__)
        worst = metals[worst_symbol]
        degree = float(sum(factors.values()))
        return IndexResult(
            index=self.name,
            value=worst.value,
            category=worst.category or _CF_ABOVE,
            metal_count=len(matched),
            metals=metals,
            details={
                "worstMetal": worst_symbol,
                "degreeOfContamination": _round(degree),
                "meanContaminationFactor": _round(degree / len(factors)),
            },
        )


class PollutionLoadIndex(BaseIndex):
    """PLI: geometric mean of the contamination factors."""

    name = "pollutionLoadIndex"

    def calculate(self, matched: Matched) -> IndexResult:
        factors = np.array(list(_contamination_factors(matched).values()), dtype=float)
        pli = _round(float(np.prod(factors) ** (1.0 / len(factors))))
        return IndexResult(
            index=self.name,
            value=pli,
            category=categorize_around(pli, 1.0, "No pollution", "Baseline", PLI_POLLUTED),
            metal_count=len(matched),
        )


class GeoaccumulationIndex(BaseIndex):
    """Igeo = log2(Mi / (1.5 * Bi)). The headline value is the worst metal."""

    name = "geoaccumulationIndex"
    requires = "background"

    BACKGROUND_MATRIX_FACTOR = 1.5

    def calculate(self, matched: Matched) -> IndexResult:
        usable = [(symbol, value, entry) for symbol, value, entry in matched if value > 0]
        if not usable:
            raise IndexCalculationError(self.name, "all matched concentrations are zero")

        metals: dict[str, MetalIndexValue] = {}
        raw: dict[str, float] = {}
        for symbol, value, entry in usable:
            igeo = float(np.log2(value / (self.BACKGROUND_MATRIX_FACTOR * entry.background)))
            raw[symbol] = igeo
            rounded = _round(igeo)
            metals[symbol] = MetalIndexValue(
                value=rounded,
                category=categorize(rounded, _IGEO_BANDS, _IGEO_ABOVE),
            )

        worst_symbol = max(raw, key=raw.__getitem__)
        worst = metals[worst_symbol]
        return IndexResult(
            index=self.name,
            value=worst.value,
            category=worst.category or _IGEO_ABOVE,
            metal_count=len(usable),
            metals=metals,
            details={"worstMetal": worst_symbol},
        )


class EcologicalRiskIndex(BaseIndex):
    """ERI = sum(CFi * TRFi)."""

    name = "ecologicalRiskIndex"
    requires = "toxic_response_factor"

    def calculate(self, matched: Matched) -> IndexResult:
        metals: dict[str, MetalIndexValue] = {}
        total = 0.0
        for symbol, value, entry in matched:
            risk = value / entry.permissible_limit * entry.toxic_response_factor
            total += risk
            rounded = _round(risk)
            metals[symbol] = MetalIndexValue(
                value=rounded,
                category=categorize(rounded, _ERI_BANDS, _ERI_ABOVE),
                extras={"toxicResponseFactor": entry.toxic_response_factor},
            )

        eri = _round(total)
        return IndexResult(
            index=self.name,
            value=eri,
            category=categorize(eri, _ERI_BANDS, _ERI_ABOVE),
            metal_count=len(matched),
            metals=metals,
        )


class HealthRiskIndex(BaseIndex):
    """HRI = (Mi * waterIntake / bodyWeight) / RfDi per metal.

    The headline value is the worst metal; ``hazardIndex`` is the sum and
    ``exceedingMetals`` counts metals at or above 1.
    """

    name = "healthRiskIndex"
    requires = "reference_dose"

    DEFAULT_BODY_WEIGHT_KG = 70.0
    DEFAULT_WATER_INTAKE_L = 2.0

    def __init__(
        self,
        *,
        body_weight_kg: float = DEFAULT_BODY_WEIGHT_KG,
        water_intake_l: float = DEFAULT_WATER_INTAKE_L,
    ) -> None:
        if body_weight_kg <= 0:
            raise ValueError("body_weight_kg must be positive.")
        if water_intake_l < 0:
            raise ValueError("water_intake_l must be non-negative.")
        self.body_weight_kg = float(body_weight_kg)
        self.water_intake_l = float(water_intake_l)

    def calculate(self, matched: Matched) -> IndexResult:
        metals: dict[str, MetalIndexValue] = {}
        raw: dict[str, float] = {}
        for symbol, value, entry in matched:
            daily_intake = value * self.water_intake_l / self.body_weight_kg
            hri = daily_intake / entry.reference_dose
            raw[symbol] = hri
            rounded = _round(hri, HRI_DECIMALS)
            metals[symbol] = MetalIndexValue(
                value=rounded,
                category=categorize(rounded, _HRI_BANDS, _HRI_ABOVE),
                extras={
                    "dailyIntake": _round(daily_intake, DAILY_INTAKE_DECIMALS),
                    "referenceDose": entry.reference_dose,
                },
            )

        worst_symbol = max(raw, key=raw.__getitem__)
        worst = metals[worst_symbol]
        exceeding = [symbol for symbol, item in metals.items() if item.value >= 1.0]
        return IndexResult(
            index=self.name,
            value=worst.value,
            category=worst.category or _HRI_ABOVE,
            metal_count=len(matched),
            metals=metals,
            details={
                "worstMetal": worst_symbol,
                "hazardIndex": _round(sum(raw.values()), HRI_DECIMALS),
                "exceedingMetals": len(exceeding),
                "bodyWeightKg": self.body_weight_kg,
                "waterIntakeL": self.water_intake_l,
            },
        )
