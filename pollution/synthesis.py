"""
pollution/synthesis.py

Combines the individual index outcomes into one overall risk tier with
recommendations.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pollution.base import IndexResult
from pollution.indices import (
    ERI_HIGH,
    HPI_UNSAFE,
    NEMEROW_SEVERE,
    PLI_POLLUTED,
    ContaminationFactorIndex,
    EcologicalRiskIndex,
    HealthRiskIndex,
    HeavyMetalPollutionIndex,
    NemerowIndex,
    PollutionLoadIndex,
)

SAFE_TIER = "Safe"
MODERATE_TIER = "Moderate"
HIGH_TIER = "High"
UNKNOWN_TIER = "Unknown"

# Inclusive upper bound on flag count -> tier.
_TIER_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (0, SAFE_TIER),
    (2, MODERATE_TIER),
)

RECOMMENDATIONS: Mapping[str, tuple[str, ...]] = {
    SAFE_TIER: (
        "Continue regular monitoring",
        "Maintain current environmental practices",
    ),
    MODERATE_TIER: (
        "Increase monitoring frequency",
        "Investigate pollution sources",
        "Consider remediation strategies",
    ),
    HIGH_TIER: (
        "Immediate action required",
        "Implement remediation measures",
        "Restrict usage for drinking/irrigation",
        "Identify and eliminate pollution sources",
    ),
    UNKNOWN_TIER: ("Review data and recalculate",),
}

DESCRIPTIONS: Mapping[str, str] = {
    SAFE_TIER: "Heavy metal levels are within acceptable limits",
    MODERATE_TIER: "Some indices indicate elevated heavy metal pollution",
    HIGH_TIER: "Multiple indices indicate serious heavy metal pollution",
    UNKNOWN_TIER: "No pollution index could be computed for this sample",
}


@dataclass(frozen=True)
class OverallAssessment:
    risk_tier: str
    risk_factors: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    description: str = ""

    @property
    def risk_factor_count(self) -> int:
        return len(self.risk_factors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "riskTier": self.risk_tier,
            "riskFactors": list(self.risk_factors),
            "riskFactorCount": self.risk_factor_count,
            "recommendations": list(self.recommendations),
            "description": self.description,
        }


def _tier_for(flag_count: int) -> str:
    for threshold, tier in _TIER_THRESHOLDS:
        if flag_count <= threshold:
            return tier
    return HIGH_TIER


class AssessmentSynthesizer:
    """Turns index outcomes into an OverallAssessment.

    Flags are raised by: HPI Unsafe, Nemerow Severe, PLI Polluted, any metal
    with HRI >= 1 (one flag regardless of metal count) and ERI High.
    """

    def synthesize(self, indices: Mapping[str, IndexResult]) -> OverallAssessment:
        if not any(result.is_known for result in indices.values()):
            return OverallAssessment(
                risk_tier=UNKNOWN_TIER,
                recommendations=RECOMMENDATIONS[UNKNOWN_TIER],
                description=DESCRIPTIONS[UNKNOWN_TIER],
            )

        factors: list[str] = []
        hpi = indices.get(HeavyMetalPollutionIndex.name)
        if hpi is not None and hpi.category == HPI_UNSAFE:
            factors.append(f"HPI {hpi.value} exceeds the critical value of 100")

        nemerow = indices.get(NemerowIndex.name)
        if nemerow is not None and nemerow.category == NEMEROW_SEVERE:
            factors.append(f"Nemerow index {nemerow.value} indicates severe pollution")

        pli = indices.get(PollutionLoadIndex.name)
        if pli is not None and pli.category == PLI_POLLUTED:
            factors.append(f"Pollution load index {pli.value} indicates a polluted site")

        hri = indices.get(HealthRiskIndex.name)
        exceeding = int(hri.details.get("exceedingMetals", 0)) if hri is not None else 0
        if exceeding > 0:
            noun = "metal poses" if exceeding == 1 else "metals pose"
            factors.append(f"{exceeding} {noun} a potential health risk (HRI >= 1)")

        eri = indices.get(EcologicalRiskIndex.name)
        if eri is not None and eri.category == ERI_HIGH:
            factors.append(f"Ecological risk index {eri.value} indicates high ecological risk")

        tier = _tier_for(len(factors))
        description = DESCRIPTIONS[tier]
        cf = indices.get(ContaminationFactorIndex.name)
        if cf is not None and cf.is_known and cf.details.get("worstMetal"):
            description = f"{description}; highest contamination factor from {cf.details['worstMetal']}"
        return OverallAssessment(
            risk_tier=tier,
            risk_factors=tuple(factors),
            recommendations=RECOMMENDATIONS[tier],
            description=description,
        )
