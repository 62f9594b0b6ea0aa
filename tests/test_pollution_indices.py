"""
tests/test_pollution_indices.py

Pytest unit tests for the seven pollution index calculators and the engine.

All tests are pure Python: no database, no I/O.

Coverage
--------
- Single-metal arsenic sample (0.02 mg/L) through every index
- Category boundaries on rounded values, including the HRI >= 1 flag
- Metals missing from the table or lacking auxiliary values are skipped
- Zero-metal samples degrade to Unknown without raising
- Injected standards tables
"""

from __future__ import annotations

import math

import pytest

from pollution.base import UNKNOWN_CATEGORY
from pollution.engine import PollutionIndexEngine
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
from pollution.standards import BIS_STANDARDS, StandardEntry, StandardsTable
from pollution.synthesis import AssessmentSynthesizer
from pollution.types import MetalReading, MetalReadingSet


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def arsenic_table() -> StandardsTable:
    return StandardsTable(
        "TEST",
        [
            StandardEntry(
                symbol="As",
                permissible_limit=0.05,
                ideal_value=0.01,
                weightage=5,
                background=1.5,
                toxic_response_factor=10,
                reference_dose=0.0003,
            )
        ],
    )


@pytest.fixture()
def arsenic_sample() -> dict[str, float]:
    return {"AS": 0.02}


# ---------------------------------------------------------------------------
# Single-metal arsenic sample
# ---------------------------------------------------------------------------


class TestArsenicSample:
    def test_hpi_sub_index_and_category(self, arsenic_sample, arsenic_table) -> None:
        result = HeavyMetalPollutionIndex().compute(arsenic_sample, arsenic_table)
        assert result.metals["AS"].value == pytest.approx(25.0)
        assert result.value == pytest.approx(25.0)
        assert result.category == "Safe"
        assert result.metal_count == 1

    def test_contamination_factor(self, arsenic_sample, arsenic_table) -> None:
        result = ContaminationFactorIndex().compute(arsenic_sample, arsenic_table)
        assert result.value == pytest.approx(0.4)
        assert result.category == "Low contamination"
        assert result.details["degreeOfContamination"] == pytest.approx(0.4)

    def test_pli_equals_cf_for_single_metal(self, arsenic_sample, arsenic_table) -> None:
        result = PollutionLoadIndex().compute(arsenic_sample, arsenic_table)
        assert result.value == pytest.approx(0.4)
        assert result.category == "No pollution"

    def test_igeo(self, arsenic_sample, arsenic_table) -> None:
        result = GeoaccumulationIndex().compute(arsenic_sample, arsenic_table)
        expected = round(math.log2(0.02 / (1.5 * 1.5)), 2)
        assert result.value == pytest.approx(expected)
        assert result.value == pytest.approx(-6.81)
        assert result.category == "Unpolluted"

    def test_eri(self, arsenic_sample, arsenic_table) -> None:
        result = EcologicalRiskIndex().compute(arsenic_sample, arsenic_table)
        assert result.metals["AS"].value == pytest.approx(4.0)
        assert result.value == pytest.approx(4.0)
        assert result.category == "Low ecological risk"

    def test_hri(self, arsenic_sample, arsenic_table) -> None:
        result = HealthRiskIndex(body_weight_kg=70, water_intake_l=2).compute(arsenic_sample, arsenic_table)
        metal = result.metals["AS"]
        assert metal.extras["dailyIntake"] == pytest.approx(0.000571)
        assert metal.value == pytest.approx(1.905)
        assert result.category == "Potential health risk"
        assert result.details["exceedingMetals"] == 1

    def test_nemerow(self, arsenic_sample, arsenic_table) -> None:
        result = NemerowIndex().compute(arsenic_sample, arsenic_table)
        assert result.value == pytest.approx(0.57)
        assert result.category == "No pollution"

    def test_overall_tier_is_moderate_from_hri_alone(self, arsenic_table) -> None:
        engine = PollutionIndexEngine(standards=arsenic_table)
        assessment = engine.assess(MetalReadingSet([MetalReading("As", 0.02, "mg/L")]))

        overall = assessment.overall
        assert overall.risk_factor_count == 1
        assert overall.risk_tier == "Moderate"
        assert "Increase monitoring frequency" in overall.recommendations


# ---------------------------------------------------------------------------
# Boundaries and skipping
# ---------------------------------------------------------------------------


class TestIndexBoundaries:
    def test_hpi_exactly_100_is_threshold(self) -> None:
        table = StandardsTable("T", [StandardEntry("Pb", permissible_limit=0.01, ideal_value=0, weightage=5)])
        result = HeavyMetalPollutionIndex().compute({"PB": 0.01}, table)
        assert result.value == 100.0
        assert result.category == "Threshold"

    def test_hpi_above_100_is_unsafe(self) -> None:
        table = StandardsTable("T", [StandardEntry("Pb", permissible_limit=0.01, ideal_value=0, weightage=5)])
        result = HeavyMetalPollutionIndex().compute({"PB": 0.05}, table)
        assert result.value == 500.0
        assert result.category == "Unsafe"

    def test_category_uses_rounded_value(self) -> None:
        table = StandardsTable("T", [StandardEntry("Zn", permissible_limit=1.0)])
        # CF 0.999 rounds to 1.0, which is Moderate contamination.
        result = ContaminationFactorIndex().compute({"ZN": 0.999}, table)
        assert result.value == 1.0
        assert result.category == "Moderate contamination"

    @pytest.mark.parametrize(
        ("concentration", "reported", "exceeding", "tier"),
        [(0.9996, 1.0, 1, "Moderate"), (0.9994, 0.999, 0, "Safe")],
    )
    def test_hri_exceedance_counts_reported_value(self, concentration, reported, exceeding, tier) -> None:
        table = StandardsTable("T", [StandardEntry("Zn", permissible_limit=10.0, reference_dose=1.0)])
        result = HealthRiskIndex(body_weight_kg=1, water_intake_l=1).compute({"ZN": concentration}, table)

        assert result.value == reported
        assert result.details["exceedingMetals"] == exceeding
        overall = AssessmentSynthesizer().synthesize({result.index: result})
        assert overall.risk_tier == tier

    def test_pli_exactly_one_is_baseline(self) -> None:
        table = StandardsTable("T", [StandardEntry("Zn", permissible_limit=1.0)])
        result = PollutionLoadIndex().compute({"ZN": 1.0}, table)
        assert result.category == "Baseline"

    def test_pli_geometric_mean_of_two_metals(self) -> None:
        table = StandardsTable(
            "T",
            [StandardEntry("Zn", permissible_limit=1.0), StandardEntry("Cu", permissible_limit=1.0)],
        )
        result = PollutionLoadIndex().compute({"ZN": 4.0, "CU": 1.0}, table)
        assert result.value == pytest.approx(2.0)
        assert result.category == "Polluted"

    def test_hpi_weights_metals(self) -> None:
        table = StandardsTable(
            "T",
            [
                StandardEntry("Pb", permissible_limit=0.01, weightage=3),
                StandardEntry("Zn", permissible_limit=1.0, weightage=1),
            ],
        )
        result = HeavyMetalPollutionIndex().compute({"PB": 0.02, "ZN": 0.0}, table)
        # (3 * 200 + 1 * 0) / 4
        assert result.value == pytest.approx(150.0)

    def test_metal_without_standard_is_skipped(self) -> None:
        result = ContaminationFactorIndex().compute({"AS": 0.02, "SE": 5.0}, BIS_STANDARDS)
        assert result.metal_count == 1
        assert "SE" not in result.metals

    def test_eri_skips_metals_without_toxic_response_factor(self) -> None:
        result = EcologicalRiskIndex().compute({"FE": 0.5, "AS": 0.02}, BIS_STANDARDS)
        assert result.metal_count == 1
        assert set(result.metals) == {"AS"}

    def test_igeo_skips_zero_concentrations(self) -> None:
        result = GeoaccumulationIndex().compute({"AS": 0.0, "PB": 0.5}, BIS_STANDARDS)
        assert set(result.metals) == {"PB"}

    def test_igeo_all_zero_raises(self) -> None:
        with pytest.raises(IndexCalculationError):
            GeoaccumulationIndex().compute({"AS": 0.0}, BIS_STANDARDS)

    def test_no_matches_raises(self) -> None:
        with pytest.raises(IndexCalculationError) as exc_info:
            HeavyMetalPollutionIndex().compute({"SE": 1.0}, BIS_STANDARDS)
        assert exc_info.value.index == "hpi"

    def test_hri_reports_hazard_index_sum(self) -> None:
        result = HealthRiskIndex().compute({"AS": 0.02, "PB": 0.02}, BIS_STANDARDS)
        expected = (0.02 * 2 / 70) / 0.0003 + (0.02 * 2 / 70) / 0.0035
        assert result.details["hazardIndex"] == pytest.approx(round(expected, 3))
        assert result.details["worstMetal"] == "AS"


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class TestPollutionIndexEngine:
    def test_zero_metal_sample_is_unknown_everywhere(self) -> None:
        assessment = PollutionIndexEngine().assess(MetalReadingSet())

        for result in assessment.indices.values():
            assert result.value is None
            assert result.category == UNKNOWN_CATEGORY
            assert result.error
        assert assessment.overall.risk_tier == "Unknown"
        assert assessment.overall.recommendations == ("Review data and recalculate",)

    def test_one_failing_index_does_not_affect_others(self) -> None:
        # Fe has no toxic response factor, so only ERI fails.
        assessment = PollutionIndexEngine().assess(MetalReadingSet([MetalReading("Fe", 0.2, "mg/L")]))

        assert assessment["ecologicalRiskIndex"].category == UNKNOWN_CATEGORY
        assert assessment["hpi"].value is not None
        assert assessment["healthRiskIndex"].value is not None

    def test_document_shape(self) -> None:
        assessment = PollutionIndexEngine().assess(MetalReadingSet([MetalReading("As", 0.02, "mg/L")]))
        document = assessment.to_dict()

        assert set(document) >= {
            "hpi",
            "nemerowIndex",
            "contaminationFactor",
            "pollutionLoadIndex",
            "ecologicalRiskIndex",
            "geoaccumulationIndex",
            "healthRiskIndex",
            "overallAssessment",
        }
        assert document["hpi"]["metalCount"] == 1
        assert document["overallAssessment"]["riskFactorCount"] == 1
        assert document["standardsCategory"] == "BIS"

    def test_injected_table_is_used(self) -> None:
        table = StandardsTable("CUSTOM", [StandardEntry("As", permissible_limit=0.02)])
        assessment = PollutionIndexEngine(standards=table).assess(
            MetalReadingSet([MetalReading("As", 0.02, "mg/L")])
        )
        assert assessment["contaminationFactor"].value == 1.0
        assert assessment.standards_category == "CUSTOM"
