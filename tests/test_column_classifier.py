from __future__ import annotations

import unittest

from app.mappers.column_classifier import (
    ROLE_DISTRICT,
    ROLE_LATITUDE,
    ROLE_LONGITUDE,
    ROLE_NAME,
    ROLE_SERIAL,
    ROLE_STATE,
    ROLE_YEAR,
    ColumnClassifier,
    extract_unit,
)

SURVEY_HEADERS = [
    "S.No",
    "Location",
    "State",
    "District",
    "Longitude",
    "Latitude",
    "Year",
    "Fe (ppm)",
    "As (ppb)",
    "U (ppb)",
    "pH",
    "Turbidity (NTU)",
    "EC (µS/cm)",
]


class TestColumnClassifier(unittest.TestCase):
    def setUp(self) -> None:
        self.classifier = ColumnClassifier()

    def test_classifies_survey_sheet(self) -> None:
        result = self.classifier.classify(SURVEY_HEADERS)

        self.assertEqual(result.detected_metals, ["FE", "AS", "U"])
        self.assertEqual(result.metal_columns["FE"].unit, "ppm")
        self.assertEqual(result.metal_columns["AS"].unit, "ppb")
        self.assertEqual(result.metal_columns["AS"].matcher, "parenthesized_unit")
        self.assertEqual(result.role_header(ROLE_SERIAL), "S.No")
        self.assertEqual(result.role_header(ROLE_NAME), "Location")
        self.assertEqual(result.role_header(ROLE_STATE), "State")
        self.assertEqual(result.role_header(ROLE_DISTRICT), "District")
        self.assertEqual(result.role_header(ROLE_LONGITUDE), "Longitude")
        self.assertEqual(result.role_header(ROLE_LATITUDE), "Latitude")
        self.assertEqual(result.role_header(ROLE_YEAR), "Year")
        self.assertEqual(
            [result.headers[index] for index in result.environmental_columns],
            ["pH", "Turbidity (NTU)", "EC (µS/cm)"],
        )

    def test_every_header_classified_at_most_once(self) -> None:
        result = self.classifier.classify(SURVEY_HEADERS)

        metal_indices = [column.index for column in result.metal_columns.values()]
        role_indices = list(result.role_columns.values())
        all_indices = metal_indices + role_indices + list(result.environmental_columns)
        self.assertEqual(len(all_indices), len(set(all_indices)))
        self.assertEqual(len(all_indices), len(SURVEY_HEADERS))

    def test_matcher_variants(self) -> None:
        self.assertEqual(self.classifier.match_metal("Cd"), ("CD", "exact"))
        self.assertEqual(self.classifier.match_metal("Pb - mg/L"), ("PB", "hyphen_suffix"))
        self.assertEqual(self.classifier.match_metal("Hg ppb"), ("HG", "space_suffix"))
        self.assertEqual(self.classifier.match_metal("Dissolved Cr (mg/L)"), ("CR", "embedded"))

    def test_symbol_inside_word_is_not_a_metal(self) -> None:
        self.assertIsNone(self.classifier.match_metal("Turbidity (NTU)"))
        self.assertIsNone(self.classifier.match_metal("Feature"))
        self.assertIsNone(self.classifier.match_metal("Assessment"))

    def test_repeated_symbol_keeps_first_header(self) -> None:
        result = self.classifier.classify(["Location", "Lat", "Fe", "Fe (ppb)"])

        self.assertEqual(result.metal_columns["FE"].header, "Fe")
        self.assertEqual(result.metal_columns["FE"].unit, "ppm")
        self.assertIn(3, result.environmental_columns)

    def test_stronger_matcher_beats_earlier_embedded_header(self) -> None:
        result = self.classifier.classify(
            ["Location", "Lat", "Total Hardness as CaCO3 (mg/L)", "As (ppb)"]
        )

        arsenic = result.metal_columns["AS"]
        self.assertEqual(arsenic.header, "As (ppb)")
        self.assertEqual(arsenic.matcher, "parenthesized_unit")
        self.assertEqual(arsenic.unit, "ppb")
        self.assertIn(2, result.environmental_columns)

    def test_header_takes_its_strongest_symbol(self) -> None:
        self.assertEqual(self.classifier.match_metal("Pb (Fe filtered) mg/L"), ("PB", "space_suffix"))

    def test_short_keywords_need_whole_tokens(self) -> None:
        result = self.classifier.classify(["Site", "Acidity", "Lat", "Lng", "Sample ID", "x", "y"])

        self.assertEqual(result.role_header(ROLE_LATITUDE), "Lat")
        self.assertEqual(result.role_header(ROLE_LONGITUDE), "Lng")
        self.assertEqual(result.role_header(ROLE_SERIAL), "Sample ID")
        self.assertEqual(result.role_header(ROLE_NAME), "Site")
        self.assertEqual(
            [result.headers[index] for index in result.environmental_columns],
            ["Acidity", "x", "y"],
        )

    def test_blank_headers_are_ignored(self) -> None:
        result = self.classifier.classify(["Location", "", None, "Zn"])

        self.assertEqual(result.detected_metals, ["ZN"])
        self.assertEqual(result.environmental_columns, ())

    def test_custom_metal_list(self) -> None:
        classifier = ColumnClassifier(metal_symbols=["Se"])
        result = classifier.classify(["Location", "Se (ppb)", "Fe (ppm)"])

        self.assertEqual(result.detected_metals, ["SE"])
        self.assertEqual(result.environmental_columns, (2,))


class TestExtractUnit(unittest.TestCase):
    def test_parenthesized_unit(self) -> None:
        self.assertEqual(extract_unit("As (ug/L)"), "µg/L")

    def test_trailing_unit(self) -> None:
        self.assertEqual(extract_unit("Pb - mg/L"), "mg/L")

    def test_default_unit(self) -> None:
        self.assertEqual(extract_unit("Zn"), "ppm")
        self.assertEqual(extract_unit("Zn", default="mg/L"), "mg/L")


if __name__ == "__main__":
    unittest.main()
