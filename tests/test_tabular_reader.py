"""
tests/test_tabular_reader.py

Spreadsheet reading for .xlsx and .csv uploads.

Coverage
--------
- First sheet only, header row + numbered data rows
- Blank rows skipped while later rows keep their spreadsheet row numbers
- Cell normalization (numbers, booleans, blanks)
- Header-only, empty and corrupt files -> ParseError
"""

from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import Workbook

from app.domain.errors import ParseError
from app.parsers.tabular_reader import TabularReader


def _write_workbook(path: Path, rows: list[list]) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Survey"
    for row in rows:
        sheet.append(row)
    extra = workbook.create_sheet("Notes")
    extra.append(["ignored"])
    extra.append(["still ignored"])
    workbook.save(path)
    return path


@pytest.fixture()
def reader() -> TabularReader:
    return TabularReader()


class TestExcelReading:
    def test_reads_first_sheet(self, reader, tmp_path) -> None:
        path = _write_workbook(
            tmp_path / "survey.xlsx",
            [
                ["Location", "Latitude", "Fe (ppm)"],
                ["Site A", 9.9, 0.5],
                ["Site B", 10.1, 2],
            ],
        )

        data = reader.read(path)

        assert data.sheet_name == "Survey"
        assert data.headers == ["Location", "Latitude", "Fe (ppm)"]
        assert data.total_rows == 2
        assert data.rows[0] == (2, ["Site A", 9.9, 0.5])
        assert data.rows[1][0] == 3
        assert data.rows[1][1][2] == 2

    def test_blank_rows_keep_numbering(self, reader, tmp_path) -> None:
        path = _write_workbook(
            tmp_path / "gaps.xlsx",
            [
                ["Location", "Fe"],
                ["Site A", 0.1],
                [None, None],
                ["Site C", 0.3],
            ],
        )

        data = reader.read(path)

        assert [row_number for row_number, _ in data.rows] == [2, 4]

    def test_booleans_become_text(self, reader, tmp_path) -> None:
        path = _write_workbook(tmp_path / "flags.xlsx", [["Location", "Filtered"], ["Site A", True]])

        data = reader.read(path)

        assert data.rows[0][1] == ["Site A", "TRUE"]

    def test_header_only_workbook(self, reader, tmp_path) -> None:
        path = _write_workbook(tmp_path / "header.xlsx", [["Location", "Fe"]])

        with pytest.raises(ParseError):
            reader.read(path)

    def test_corrupt_workbook(self, reader, tmp_path) -> None:
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"this is not a zip archive")

        with pytest.raises(ParseError):
            reader.read(path)

    def test_display_name_selects_format(self, reader, tmp_path) -> None:
        # Spooled uploads may live under an extension-less temp name.
        source = _write_workbook(tmp_path / "survey.xlsx", [["Location"], ["Site A"]])
        spooled = tmp_path / "upload_tmp"
        spooled.write_bytes(source.read_bytes())

        data = reader.read(spooled, file_name="survey.xlsx")

        assert data.file_name == "survey.xlsx"
        assert data.rows == [(2, ["Site A"])]


class TestCsvReading:
    def test_reads_csv_as_text(self, reader, tmp_path) -> None:
        path = tmp_path / "survey.csv"
        path.write_text("Location,Fe (ppm),As (ppb)\nSite A,0.5,\n\nSite C,1.2,20\n", encoding="utf-8")

        data = reader.read(path)

        assert data.sheet_name is None
        assert data.headers == ["Location", "Fe (ppm)", "As (ppb)"]
        assert data.rows == [
            (2, ["Site A", "0.5", None]),
            (4, ["Site C", "1.2", "20"]),
        ]

    def test_utf8_bom_is_stripped(self, reader, tmp_path) -> None:
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffLocation,Fe\nSite A,1\n".encode("utf-8"))

        data = reader.read(path)

        assert data.headers[0] == "Location"

    def test_empty_csv(self, reader, tmp_path) -> None:
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ParseError):
            reader.read(path)

    def test_only_blank_data_rows(self, reader, tmp_path) -> None:
        path = tmp_path / "blank.csv"
        path.write_text("Location,Fe\n,\n,\n", encoding="utf-8")

        with pytest.raises(ParseError):
            reader.read(path)

    def test_unsupported_extension(self, reader, tmp_path) -> None:
        path = tmp_path / "survey.ods"
        path.write_bytes(b"irrelevant")

        with pytest.raises(ParseError):
            reader.read(path)
