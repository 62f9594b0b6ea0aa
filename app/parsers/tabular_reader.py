"""
app/parsers/tabular_reader.py

Reads the first sheet of an uploaded spreadsheet into headers plus numbered
data rows. Schema interpretation happens downstream in the column classifier.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Union

import numpy as np
import pandas as pd

from app.domain.errors import ParseError

logger = logging.getLogger(__name__)

CellValue = Union[float, int, str, None]

FIRST_DATA_ROW_NUMBER = 2

_EXCEL_ENGINES = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}


@dataclass(frozen=True)
class TabularData:
    """
    Header row plus ordered ``(row_number, cells)`` pairs.

    Row numbers are spreadsheet row numbers: the header is row 1, the first
    data row is row 2, and skipped blank rows leave gaps.
    """

    headers: list[str]
    rows: list[tuple[int, list[CellValue]]] = field(default_factory=list)
    total_rows: int = 0
    sheet_name: str | None = None
    file_name: str | None = None


def _normalize_cell(value: Any) -> CellValue:
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return str(bool(value)).upper()
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, (float, np.floating)):
        number = float(value)
        return None if math.isnan(number) else number
    if isinstance(value, int):
        return value
    text = str(value)
    return text if text.strip() else None


def _normalize_header(value: Any) -> str:
    cell = _normalize_cell(value)
    if cell is None:
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def _is_blank_row(cells: list[CellValue]) -> bool:
    return all(cell is None for cell in cells)


class TabularReader:
    """
    Loads ``.xlsx``/``.xls`` (first sheet) or ``.csv`` files through pandas.
    """

    def read(self, file_path: str | Path, *, file_name: str | None = None) -> TabularData:
        path = Path(file_path)
        display_name = file_name or path.name
        extension = Path(display_name).suffix.lower() or path.suffix.lower()

        try:
            frame, sheet_name = self._load_frame(path, extension)
        except ParseError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise ParseError(f"Failed to parse file '{display_name}': {exc}") from exc

        raw_rows = frame.to_numpy(dtype=object).tolist() if not frame.empty else []
        if len(raw_rows) < 2:
            raise ParseError("File must contain a header row and at least one data row.")

        headers = [_normalize_header(value) for value in raw_rows[0]]
        rows: list[tuple[int, list[CellValue]]] = []
        for offset, raw in enumerate(raw_rows[1:]):
            cells = [_normalize_cell(value) for value in raw]
            if _is_blank_row(cells):
                continue
            rows.append((FIRST_DATA_ROW_NUMBER + offset, cells))

        if not rows:
            raise ParseError("File must contain a header row and at least one data row.")

        logger.info(
            "Read %s data rows and %s columns from %s (sheet=%s)",
            len(rows),
            len(headers),
            display_name,
            sheet_name,
        )
        return TabularData(
            headers=headers,
            rows=rows,
            total_rows=len(rows),
            sheet_name=sheet_name,
            file_name=display_name,
        )

    def _load_frame(self, path: Path, extension: str) -> tuple[pd.DataFrame, str | None]:
        if extension == ".csv":
            frame = pd.read_csv(
                path,
                header=None,
                dtype=str,
                encoding="utf-8-sig",
                skip_blank_lines=False,
            )
            return frame, None

        engine = _EXCEL_ENGINES.get(extension)
        if engine is None:
            raise ParseError(f"Unsupported spreadsheet format '{extension}'.")

        with pd.ExcelFile(path, engine=engine) as workbook:
            if not workbook.sheet_names:
                raise ParseError("Workbook contains no sheets.")
            sheet_name = workbook.sheet_names[0]
            frame = workbook.parse(sheet_name=sheet_name, header=None, dtype=object)
        return frame, str(sheet_name)
