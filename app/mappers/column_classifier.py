"""
app/mappers/column_classifier.py

Heuristic header classification for heavy-metal sample spreadsheets.

Each header is classified at most once: as a metal concentration column, as a
metadata role column (location, coordinates, year, serial number), or left
unclaimed so the extractor can keep it as an environmental parameter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

from pollution.units import canonical_unit
from pollution.types import canonical_symbol

DEFAULT_METAL_SYMBOLS: tuple[str, ...] = ("Fe", "As", "U", "Pb", "Hg", "Cd", "Cr", "Ni", "Zn", "Cu", "Mn")
DEFAULT_UNIT = "ppm"

ROLE_NAME = "name"
ROLE_STATE = "state"
ROLE_DISTRICT = "district"
ROLE_LATITUDE = "latitude"
ROLE_LONGITUDE = "longitude"
ROLE_YEAR = "year"
ROLE_SERIAL = "serial_number"

# Roles are resolved in this order; more specific roles claim headers first.
DEFAULT_ROLE_KEYWORDS: dict[str, tuple[str, ...]] = {
    ROLE_LATITUDE: ("latitude", "lat", "coord_y"),
    ROLE_LONGITUDE: ("longitude", "lon", "lng", "coord_x"),
    ROLE_YEAR: ("year", "sampling_year", "collection_year"),
    ROLE_SERIAL: ("s.no", "sno", "serial", "id", "sample_id"),
    ROLE_DISTRICT: ("district", "county", "zone"),
    ROLE_STATE: ("state", "province", "region"),
    ROLE_NAME: ("location", "place", "site", "area", "locality"),
}

SHORT_KEYWORD_LENGTH = 3

_PARENTHESIZED = re.compile(r"\(([^()]*)\)")
_TRAILING_UNIT = re.compile(r"(ppm|ppb|mg\s*/\s*l|[µμu]g\s*/\s*l)\s*$", re.IGNORECASE)
_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


# ---------------------------------------------------------------------------
# Metal matchers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetalMatcher:
    """
    Named pattern factory applied to an upper-cased header for one symbol.
    """

    name: str
    build: Callable[[str], re.Pattern[str]]

    def matches(self, header_upper: str, symbol: str) -> bool:
        return self.build(re.escape(symbol)).search(header_upper) is not None


def _exact(symbol: str) -> re.Pattern[str]:
    return re.compile(rf"^{symbol}$")


def _parenthesized_unit(symbol: str) -> re.Pattern[str]:
    return re.compile(rf"^{symbol}\s*\(.*\)$")


def _hyphen_suffix(symbol: str) -> re.Pattern[str]:
    return re.compile(rf"^{symbol}\s*-.*$")


def _space_suffix(symbol: str) -> re.Pattern[str]:
    return re.compile(rf"^{symbol}\s+.*$")


def _embedded(symbol: str) -> re.Pattern[str]:
    # Standalone token only: "TURBIDITY (NTU)" must not match U.
    return re.compile(rf"(?=.*\(.*\))(?:^|.*[^A-Z]){symbol}(?:[^A-Z].*)?$")


DEFAULT_METAL_MATCHERS: tuple[MetalMatcher, ...] = (
    MetalMatcher("exact", _exact),
    MetalMatcher("parenthesized_unit", _parenthesized_unit),
    MetalMatcher("hyphen_suffix", _hyphen_suffix),
    MetalMatcher("space_suffix", _space_suffix),
    MetalMatcher("embedded", _embedded),
)


def extract_unit(header: str, default: str = DEFAULT_UNIT) -> str:
    """
    Pull a concentration unit out of a header.

    A parenthesized token wins; otherwise a trailing known unit is used.
    """

    for token in _PARENTHESIZED.findall(header):
        unit = canonical_unit(token)
        if unit:
            return unit
    trailing = _TRAILING_UNIT.search(header.strip())
    if trailing:
        return canonical_unit(trailing.group(1)) or default
    return default


def parenthesized_token(header: str) -> str | None:
    match = _PARENTHESIZED.search(header)
    if match is None:
        return None
    token = match.group(1).strip()
    return token or None


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetalColumn:
    index: int
    header: str
    unit: str
    matcher: str


@dataclass(frozen=True)
class ColumnClassification:
    """
    Resolved column roles for one header row.
    """

    headers: tuple[str, ...]
    metal_columns: dict[str, MetalColumn] = field(default_factory=dict)
    role_columns: dict[str, int] = field(default_factory=dict)
    environmental_columns: tuple[int, ...] = ()

    @property
    def detected_metals(self) -> list[str]:
        return list(self.metal_columns)

    def role_header(self, role: str) -> str | None:
        index = self.role_columns.get(role)
        return self.headers[index] if index is not None else None

    def metal_headers(self) -> dict[str, str]:
        return {symbol: column.header for symbol, column in self.metal_columns.items()}


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------


def _tokens(value: str) -> list[str]:
    return [token for token in _TOKEN_SPLIT.split(value.lower()) if token]


def _compact(value: str) -> str:
    return "".join(ch for ch in value.lower() if ch.isalnum())


class ColumnClassifier:
    """
    Classifies spreadsheet headers into metal, role, and environmental columns.
    """

    def __init__(
        self,
        *,
        metal_symbols: Sequence[str] | None = None,
        matchers: Sequence[MetalMatcher] | None = None,
        role_keywords: Mapping[str, Sequence[str]] | None = None,
        default_unit: str = DEFAULT_UNIT,
    ) -> None:
        self._symbols: tuple[str, ...] = tuple(
            canonical_symbol(symbol) for symbol in (metal_symbols or DEFAULT_METAL_SYMBOLS)
        )
        self._matchers: tuple[MetalMatcher, ...] = tuple(matchers or DEFAULT_METAL_MATCHERS)
        self._role_keywords: dict[str, tuple[str, ...]] = {
            role: tuple(keyword.strip().lower() for keyword in keywords if keyword.strip())
            for role, keywords in (role_keywords or DEFAULT_ROLE_KEYWORDS).items()
        }
        self._default_unit = default_unit

    @property
    def metal_symbols(self) -> tuple[str, ...]:
        return self._symbols

    def classify(self, headers: Sequence[str]) -> ColumnClassification:
        clean_headers = tuple("" if header is None else str(header).strip() for header in headers)
        metal_columns = self._match_metals(clean_headers)
        claimed = {column.index for column in metal_columns.values()}

        role_columns: dict[str, int] = {}
        for role, keywords in self._role_keywords.items():
            for index, header in enumerate(clean_headers):
                if not header or index in claimed:
                    continue
                if self._matches_role(header, keywords):
                    role_columns[role] = index
                    claimed.add(index)
                    break

        environmental = tuple(
            index for index, header in enumerate(clean_headers) if header and index not in claimed
        )
        return ColumnClassification(
            headers=clean_headers,
            metal_columns=metal_columns,
            role_columns=role_columns,
            environmental_columns=environmental,
        )

    def match_metal(self, header: str) -> tuple[str, str] | None:
        """
        Return ``(symbol, matcher_name)`` for the strongest matching pair.

        Matchers are ranked in table order; symbol order breaks ties.
        """

        ranked = self._rank_metal(header)
        if ranked is None:
            return None
        _, symbol, matcher_name = ranked
        return symbol, matcher_name

    def _rank_metal(self, header: str) -> tuple[int, str, str] | None:
        header_upper = header.strip().upper()
        if not header_upper:
            return None
        for rank, matcher in enumerate(self._matchers):
            for symbol in self._symbols:
                if matcher.matches(header_upper, symbol):
                    return rank, symbol, matcher.name
        return None

    def _match_metals(self, headers: Sequence[str]) -> dict[str, MetalColumn]:
        # symbol -> (matcher rank, header index, matcher name)
        best: dict[str, tuple[int, int, str]] = {}
        for index, header in enumerate(headers):
            ranked = self._rank_metal(header) if header else None
            if ranked is None:
                continue
            rank, symbol, matcher_name = ranked
            # Stronger matcher wins; on equal strength the earlier header stays.
            if symbol not in best or rank < best[symbol][0]:
                best[symbol] = (rank, index, matcher_name)

        bound = sorted(best.items(), key=lambda item: item[1][1])
        return {
            symbol: MetalColumn(
                index=index,
                header=headers[index],
                unit=extract_unit(headers[index], self._default_unit),
                matcher=matcher_name,
            )
            for symbol, (_, index, matcher_name) in bound
        }

    @staticmethod
    def _matches_role(header: str, keywords: Sequence[str]) -> bool:
        tokens = _tokens(header)
        compact_header = _compact(header)
        for keyword in keywords:
            compact_keyword = _compact(keyword)
            if not compact_keyword:
                continue
            if len(compact_keyword) <= SHORT_KEYWORD_LENGTH:
                if compact_keyword in tokens or compact_keyword == compact_header:
                    return True
            elif compact_keyword in compact_header:
                return True
        return False
