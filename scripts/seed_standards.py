"""
Store heavy-metal standard overrides from the CLI.

Without --metal every built-in entry of the category is written, which gives
operators rows to edit in place. With --metal one override is written after
checking it against the built-in entry it replaces. The running API picks the
change up once its standards cache expires.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.session import SessionLocal
from pollution.errors import StandardsConfigurationError
from pollution.repository import StandardsRepository
from pollution.standards import DEFAULT_CATEGORY, StandardEntry, get_builtin_table

logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed or override heavy-metal standards.")
    parser.add_argument("--category", default=DEFAULT_CATEGORY, help="Standards category (BIS, WHO).")
    parser.add_argument("--metal", default=None, help="Element symbol to override, e.g. As.")
    parser.add_argument("--limit", type=float, default=None, help="Permissible limit in mg/L.")
    parser.add_argument("--ideal", type=float, default=None, help="Ideal value in mg/L.")
    parser.add_argument("--weightage", type=float, default=None, help="HPI weightage.")
    parser.add_argument("--source", default=None, help="Where the values come from.")
    return parser.parse_args(argv)


def _entries_to_store(args: argparse.Namespace) -> list[StandardEntry]:
    table = get_builtin_table(args.category)
    if args.metal is None:
        return list(table.values())

    symbol = args.metal.strip().upper()
    if symbol not in table:
        raise StandardsConfigurationError(
            f"{symbol} has no built-in {table.category} standard to override."
        )
    # Re-running the entry checks rejects e.g. an ideal value above the limit.
    return [
        table[symbol].with_overrides(
            permissible_limit=args.limit,
            ideal_value=args.ideal,
            weightage=args.weightage,
        )
    ]


def main(
    argv: Sequence[str] | None = None,
    session_factory: Callable[[], Session] = SessionLocal,
) -> int:
    args = _parse_args(argv)
    try:
        entries = _entries_to_store(args)
    except StandardsConfigurationError as exc:
        logger.error("Refusing to store standards: %s", exc)
        return 2

    category = get_builtin_table(args.category).category
    source = args.source or (f"{category} built-in" if args.metal is None else None)
    repository = StandardsRepository()
    with session_factory() as db:
        try:
            for entry in entries:
                repository.upsert(
                    db,
                    metal=entry.symbol,
                    category=category,
                    permissible_limit=entry.permissible_limit,
                    ideal_value=entry.ideal_value,
                    weightage=entry.weightage,
                    source=source,
                )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to store %s standards", category)
            return 1

    payload = [
        {
            "metal": entry.symbol,
            "category": category,
            "permissible_limit": entry.permissible_limit,
            "ideal_value": entry.ideal_value,
            "weightage": entry.weightage,
        }
        for entry in entries
    ]
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(main())
