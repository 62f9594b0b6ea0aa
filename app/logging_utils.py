"""
JSON-line log helpers for the ingestion pipeline.

Every line carries an ``event`` key so log shippers can filter on it;
the remaining keys are free-form and serialised with ``str`` fallback.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    if not logger.isEnabledFor(level):
        return
    logger.log(level, json.dumps({"event": event, **fields}, default=str, sort_keys=True))


@contextmanager
def timed_event(logger: logging.Logger, event: str, **fields: Any) -> Iterator[dict[str, Any]]:
    """
    Log ``event`` with ``elapsed_ms`` once the block finishes.

    The yielded dict is merged into the line, so the block can attach
    results. A block that raises is logged at WARNING with the error type
    and the exception propagates.
    """

    extra: dict[str, Any] = {}
    started = time.monotonic()
    try:
        yield extra
    except Exception as exc:
        elapsed_ms = round((time.monotonic() - started) * 1000, 1)
        log_event(
            logger,
            logging.WARNING,
            f"{event}_failed",
            elapsed_ms=elapsed_ms,
            error=type(exc).__name__,
            **fields,
            **extra,
        )
        raise
    elapsed_ms = round((time.monotonic() - started) * 1000, 1)
    log_event(logger, logging.INFO, event, elapsed_ms=elapsed_ms, **fields, **extra)
