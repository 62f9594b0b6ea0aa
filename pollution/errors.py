"""
pollution/errors.py

Exceptions raised by the pollution index engine and its collaborators.
"""

from __future__ import annotations


class PollutionEngineError(Exception):
    """Base exception for pollution assessment failures."""


class IndexCalculationError(PollutionEngineError):
    """Raised when one index cannot be computed for a sample."""

    def __init__(self, index: str, message: str) -> None:
        super().__init__(f"{index}: {message}")
        self.index = index
        self.message = message


class UnknownUnitError(PollutionEngineError):
    """Raised when a concentration unit has no conversion factor and the policy rejects it."""

    def __init__(self, unit: str) -> None:
        super().__init__(f"No conversion factor for unit '{unit}'.")
        self.unit = unit


class StandardsConfigurationError(PollutionEngineError):
    """Raised when a standards table entry is internally inconsistent."""
