"""
app/parsers package marker.
"""

from app.parsers.tabular_reader import TabularData, TabularReader

__all__ = [
    "TabularData",
    "TabularReader",
]
