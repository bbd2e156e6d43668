"""
Batch readers.
"""

from .csv_reader import CSVReader

__all__ = [
    "CSVReader",
]
