"""
CSV reader decoding uploaded batches into raw records.
"""

import csv
import io

from src.core.models import RawRecord

EXTRA_COLUMNS_KEY = "_extra_columns"


class CSVReader:
    """
    Decodes CSV content (header row + data rows) into raw records.

    Values are kept as the strings found in the file; typing is left to the
    validators. Short rows get None for their missing columns and surplus
    cells are collected under ``_extra_columns``.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8-sig"):
        """
        Initialize CSV reader.

        Args:
            delimiter: Field delimiter
            encoding: Text encoding (utf-8-sig drops a leading BOM)
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def read(self, content: bytes) -> list[RawRecord]:
        """
        Decode CSV bytes into records, in row order.

        Args:
            content: Raw file content

        Returns:
            One record per non-blank data row

        Raises:
            UnicodeDecodeError: If content is not valid text in the configured encoding
            csv.Error: If the content is not parseable CSV
        """
        text = content.decode(self.encoding)
        reader = csv.DictReader(
            io.StringIO(text, newline=""),
            delimiter=self.delimiter,
            restkey=EXTRA_COLUMNS_KEY,
        )

        # Header cells are trimmed: " price" and "price" name the same column
        return [
            {key.strip(): value for key, value in row.items()}
            for row in reader
        ]
