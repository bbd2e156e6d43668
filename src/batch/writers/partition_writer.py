"""
Partition writer for validated batches.

Valid records of ``<name>.csv`` go to ``<name>.json``; invalid records, when
there are any, go to ``<invalid_prefix><name>-invalid.json``. Both are JSON
arrays of annotated records.
"""

import json
from typing import Any

from src.core.models import BatchPartition
from src.observability.logger import get_logger
from src.storage import ObjectStore

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"
SOURCE_SUFFIX = ".csv"


def batch_name(location: str) -> str:
    """
    Derive the batch name from an uploaded CSV key.

    Examples:
        >>> batch_name("uploads/sales.csv")
        'uploads/sales'

    Raises:
        ValueError: If the key does not end in .csv
    """
    if not location.lower().endswith(SOURCE_SUFFIX) or len(location) == len(SOURCE_SUFFIX):
        raise ValueError(f"Not a CSV batch: {location}")
    return location[:-len(SOURCE_SUFFIX)]


def valid_location(name: str) -> str:
    return f"{name}.json"


def invalid_location(name: str, invalid_prefix: str) -> str:
    return f"{invalid_prefix}{name}-invalid.json"


def encode_records(records: list[dict[str, Any]]) -> bytes:
    """
    Serialize annotated records as a pretty-printed JSON array.

    Raises:
        ValueError: If a record holds NaN or an infinity, which standard JSON
            cannot represent
    """
    return json.dumps(records, indent=2, ensure_ascii=False, allow_nan=False).encode("utf-8")


class PartitionWriter:
    """
    Writes both partitions of a batch to the output store.
    """

    def __init__(self, store: ObjectStore, invalid_prefix: str):
        """
        Initialize partition writer.

        Args:
            store: Output object store
            invalid_prefix: Key prefix of the invalid-partition namespace
        """
        self.store = store
        self.invalid_prefix = invalid_prefix

    def write_valid(self, name: str, records: list[dict[str, Any]]) -> str:
        """
        Write the valid partition (always, even when empty).

        Returns:
            Location written

        Raises:
            StorageError: If the write fails
        """
        location = valid_location(name)
        self.store.put(location, encode_records(records), JSON_CONTENT_TYPE)
        logger.info(
            f"Wrote {len(records)} valid records to {location}",
            extra={"location": location, "record_count": len(records)}
        )
        return location

    def write_invalid(self, name: str, records: list[dict[str, Any]]) -> str | None:
        """
        Write the invalid partition if it is non-empty.

        Returns:
            Location written, or None when there was nothing to write

        Raises:
            StorageError: If the write fails
        """
        if not records:
            return None

        location = invalid_location(name, self.invalid_prefix)
        self.store.put(location, encode_records(records), JSON_CONTENT_TYPE)
        logger.info(
            f"Wrote {len(records)} invalid records to {location}",
            extra={"location": location, "record_count": len(records)}
        )
        return location

    def write(self, name: str, batch: BatchPartition) -> dict[str, str | None]:
        """
        Write the valid partition, then the invalid one.

        A failure on the valid write stops before the invalid write.

        Returns:
            {"valid_location": ..., "invalid_location": ...}
        """
        valid_key = self.write_valid(name, batch.valid)
        invalid_key = self.write_invalid(name, batch.invalid)
        return {"valid_location": valid_key, "invalid_location": invalid_key}
