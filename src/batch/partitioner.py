"""
Batch partitioner: stable valid/invalid split of annotated records.
"""

from typing import Any, Iterable

from src.core.models import IS_VALID_FIELD, BatchPartition
from src.observability import metrics
from src.observability.logger import get_logger

logger = get_logger(__name__)


def partition(records: Iterable[dict[str, Any]]) -> BatchPartition:
    """
    Split annotated records on their ``is_valid`` flag.

    Only an explicit ``True`` lands in the valid partition. Order within each
    partition follows input order and every record lands in exactly one.

    Args:
        records: Annotated records, in row order

    Returns:
        BatchPartition with both sequences
    """
    valid = []
    invalid = []
    for record in records:
        if record.get(IS_VALID_FIELD) is True:
            valid.append(record)
        else:
            invalid.append(record)

    logger.info(
        f"Partitioned batch: {len(valid)} valid, {len(invalid)} invalid",
        extra={"valid_count": len(valid), "invalid_count": len(invalid)}
    )
    metrics.record_partition(len(valid), len(invalid))

    return BatchPartition(valid=valid, invalid=invalid)
