"""
Batch output writers.
"""

from .partition_writer import (
    PartitionWriter,
    batch_name,
    encode_records,
    invalid_location,
    valid_location,
)
from .summary_writer import SummaryWriter

__all__ = [
    "PartitionWriter",
    "SummaryWriter",
    "batch_name",
    "encode_records",
    "valid_location",
    "invalid_location",
]
