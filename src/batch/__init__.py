"""
Batch processing: ingestion, partitioning, aggregation and reprocessing.
"""

from .aggregation import AggregationEngine, MetricsAccumulator, aggregate
from .partitioner import partition
from .pipeline import IngestionPipeline
from .readers import CSVReader
from .reprocess import InvalidPartitionReprocessor
from .writers import PartitionWriter, SummaryWriter

__all__ = [
    "IngestionPipeline",
    "AggregationEngine",
    "MetricsAccumulator",
    "InvalidPartitionReprocessor",
    "CSVReader",
    "PartitionWriter",
    "SummaryWriter",
    "aggregate",
    "partition",
]
