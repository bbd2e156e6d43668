"""
Core data models for the sales validation pipeline.

Structured results use Pydantic for runtime validation; records themselves
are plain mappings of scalar field values.
"""

from .batch_partition import BatchPartition
from .data_record import (
    ANNOTATION_FIELDS,
    IS_VALID_FIELD,
    PROCESSED_TIMESTAMP_FIELD,
    FieldValue,
    RawRecord,
    annotate,
    strip_annotations,
    utc_timestamp,
)
from .invocation_result import InvocationResult
from .summary_metrics import DECIMAL_METRICS, METRIC_ORDER, SummaryMetrics
from .validation_result import ValidationResult

__all__ = [
    "FieldValue",
    "RawRecord",
    "IS_VALID_FIELD",
    "PROCESSED_TIMESTAMP_FIELD",
    "ANNOTATION_FIELDS",
    "annotate",
    "strip_annotations",
    "utc_timestamp",
    "ValidationResult",
    "BatchPartition",
    "SummaryMetrics",
    "METRIC_ORDER",
    "DECIMAL_METRICS",
    "InvocationResult",
]
