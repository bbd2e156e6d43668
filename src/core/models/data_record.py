"""
Record shapes flowing through the pipeline (ephemeral).

A raw record is one decoded CSV row: an open mapping from column name to a
scalar value. The validator only inspects a known subset of columns and keeps
everything else untouched.
"""

from datetime import datetime, timezone
from typing import Union

# Scalar values a record field may hold
FieldValue = Union[str, int, float, bool, None]

RawRecord = dict[str, FieldValue]

# Fields injected into every record after validation
IS_VALID_FIELD = "is_valid"
PROCESSED_TIMESTAMP_FIELD = "processed_timestamp"
ANNOTATION_FIELDS = (IS_VALID_FIELD, PROCESSED_TIMESTAMP_FIELD)


def utc_timestamp(now: datetime | None = None) -> str:
    """
    Format an instant as ISO-8601 UTC with millisecond precision.

    Example: ``2024-01-15T10:30:00.000Z``
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def annotate(record: RawRecord, is_valid: bool, processed_timestamp: str) -> RawRecord:
    """Return a copy of ``record`` carrying the validation outcome fields."""
    annotated = dict(record)
    annotated[IS_VALID_FIELD] = is_valid
    annotated[PROCESSED_TIMESTAMP_FIELD] = processed_timestamp
    return annotated


def strip_annotations(record: RawRecord) -> RawRecord:
    """Return a copy of ``record`` without the injected outcome fields."""
    return {k: v for k, v in record.items() if k not in ANNOTATION_FIELDS}
