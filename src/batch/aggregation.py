"""
Aggregation over every persisted valid partition.

Flow: list → fetch → decode → fold → summarize (→ write report)

The fold only sums and counts, so partial results from any subset of sources
can be merged in any order.
"""

import json
from typing import Any, Iterable

from pydantic import BaseModel

from src.core.config import PipelineConfig
from src.core.errors import ConfigurationError, DecodeError, StorageError
from src.core.models import IS_VALID_FIELD, InvocationResult, SummaryMetrics
from src.core.validators import is_numeric, to_number
from src.observability import metrics
from src.observability.logger import get_logger, log_operation
from src.storage import ObjectStore
from src.batch.writers import SummaryWriter

logger = get_logger(__name__)

PARTITION_SUFFIX = ".json"

STORE_ORDER = "S"
ONLINE_ORDER = "E"


class MetricsAccumulator(BaseModel):
    """Running totals of one (partial) aggregation."""

    total_records: int = 0
    total_subtotal: float = 0.0
    store_orders: int = 0
    online_orders: int = 0

    def add(self, record: dict[str, Any]) -> None:
        """
        Fold one record in.

        Only an explicit ``is_valid: false`` excludes a record; a missing
        flag counts.
        """
        if record.get(IS_VALID_FIELD) is False:
            return

        self.total_records += 1

        subtotal = record.get("subtotal")
        if is_numeric(subtotal):
            self.total_subtotal += to_number(subtotal)

        order_type = record.get("order_type")
        if isinstance(order_type, str):
            order_type = order_type.strip().upper()
            if order_type == STORE_ORDER:
                self.store_orders += 1
            elif order_type == ONLINE_ORDER:
                self.online_orders += 1

    def add_all(self, records: Iterable[Any]) -> None:
        for record in records:
            if isinstance(record, dict):
                self.add(record)

    def merge(self, other: "MetricsAccumulator") -> "MetricsAccumulator":
        """Combine two partial folds into a new accumulator."""
        return MetricsAccumulator(
            total_records=self.total_records + other.total_records,
            total_subtotal=self.total_subtotal + other.total_subtotal,
            store_orders=self.store_orders + other.store_orders,
            online_orders=self.online_orders + other.online_orders,
        )

    def summarize(self) -> SummaryMetrics:
        avg = self.total_subtotal / self.total_records if self.total_records > 0 else 0.0
        return SummaryMetrics(
            total_records=self.total_records,
            total_subtotal=self.total_subtotal,
            avg_subtotal=avg,
            store_orders=self.store_orders,
            online_orders=self.online_orders,
        )


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def decode_partition(location: str, content: bytes) -> list[Any]:
    """
    Decode a stored valid partition.

    Raises:
        DecodeError: If content is empty, not JSON (including the
            non-standard NaN and Infinity literals), or not a JSON array
    """
    if not content or not content.strip():
        raise DecodeError(location, "empty content")

    try:
        payload = json.loads(content, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(location, str(e)) from e

    if not isinstance(payload, list):
        raise DecodeError(location, f"expected a JSON array, got {type(payload).__name__}")

    return payload


def aggregate(sources: Iterable[tuple[str, bytes]]) -> SummaryMetrics:
    """
    Fold (location, content) pairs into summary metrics.

    Sources that fail to decode are skipped.
    """
    accumulator = MetricsAccumulator()
    for location, content in sources:
        try:
            records = decode_partition(location, content)
        except DecodeError as e:
            logger.warning(f"Skipping source: {e}", extra={"location": location})
            metrics.record_aggregation_source(decoded=False)
            continue
        accumulator.add_all(records)
        metrics.record_aggregation_source(decoded=True)
    return accumulator.summarize()


class AggregationEngine:
    """
    Scans every valid partition in the output store and reduces it to
    SummaryMetrics.

    Each run recomputes the full snapshot; nothing is persisted between runs
    except the optional report.
    """

    def __init__(
        self,
        store: ObjectStore,
        config: PipelineConfig,
        report_store: ObjectStore | None = None,
    ):
        """
        Initialize aggregation engine.

        Args:
            store: Store holding the partitions (the output bucket)
            config: Pipeline configuration
            report_store: Store receiving the summary report (defaults to ``store``)
        """
        self.store = store
        self.config = config
        self.report_store = report_store or store
        self.summary_writer = SummaryWriter()

    def is_partition(self, location: str) -> bool:
        """Whether ``location`` names a valid-partition object."""
        return (
            location.endswith(PARTITION_SUFFIX)
            and not location.startswith(self.config.invalid_prefix)
        )

    def list_sources(self) -> Iterable[str]:
        for location in self.store.list(self.config.scan_prefix):
            if self.is_partition(location):
                yield location

    def fetch_sources(self) -> Iterable[tuple[str, bytes]]:
        """
        Yield (location, content) for every valid partition.

        Fetch failures are logged and the source skipped.
        """
        for location in self.list_sources():
            try:
                content = self.store.get(location)
            except StorageError as e:
                logger.warning(f"Skipping source: {e}", extra={"location": location})
                metrics.record_aggregation_source(decoded=False)
                continue
            yield location, content

    def aggregate(self) -> SummaryMetrics:
        """
        Compute SummaryMetrics over all valid partitions.

        Raises:
            StorageError: If the listing itself fails
        """
        summary = aggregate(self.fetch_sources())
        metrics.record_summary(summary.total_records, summary.total_subtotal)
        logger.info(
            f"Aggregated {summary.total_records} records",
            extra=summary.model_dump()
        )
        return summary

    def run(self) -> InvocationResult:
        """
        Aggregate and write the summary report.

        Returns:
            InvocationResult; configuration and storage failures are reported,
            not raised
        """
        try:
            self.config.require_report_bucket()
            with metrics.track_duration(metrics.processing_duration_seconds, mode="aggregate"), \
                    log_operation("Aggregate valid partitions", logger=logger) as op:
                summary = self.aggregate()
                location = self.summary_writer.write(self.report_store, self.config.summary_key, summary)
                op.add(summary_location=location, total_records=summary.total_records)
        except (ConfigurationError, StorageError) as e:
            return InvocationResult.failure(str(e))

        return InvocationResult.success(
            f"Summary written to {location}",
            summary_location=location,
            **summary.model_dump(),
        )
