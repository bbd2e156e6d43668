"""
Prometheus metrics for the sales pipeline

Counts records per partition, batch outcomes, rule failures and the outcome
of every source visited by the aggregation scan.
"""
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Private registry so that importing the module never touches the global one
REGISTRY = CollectorRegistry()


# =======================
# INGESTION METRICS
# =======================

records_processed_total = Counter(
    name="pipeline_records_processed_total",
    documentation="Total number of records partitioned by the pipeline",
    labelnames=["status"],  # status: valid, invalid
    registry=REGISTRY,
)

batches_processed_total = Counter(
    name="pipeline_batches_processed_total",
    documentation="Total number of uploaded batches processed",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)

validation_failures_total = Counter(
    name="pipeline_validation_failures_total",
    documentation="Total number of failed validation rules",
    labelnames=["rule_name"],
    registry=REGISTRY,
)

processing_duration_seconds = Histogram(
    name="pipeline_processing_duration_seconds",
    documentation="Time spent in one pipeline invocation in seconds",
    labelnames=["mode"],  # mode: ingest, aggregate, reprocess
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)

# =======================
# AGGREGATION METRICS
# =======================

aggregation_sources_total = Counter(
    name="pipeline_aggregation_sources_total",
    documentation="Valid partitions visited by the aggregation scan",
    labelnames=["status"],  # status: decoded, skipped
    registry=REGISTRY,
)

summary_total_records = Gauge(
    name="pipeline_summary_total_records",
    documentation="total_records of the last summary computed",
    registry=REGISTRY,
)

summary_total_subtotal = Gauge(
    name="pipeline_summary_total_subtotal",
    documentation="total_subtotal of the last summary computed",
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(processing_duration_seconds, mode="ingest"):
            ...
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """Increment a counter metric, skipping zero increments"""
    if value:
        counter.labels(**labels).inc(value)


def record_partition(valid_records: int, invalid_records: int) -> None:
    """Record the size of both partitions of one batch"""
    increment_counter(records_processed_total, valid_records, status="valid")
    increment_counter(records_processed_total, invalid_records, status="invalid")


def record_validation_failures(failed_rules: list[str]) -> None:
    for rule_name in failed_rules:
        increment_counter(validation_failures_total, 1, rule_name=rule_name)


def record_batch(success: bool) -> None:
    increment_counter(batches_processed_total, 1, status="success" if success else "failure")


def record_aggregation_source(decoded: bool) -> None:
    increment_counter(aggregation_sources_total, 1, status="decoded" if decoded else "skipped")


def record_summary(total_records: int, total_subtotal: float) -> None:
    summary_total_records.set(total_records)
    summary_total_subtotal.set(total_subtotal)
