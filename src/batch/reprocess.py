"""
Invalid partition reprocessing.

Re-validates the records of an invalid partition (for instance after the
upstream data was corrected in place) and moves the ones that now pass into
the batch's valid partition.
"""

from datetime import datetime
from typing import Any

from src.core.config import PipelineConfig
from src.core.errors import DecodeError, NotFoundError, StorageError
from src.core.models import InvocationResult, strip_annotations
from src.core.rules import RuleEngine
from src.batch.aggregation import decode_partition
from src.batch.partitioner import partition
from src.batch.writers import encode_records, invalid_location, valid_location
from src.batch.writers.partition_writer import JSON_CONTENT_TYPE
from src.observability import metrics
from src.observability.logger import get_logger
from src.storage import ObjectStore

logger = get_logger(__name__)


class InvalidPartitionReprocessor:
    """
    Reprocess invalid partitions with the current rule set.

    Recovered records are appended to ``<name>.json``; the rest are written
    back to the invalid partition, which is deleted once it is empty.
    """

    def __init__(self, store: ObjectStore, config: PipelineConfig, rule_engine: RuleEngine | None = None):
        """
        Initialize reprocessor.

        Args:
            store: Output store holding both partitions
            config: Pipeline configuration
            rule_engine: Record validator (defaults to the sales rule set)
        """
        self.store = store
        self.config = config
        self.rule_engine = rule_engine or RuleEngine()

    def reprocess(self, name: str) -> InvocationResult:
        """
        Reprocess the invalid partition of batch ``name``.

        Args:
            name: Batch name (the uploaded key without ".csv")

        Returns:
            InvocationResult with details:
            - total_reprocessed: Records re-validated
            - success_count: Records moved to the valid partition
            - failed_count: Records still invalid
            - duration_seconds: Time taken
        """
        start_time = datetime.now()
        source = invalid_location(name, self.config.invalid_prefix)
        target = valid_location(name)
        logger.info(f"Starting reprocessing of {source}", extra={"location": source})

        try:
            invalid_records = [r for r in self._read(source) if isinstance(r, dict)]
            if not invalid_records:
                return InvocationResult.success(
                    f"No invalid records found in {source}",
                    total_reprocessed=0, success_count=0, failed_count=0,
                )

            results = self.rule_engine.validate_batch(
                [strip_annotations(record) for record in invalid_records]
            )
            batch = partition(result.record for result in results)

            if batch.valid:
                existing = self._read(target, missing_ok=True)
                self.store.put(target, encode_records(existing + batch.valid), JSON_CONTENT_TYPE)

            if batch.invalid:
                self.store.put(source, encode_records(batch.invalid), JSON_CONTENT_TYPE)
            else:
                self.store.delete(source)
        except NotFoundError:
            return InvocationResult.failure(f"Invalid partition not found: {source}")
        except (DecodeError, StorageError) as e:
            logger.error(f"Reprocessing of {source} failed: {e}", extra={"location": source})
            return InvocationResult.failure(str(e))

        duration = (datetime.now() - start_time).total_seconds()
        metrics.processing_duration_seconds.labels(mode="reprocess").observe(duration)
        logger.info(
            f"Reprocessing complete: {batch.valid_count} recovered, {batch.invalid_count} still invalid",
            extra={"location": source, "success_count": batch.valid_count,
                   "failed_count": batch.invalid_count}
        )
        return InvocationResult.success(
            f"Reprocessed {source}",
            total_reprocessed=batch.total_count,
            success_count=batch.valid_count,
            failed_count=batch.invalid_count,
            duration_seconds=round(duration, 3),
        )

    def _read(self, location: str, missing_ok: bool = False) -> list[Any]:
        try:
            content = self.store.get(location)
        except NotFoundError:
            if missing_ok:
                return []
            raise
        return decode_partition(location, content)

