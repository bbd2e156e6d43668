"""
Ingestion pipeline orchestration.

Coordinates the flow: read → validate → partition → write → retire

Committing the partitions and retiring the uploaded CSV are separate steps:
the input is only deleted once both partitions are confirmed in the output
store.
"""

import csv
import time
from typing import Any, Optional

from src.core.config import PipelineConfig
from src.core.errors import ConfigurationError, StorageError
from src.core.models import InvocationResult
from src.core.rules import RuleEngine
from src.batch.partitioner import partition
from src.batch.readers import CSVReader
from src.batch.writers import PartitionWriter, batch_name
from src.observability import metrics
from src.observability.logger import get_logger
from src.storage import ObjectStore


logger = get_logger(__name__)


class IngestionPipeline:
    """
    Orchestrates the processing of one uploaded CSV batch.

    Flow:
    1. Fetch the CSV from the source store
    2. Decode rows into raw records
    3. Validate and annotate every record
    4. Partition into valid / invalid
    5. Write the valid partition, then the invalid one (if non-empty)
    6. Optionally retire the input once both writes are confirmed
    """

    def __init__(
        self,
        source_store: ObjectStore,
        output_store: ObjectStore,
        config: PipelineConfig,
        rule_engine: Optional[RuleEngine] = None,
        reader: Optional[CSVReader] = None,
    ):
        """
        Initialize ingestion pipeline.

        Args:
            source_store: Store holding uploaded CSV files
            output_store: Store receiving the JSON partitions
            config: Pipeline configuration
            rule_engine: Record validator (defaults to the sales rule set)
            reader: CSV decoder
        """
        self.source_store = source_store
        self.output_store = output_store
        self.config = config
        self.rule_engine = rule_engine or RuleEngine()
        self.reader = reader or CSVReader()
        self.writer = PartitionWriter(output_store, config.invalid_prefix)

    def process_file(self, location: str) -> InvocationResult:
        """
        Process one uploaded CSV through validation and partitioning.

        Row-level validation failures never fail the invocation. Configuration
        and storage failures stop it and are reported in the result.

        Args:
            location: Key of the CSV in the source store

        Returns:
            InvocationResult with details:
            - source_location: Input key
            - total_records: Rows decoded
            - valid_records: Records in the valid partition
            - invalid_records: Records in the invalid partition
            - valid_location / invalid_location: Keys written
            - duration_seconds: Time taken
        """
        start_time = time.time()
        logger.info(f"Starting batch processing for {location}", extra={"location": location})

        try:
            self.config.require_output_bucket()
            details = self._process(location)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}", extra={"location": location})
            metrics.record_batch(success=False)
            return InvocationResult.failure(str(e), source_location=location)
        except StorageError as e:
            logger.error(f"Storage failure while processing {location}: {e}", extra={"location": location})
            metrics.record_batch(success=False)
            return InvocationResult.failure(str(e), source_location=location)
        except (ValueError, csv.Error) as e:
            # UnicodeDecodeError is a ValueError
            logger.error(f"Cannot decode {location}: {e}", extra={"location": location})
            metrics.record_batch(success=False)
            return InvocationResult.failure(f"Cannot decode '{location}': {e}", source_location=location)

        duration = time.time() - start_time
        metrics.processing_duration_seconds.labels(mode="ingest").observe(duration)
        metrics.record_batch(success=True)
        details["duration_seconds"] = round(duration, 3)

        logger.info(
            f"Batch processing complete: {details['valid_records']} valid, "
            f"{details['invalid_records']} invalid",
            extra={"location": location, "valid_count": details["valid_records"],
                   "invalid_count": details["invalid_records"]}
        )
        return InvocationResult.success(f"Processed {location}", **details)

    def _process(self, location: str) -> dict[str, Any]:
        name = batch_name(location)

        # Step 1: Fetch
        content = self.source_store.get(location)

        # Step 2: Decode
        records = self.reader.read(content)
        logger.info(f"Read {len(records)} records", extra={"location": location})

        # Step 3: Validate
        results = self.rule_engine.validate_batch(records)
        for result in results:
            metrics.record_validation_failures(result.failed_rules)

        # Step 4: Partition
        batch = partition(result.record for result in results)

        # Step 5: Write; a failed valid write stops before the invalid one
        locations = self.writer.write(name, batch)

        return {
            "source_location": location,
            "total_records": batch.total_count,
            "valid_records": batch.valid_count,
            "invalid_records": batch.invalid_count,
            **locations,
        }

    def retire_input(self, result: InvocationResult) -> InvocationResult:
        """
        Delete the uploaded CSV after a successful, confirmed commit.

        Both partition keys reported in ``result`` are re-checked in the
        output store first. Safe to retry.

        Args:
            result: Successful result of process_file()

        Returns:
            InvocationResult describing the retirement
        """
        location = result.details.get("source_location")
        if not result.succeeded or not location:
            return InvocationResult.failure(
                "Input not retired: processing did not succeed",
                source_location=location,
            )

        committed = [result.details.get("valid_location"), result.details.get("invalid_location")]
        try:
            for key in committed:
                if key and not self.output_store.exists(key):
                    return InvocationResult.failure(
                        f"Input not retired: partition {key} is not committed",
                        source_location=location,
                    )
            if self.source_store.exists(location):
                self.source_store.delete(location)
        except StorageError as e:
            logger.error(f"Failed to retire {location}: {e}", extra={"location": location})
            return InvocationResult.failure(str(e), source_location=location)

        logger.info(f"Retired input {location}", extra={"location": location})
        return InvocationResult.success(f"Retired {location}", source_location=location)

    def process_and_retire(self, location: str) -> InvocationResult:
        """
        Process a batch and, if configured, retire its input.

        Returns:
            The processing result; ``details["retired"]`` tells whether the
            input was deleted. A failed retirement turns the result into a failure.
        """
        result = self.process_file(location)
        if not result.succeeded:
            return result

        if not self.config.delete_source_after_processing:
            result.details["retired"] = False
            return result

        retirement = self.retire_input(result)
        if not retirement.succeeded:
            return InvocationResult.failure(
                retirement.message,
                **{**result.details, "retired": False},
            )

        result.details["retired"] = True
        return result
