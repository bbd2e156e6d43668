"""
Integration tests for the ingestion pipeline against the filesystem object store.

Tests fetch → decode → validate → partition → write → retire.
"""

import json
import os

import pytest

from src.batch.pipeline import IngestionPipeline
from src.core.config import PipelineConfig
from src.core.errors import StorageError
from src.core.rules import RuleEngine
from src.storage import InMemoryObjectStore, LocalObjectStore


@pytest.fixture
def local_source_store(local_root):
    return LocalObjectStore(os.path.join(local_root, "uploads"))


@pytest.fixture
def pipeline(local_source_store, local_output_store, config, fixed_clock):
    return IngestionPipeline(
        source_store=local_source_store,
        output_store=local_output_store,
        config=config,
        rule_engine=RuleEngine(clock=fixed_clock),
    )


class FailingPutStore(InMemoryObjectStore):
    """In-memory store whose writes under ``fail_on`` raise StorageError"""

    def __init__(self, fail_on, **kwargs):
        super().__init__(**kwargs)
        self.fail_on = fail_on

    def put(self, location, data, content_type="application/octet-stream"):
        if location.startswith(self.fail_on):
            raise StorageError(location, "simulated write failure")
        super().put(location, data, content_type)


@pytest.mark.integration
class TestIngestionPipeline:
    """Tests for IngestionPipeline.process_file"""

    def test_dirty_batch_is_partitioned(self, pipeline, local_source_store, local_output_store, dirty_csv):
        local_source_store.put("sales.csv", dirty_csv)

        result = pipeline.process_file("sales.csv")

        assert result.succeeded
        assert result.details["total_records"] == 3
        assert result.details["valid_records"] == 1
        assert result.details["invalid_records"] == 2
        assert result.details["valid_location"] == "sales.json"
        assert result.details["invalid_location"] == "Invalid/sales-invalid.json"

        valid = json.loads(local_output_store.get("sales.json"))
        invalid = json.loads(local_output_store.get("Invalid/sales-invalid.json"))
        assert [r["transaction_id"] for r in valid] == ["T-1"]
        assert [r["transaction_id"] for r in invalid] == ["T-2", "T-3"]
        assert all(r["is_valid"] is False for r in invalid)
        assert valid[0]["processed_timestamp"] == "2024-01-15T10:31:02.118Z"

    def test_partition_files_are_json_arrays(self, pipeline, local_source_store, local_root, dirty_csv):
        local_source_store.put("sales.csv", dirty_csv)
        pipeline.process_file("sales.csv")

        with open(os.path.join(local_root, "test-json", "sales.json"), encoding="utf-8") as f:
            assert isinstance(json.load(f), list)

    def test_all_valid_batch_writes_no_invalid_partition(
        self, pipeline, local_source_store, local_output_store, csv_builder
    ):
        local_source_store.put("clean.csv", csv_builder(
            "T-1,2024-01-15T10:30:00Z,3.33,3,a@example.com,9.99,S",
            "T-2,2024-01-15T11:00:00Z,10,2,b@example.com,,E",
        ))

        result = pipeline.process_file("clean.csv")

        assert result.details["invalid_location"] is None
        assert not local_output_store.exists("Invalid/clean-invalid.json")
        valid = json.loads(local_output_store.get("clean.json"))
        assert valid[1]["subtotal"] == 20.0

    def test_all_invalid_batch_writes_empty_valid_partition(
        self, pipeline, local_source_store, local_output_store, csv_builder
    ):
        local_source_store.put("bad.csv", csv_builder(",2024-01-15,1,1,a@example.com,1,S"))

        pipeline.process_file("bad.csv")

        assert json.loads(local_output_store.get("bad.json")) == []
        assert len(json.loads(local_output_store.get("Invalid/bad-invalid.json"))) == 1

    def test_header_only_batch(self, pipeline, local_source_store, local_output_store, csv_builder):
        local_source_store.put("empty.csv", csv_builder())

        result = pipeline.process_file("empty.csv")

        assert result.succeeded
        assert result.details["total_records"] == 0
        assert json.loads(local_output_store.get("empty.json")) == []

    def test_nested_key_keeps_directory(self, pipeline, local_source_store, local_output_store, dirty_csv):
        local_source_store.put("2024/01/sales.CSV", dirty_csv)

        result = pipeline.process_file("2024/01/sales.CSV")

        assert result.details["valid_location"] == "2024/01/sales.json"
        assert local_output_store.exists("Invalid/2024/01/sales-invalid.json")

    def test_reprocessing_same_input_overwrites(self, pipeline, local_source_store, local_output_store, dirty_csv):
        local_source_store.put("sales.csv", dirty_csv)
        pipeline.process_file("sales.csv")
        pipeline.process_file("sales.csv")

        assert len(json.loads(local_output_store.get("sales.json"))) == 1

    def test_missing_input(self, pipeline):
        result = pipeline.process_file("missing.csv")

        assert not result.succeeded
        assert "missing.csv" in result.message

    def test_non_csv_key(self, pipeline, local_source_store):
        local_source_store.put("notes.txt", b"hello")
        result = pipeline.process_file("notes.txt")
        assert not result.succeeded
        assert "Not a CSV batch" in result.message

    def test_undecodable_input(self, pipeline, local_source_store, local_output_store):
        local_source_store.put("binary.csv", b"\xff\xfe\x00garbage")

        result = pipeline.process_file("binary.csv")

        assert not result.succeeded
        assert "Cannot decode" in result.message
        assert not local_output_store.exists("binary.json")

    def test_missing_output_bucket(self, local_source_store, local_output_store, dirty_csv):
        local_source_store.put("sales.csv", dirty_csv)
        pipeline = IngestionPipeline(local_source_store, local_output_store, PipelineConfig())

        result = pipeline.process_and_retire("sales.csv")

        assert not result.succeeded
        assert "output_bucket" in result.message
        assert list(local_output_store.list()) == []
        assert local_source_store.exists("sales.csv")

    def test_valid_write_failure_skips_invalid_write(self, config, dirty_csv):
        source = InMemoryObjectStore({"sales.csv": dirty_csv})
        output = FailingPutStore(fail_on="sales.json")
        pipeline = IngestionPipeline(source, output, config)

        result = pipeline.process_and_retire("sales.csv")

        assert not result.succeeded
        assert "simulated write failure" in result.message
        assert output.objects == {}
        assert source.exists("sales.csv")

    def test_invalid_write_failure_keeps_input(self, config, dirty_csv):
        source = InMemoryObjectStore({"sales.csv": dirty_csv})
        output = FailingPutStore(fail_on="Invalid/")
        pipeline = IngestionPipeline(source, output, config)

        result = pipeline.process_and_retire("sales.csv")

        assert not result.succeeded
        assert "sales.json" in output.objects
        assert source.exists("sales.csv")


@pytest.mark.integration
class TestRetirement:
    """Tests for retire_input / process_and_retire"""

    def test_input_deleted_after_commit(self, pipeline, local_source_store, dirty_csv):
        local_source_store.put("sales.csv", dirty_csv)

        result = pipeline.process_and_retire("sales.csv")

        assert result.succeeded
        assert result.details["retired"] is True
        assert not local_source_store.exists("sales.csv")

    def test_keep_source(self, local_source_store, local_output_store, dirty_csv):
        local_source_store.put("sales.csv", dirty_csv)
        config = PipelineConfig(output_bucket="test-json", delete_source_after_processing=False)
        pipeline = IngestionPipeline(local_source_store, local_output_store, config)

        result = pipeline.process_and_retire("sales.csv")

        assert result.succeeded
        assert result.details["retired"] is False
        assert local_source_store.exists("sales.csv")

    def test_retire_refuses_uncommitted_partition(self, pipeline, local_source_store, local_output_store, dirty_csv):
        local_source_store.put("sales.csv", dirty_csv)
        result = pipeline.process_file("sales.csv")
        local_output_store.delete("Invalid/sales-invalid.json")

        retirement = pipeline.retire_input(result)

        assert not retirement.succeeded
        assert "not committed" in retirement.message
        assert local_source_store.exists("sales.csv")

    def test_retire_refuses_failed_result(self, pipeline):
        result = pipeline.process_file("missing.csv")
        assert not pipeline.retire_input(result).succeeded

    def test_retire_is_idempotent(self, pipeline, local_source_store, dirty_csv):
        local_source_store.put("sales.csv", dirty_csv)
        result = pipeline.process_file("sales.csv")

        assert pipeline.retire_input(result).succeeded
        assert pipeline.retire_input(result).succeeded
