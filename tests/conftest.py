"""
Pytest configuration and fixtures for the sales pipeline tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import json
import os

import pytest

from src.core.config import PipelineConfig
from src.storage import InMemoryObjectStore, LocalObjectStore


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests against the filesystem object store"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that exercise the full pipeline"
    )


# =======================
# RECORD FIXTURES
# =======================

FIXED_TIMESTAMP = "2024-01-15T10:31:02.118Z"


@pytest.fixture
def fixed_clock():
    """Clock returning a constant processed_timestamp"""
    return lambda: FIXED_TIMESTAMP


@pytest.fixture
def valid_record() -> dict:
    """A raw record (as decoded from CSV) that passes every rule"""
    return {
        "transaction_id": "T-1001",
        "transaction_date": "2024-01-15T10:30:00Z",
        "price": "3.33",
        "quantity": "3",
        "email": "buyer@example.com",
        "subtotal": "9.99",
        "order_type": "S",
    }


# =======================
# CSV FIXTURES
# =======================

CSV_HEADER = "transaction_id,transaction_date,price,quantity,email,subtotal,order_type"


def make_csv(*rows: str) -> bytes:
    """Build CSV content from data rows under the standard header"""
    return ("\n".join([CSV_HEADER, *rows]) + "\n").encode("utf-8")


@pytest.fixture
def dirty_csv() -> bytes:
    """
    Three rows: one valid, one missing price, one with a non-ISO date
    """
    return make_csv(
        "T-1,2024-01-15T10:30:00Z,3.33,3,a@example.com,9.99,S",
        "T-2,2024-01-15T11:00:00Z,,2,b@example.com,,E",
        "T-3,15/01/2024,5,1,c@example.com,5,E",
    )


# =======================
# STORAGE FIXTURES
# =======================

@pytest.fixture
def config() -> PipelineConfig:
    """Pipeline configuration with an output bucket set"""
    return PipelineConfig(output_bucket="test-json")


@pytest.fixture
def source_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def output_store(config) -> InMemoryObjectStore:
    """Output store hiding the invalid-partition namespace from listings"""
    return InMemoryObjectStore(excluded_prefixes=[config.invalid_prefix], page_size=2)


@pytest.fixture
def local_root(tmp_path) -> str:
    root = tmp_path / "storage"
    root.mkdir()
    return str(root)


@pytest.fixture
def local_output_store(local_root, config) -> LocalObjectStore:
    return LocalObjectStore(
        os.path.join(local_root, "test-json"),
        excluded_prefixes=[config.invalid_prefix],
        page_size=2,
    )


def partition_bytes(records: list) -> bytes:
    return json.dumps(records).encode("utf-8")


@pytest.fixture
def csv_builder():
    """Factory building CSV content from data rows"""
    return make_csv


@pytest.fixture
def partition_encoder():
    """Factory encoding records as a stored JSON partition"""
    return partition_bytes
