"""
Pipeline configuration.

Configuration is an explicit structure handed to each component at
construction time. ``load_config`` layers defaults, an optional YAML file and
environment variables (in that order of precedence, lowest first).

Expected YAML format:
```yaml
pipeline:
  source_bucket: uploads
  output_bucket: sales-json
  invalid_prefix: Invalid/
  scan_prefix: ""
  summary_key: reports/summary.csv
  delete_source_after_processing: true
```
"""

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

from src.core.errors import ConfigurationError

# Environment variable -> config field
ENV_MAPPING = {
    "SOURCE_BUCKET": "source_bucket",
    "OUTPUT_BUCKET": "output_bucket",
    "INVALID_PREFIX": "invalid_prefix",
    "SCAN_PREFIX": "scan_prefix",
    "REPORT_BUCKET": "report_bucket",
    "SUMMARY_KEY": "summary_key",
    "DELETE_SOURCE_AFTER_PROCESSING": "delete_source_after_processing",
    "STORAGE_ROOT": "storage_root",
}

DEFAULT_INVALID_PREFIX = "Invalid/"
DEFAULT_SUMMARY_KEY = "reports/summary.csv"


class PipelineConfig(BaseModel):
    """
    Recognized pipeline options.

    Attributes:
        source_bucket: Bucket receiving uploaded CSV files
        output_bucket: Bucket receiving the JSON partitions (required for ingestion)
        invalid_prefix: Key prefix reserved for invalid partitions
        scan_prefix: Prefix scanned by the aggregation job ("" = everything)
        report_bucket: Bucket receiving the summary report (defaults to output_bucket)
        summary_key: Key of the summary report
        delete_source_after_processing: Retire the uploaded CSV once both partitions are committed
        storage_root: Filesystem root for the local object store
    """

    source_bucket: str = "uploads"
    output_bucket: str | None = None
    invalid_prefix: str = DEFAULT_INVALID_PREFIX
    scan_prefix: str = ""
    report_bucket: str | None = None
    summary_key: str = DEFAULT_SUMMARY_KEY
    delete_source_after_processing: bool = True
    storage_root: str = "./data"

    @field_validator("invalid_prefix")
    @classmethod
    def check_invalid_prefix(cls, v):
        """The invalid prefix must be a non-empty key namespace."""
        if not v or not v.strip():
            raise ValueError("invalid_prefix cannot be empty")
        return v

    @field_validator("summary_key")
    @classmethod
    def check_summary_key(cls, v):
        if not v or not v.strip():
            raise ValueError("summary_key cannot be empty")
        return v

    @property
    def effective_report_bucket(self) -> str | None:
        return self.report_bucket or self.output_bucket

    def require_output_bucket(self) -> str:
        """
        Return the output bucket or fail.

        Raises:
            ConfigurationError: If output_bucket is unset
        """
        if not self.output_bucket:
            raise ConfigurationError("output_bucket", "output bucket is not configured")
        return self.output_bucket

    def require_report_bucket(self) -> str:
        bucket = self.effective_report_bucket
        if not bucket:
            raise ConfigurationError("report_bucket", "report bucket is not configured")
        return bucket

    class Config:
        json_schema_extra = {
            "example": {
                "output_bucket": "sales-json",
                "invalid_prefix": "Invalid/",
                "scan_prefix": "",
                "report_bucket": "sales-reports",
                "summary_key": "reports/summary.csv",
                "delete_source_after_processing": True,
            }
        }


def _read_yaml(config_path: str | Path) -> dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError("config_path", f"configuration file not found: {config_path}")

    with open(path) as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError("config_path", f"invalid YAML: {e}") from e

    if not config:
        return {}
    if not isinstance(config, dict) or not isinstance(config.get("pipeline", {}), dict):
        raise ConfigurationError("config_path", "configuration file must contain a 'pipeline' mapping")

    return dict(config.get("pipeline") or {})


def _read_env(env: Mapping[str, str]) -> dict[str, Any]:
    values = {}
    for env_name, field_name in ENV_MAPPING.items():
        if env_name in env and env[env_name] != "":
            values[field_name] = env[env_name]
    return values


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    dotenv_path: str | Path | None = None,
) -> PipelineConfig:
    """
    Build a PipelineConfig from defaults, YAML and environment.

    Args:
        config_path: Optional YAML file with a ``pipeline`` section
        env: Environment mapping (defaults to os.environ)
        dotenv_path: Optional .env file loaded into os.environ first

    Returns:
        Validated PipelineConfig

    Raises:
        ConfigurationError: If the file is missing/malformed or values are invalid
    """
    if dotenv_path is not None:
        load_dotenv(dotenv_path, override=False)

    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(_read_yaml(config_path))
    values.update(_read_env(os.environ if env is None else env))

    try:
        return PipelineConfig(**values)
    except ValidationError as e:
        raise ConfigurationError("pipeline", str(e)) from e
