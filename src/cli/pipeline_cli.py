"""
Command-line interface for the sales pipeline.

Usage:
    python -m src.cli.pipeline_cli process --input <key> [options]
    python -m src.cli.pipeline_cli aggregate [options]
    python -m src.cli.pipeline_cli reprocess --name <batch name> [options]
"""

import argparse
import sys

from src.batch.aggregation import AggregationEngine
from src.batch.pipeline import IngestionPipeline
from src.batch.reprocess import InvalidPartitionReprocessor
from src.core.config import PipelineConfig, load_config
from src.core.errors import ConfigurationError, StorageError
from src.core.models import InvocationResult
from src.observability.logger import get_logger
from src.storage import open_bucket


logger = get_logger(__name__)


def build_config(args) -> PipelineConfig:
    """
    Load configuration and apply command-line overrides.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    config = load_config(config_path=args.config, dotenv_path=args.env_file)
    overrides = {}
    if args.storage_root:
        overrides["storage_root"] = args.storage_root
    if args.output_bucket:
        overrides["output_bucket"] = args.output_bucket
    if getattr(args, "keep_source", False):
        overrides["delete_source_after_processing"] = False
    return config.model_copy(update=overrides)


def process_command(config: PipelineConfig, args) -> InvocationResult:
    """Validate and partition one uploaded CSV."""
    output_bucket = config.require_output_bucket()
    pipeline = IngestionPipeline(
        source_store=open_bucket(config.storage_root, config.source_bucket),
        output_store=open_bucket(config.storage_root, output_bucket),
        config=config,
    )
    return pipeline.process_and_retire(args.input)


def aggregate_command(config: PipelineConfig, args) -> InvocationResult:
    """Recompute the summary report over every valid partition."""
    output_bucket = config.require_output_bucket()
    engine = AggregationEngine(
        store=open_bucket(config.storage_root, output_bucket, excluded_prefixes=[config.invalid_prefix]),
        config=config,
        report_store=open_bucket(config.storage_root, config.require_report_bucket()),
    )
    return engine.run()


def reprocess_command(config: PipelineConfig, args) -> InvocationResult:
    """Re-validate the invalid partition of one batch."""
    output_bucket = config.require_output_bucket()
    reprocessor = InvalidPartitionReprocessor(
        store=open_bucket(config.storage_root, output_bucket),
        config=config,
    )
    return reprocessor.reprocess(args.name)


COMMANDS = {
    "process": process_command,
    "aggregate": aggregate_command,
    "reprocess": reprocess_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sales CSV validation and aggregation pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate an uploaded file and split it into valid / invalid partitions
  python -m src.cli.pipeline_cli process --input sales-2024-01.csv --output-bucket sales-json

  # Keep the uploaded CSV after processing
  python -m src.cli.pipeline_cli process --input sales-2024-01.csv --keep-source

  # Recompute reports/summary.csv
  python -m src.cli.pipeline_cli aggregate --config config/pipeline.yaml

  # Re-validate Invalid/sales-2024-01-invalid.json
  python -m src.cli.pipeline_cli reprocess --name sales-2024-01
        """
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default=None,
        help="Path to pipeline YAML configuration"
    )
    common.add_argument(
        "--env-file",
        default=None,
        help="Optional .env file loaded before reading the environment"
    )
    common.add_argument(
        "--storage-root",
        default=None,
        help="Root directory of the local object store"
    )
    common.add_argument(
        "--output-bucket",
        default=None,
        help="Bucket receiving the JSON partitions"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser("process", parents=[common], help="Process an uploaded CSV")
    process_parser.add_argument(
        "--input",
        required=True,
        help="Key of the CSV in the source bucket"
    )
    process_parser.add_argument(
        "--keep-source",
        action="store_true",
        help="Do not delete the uploaded CSV after processing"
    )

    subparsers.add_parser("aggregate", parents=[common], help="Write the summary report")

    reprocess_parser = subparsers.add_parser("reprocess", parents=[common], help="Re-validate an invalid partition")
    reprocess_parser.add_argument(
        "--name",
        required=True,
        help="Batch name (uploaded key without .csv)"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = build_config(args)
        result = COMMANDS[args.command](config, args)
    except (ConfigurationError, StorageError) as e:
        result = InvocationResult.failure(str(e))

    print(result.model_dump_json(indent=2))

    if not result.succeeded:
        logger.error(f"{args.command} failed: {result.message}")
        return 1

    logger.info(f"{args.command} succeeded: {result.message}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
