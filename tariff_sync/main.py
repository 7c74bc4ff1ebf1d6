"""
WB Tariffs Sync - Main Entry Point

Command-line interface for the tariff pipeline.

Usage:
    python -m tariff_sync.main [--verbose] [--config PATH] COMMAND

Commands:
    serve                   Initial fetch + publish, then run on schedule
    fetch [--date DATE]     Fetch tariffs once (DATE as YYYY-MM-DD)
    publish                 Publish the latest tariffs to Google Sheets once
    register-sheet ID       Register a spreadsheet ID as a publish target
    init-db                 Create the tables if they do not exist
    wait-db                 Block until PostgreSQL accepts connections
    check-sheets            Verify Google credentials and access to the first sheet

Examples:
    # Run the service:
    python -m tariff_sync.main serve

    # Re-fetch a specific day with debug logging:
    python -m tariff_sync.main --verbose fetch --date 2026-10-01

Exit Codes:
    0: Success
    1: The job failed (or, for publish, at least one sheet failed)
    2: Fatal error (configuration, database schema, etc.)
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .config import PipelineConfig, load_config
from .jobs.fetch_tariffs import FetchTariffsJob
from .jobs.runner import JobRunner, JobStatus
from .jobs.scheduler import PipelineScheduler
from .jobs.update_sheets import UpdateSheetsJob
from .publisher_sheets.base import SheetsPublisher, SinkError
from .publisher_sheets.google_sheets import GoogleSheetsClient, build_sheets_client
from .source_extractor.adapters.wb_tariffs_adapter import WBTariffsAdapter
from .storage.db_operations import StorageError, TariffStorage

logger = logging.getLogger(__name__)


@dataclass
class Pipeline:
    """Wired components for one process."""

    config: PipelineConfig
    storage: TariffStorage
    fetch_job: FetchTariffsJob
    publish_job: UpdateSheetsJob
    runner: JobRunner
    sheets_client: Optional[GoogleSheetsClient] = None


def build_pipeline(config: PipelineConfig) -> Pipeline:
    """Construct every component from the configuration."""
    storage = TariffStorage(config.database_url)
    fetch_job = FetchTariffsJob(WBTariffsAdapter.from_config(config), storage)

    sheets_client = build_sheets_client(config.google_credentials)
    publisher = SheetsPublisher(sheets_client) if sheets_client else None
    publish_job = UpdateSheetsJob(storage, publisher, config.google_sheet_ids)

    return Pipeline(
        config=config,
        storage=storage,
        fetch_job=fetch_job,
        publish_job=publish_job,
        runner=JobRunner(fetch_job, publish_job),
        sheets_client=sheets_client,
    )


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Discovery cache warnings are noise with cache_discovery=False
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {value}") from err


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='Sync Wildberries box tariffs to PostgreSQL and Google Sheets',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--config', default=None, help='Path to pipeline YAML config')

    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('serve', help='Initial load, then run both jobs on schedule')

    fetch_parser = subparsers.add_parser('fetch', help='Fetch tariffs once')
    fetch_parser.add_argument('--date', type=_iso_date, default=None, dest='tariff_date',
                              help='Tariff date (YYYY-MM-DD), defaults to today')

    subparsers.add_parser('publish', help='Publish latest tariffs once')

    register_parser = subparsers.add_parser('register-sheet', help='Register a spreadsheet ID')
    register_parser.add_argument('sheet_id', help='Google spreadsheet ID')

    subparsers.add_parser('init-db', help='Create database tables')
    subparsers.add_parser('wait-db', help='Wait until the database accepts connections')
    subparsers.add_parser('check-sheets', help='Verify Google Sheets credentials and access')

    return parser.parse_args(argv)


def serve(pipeline: Pipeline) -> int:
    """Wait for the database, verify the schema, run both jobs once, then block on the scheduler."""
    pipeline.storage.wait_for_database()
    pipeline.storage.ensure_tables_exist()

    if not pipeline.config.google_sheet_ids:
        logger.warning("GOOGLE_SHEET_IDS is empty - only registered sheets will be updated")

    logger.info("Running initial data load")
    pipeline.runner.run_fetch()
    pipeline.runner.run_publish()
    logger.info("Initial data load finished")

    scheduler = PipelineScheduler(
        pipeline.runner,
        tariffs_cron=pipeline.config.tariffs_update_cron,
        sheets_cron=pipeline.config.sheets_update_cron,
        timezone=pipeline.config.timezone,
    )
    scheduler.schedule()
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.warning("Interrupted, shutting down scheduler")
        scheduler.shutdown(wait=False)
    return 0


def check_sheets(pipeline: Pipeline) -> int:
    """
    Verify the sheets client can be built and can read the first configured sheet.

    Returns:
        0 if credentials work (and the sheet is accessible when one is configured), else 1
    """
    client = pipeline.sheets_client
    if client is None:
        logger.error("Google Sheets client could not be created - check GOOGLE_CREDENTIALS")
        return 1

    logger.info("Google Sheets client created for %s", client.service_account_email)

    if not pipeline.config.google_sheet_ids:
        logger.warning("GOOGLE_SHEET_IDS is empty - no sheet to verify access to")
        return 0

    sheet_id = pipeline.config.google_sheet_ids[0]
    try:
        metadata = client.get_metadata(sheet_id)
    except SinkError as e:
        logger.error("Could not access sheet %s: %s", sheet_id, e, extra={"error_kind": e.kind})
        return 1

    logger.info('Successfully accessed sheet "%s"', (metadata or {}).get("properties", {}).get("title"))
    return 0


def run_command(args: argparse.Namespace, pipeline: Pipeline) -> int:
    if args.command == 'serve':
        return serve(pipeline)

    if args.command == 'fetch':
        status = pipeline.runner.run_fetch(tariff_date=args.tariff_date)
        return 0 if status == JobStatus.SUCCEEDED else 1

    if args.command == 'publish':
        results: list = []
        status = pipeline.runner.run_guarded(
            lambda: results.extend(pipeline.publish_job.run()),
            pipeline.runner.guards[pipeline.publish_job.name],
        )
        if status != JobStatus.SUCCEEDED:
            return 1
        return 0 if all(result.success for result in results) else 1

    if args.command == 'register-sheet':
        added = pipeline.storage.register_sheet(args.sheet_id)
        logger.info("Sheet %s %s", args.sheet_id, "registered" if added else "was already registered")
        return 0

    if args.command == 'init-db':
        pipeline.storage.init_schema()
        return 0

    if args.command == 'wait-db':
        pipeline.storage.wait_for_database()
        return 0

    if args.command == 'check-sheets':
        return check_sheets(pipeline)

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 = success, 1 = job failure, 2 = fatal error)
    """
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(args.config)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Configuration error: {e}")
        return 2

    try:
        pipeline = build_pipeline(config)
        return run_command(args, pipeline)
    except StorageError as e:
        logger.error(f"Database error: {e}")
        return 2
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
