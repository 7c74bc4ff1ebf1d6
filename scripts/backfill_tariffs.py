"""
Backfill script to load tariffs for a range of dates.

This script:
1. Walks every day from --from to --to (inclusive, --to defaults to today)
2. Fetches that day's tariffs (same retry policy as the scheduled job)
3. Upserts them, one transaction per day

Usage:
    python scripts/backfill_tariffs.py --from 2026-10-01 [--to 2026-10-07] [--dry-run] [--verbose]

Options:
    --from DATE     First date to load (YYYY-MM-DD)
    --to DATE       Last date to load (default: today)
    --dry-run       Fetch and count tariffs without writing to database
    --verbose       Enable debug logging
"""

import argparse
import logging
import os
import sys
from datetime import date, timedelta

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Import after path modification
from tariff_sync.config import load_config  # noqa: E402
from tariff_sync.jobs.fetch_tariffs import FetchTariffsJob  # noqa: E402
from tariff_sync.main import configure_logging  # noqa: E402
from tariff_sync.source_extractor.adapters.wb_tariffs_adapter import WBTariffsAdapter  # noqa: E402
from tariff_sync.source_extractor.base import ProviderError  # noqa: E402
from tariff_sync.storage.db_operations import StorageError, TariffStorage  # noqa: E402

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Backfill tariffs for a date range",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--from", dest="date_from", type=date.fromisoformat, required=True)
    parser.add_argument("--to", dest="date_to", type=date.fromisoformat, default=None)
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and count tariffs without writing to database",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def iter_dates(date_from: date, date_to: date):
    current = date_from
    while current <= date_to:
        yield current
        current += timedelta(days=1)


class _CountingStorage:
    """Stand-in used by --dry-run: counts instead of writing."""

    def upsert_tariffs_batch(self, records) -> int:
        return len(records)


def main() -> int:
    args = parse_args()
    configure_logging(args.verbose)

    date_to = args.date_to or date.today()
    if args.date_from > date_to:
        logger.error("--from must not be after --to")
        return 2

    try:
        config = load_config()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    storage = _CountingStorage() if args.dry_run else TariffStorage(config.database_url)
    job = FetchTariffsJob(WBTariffsAdapter.from_config(config), storage)

    failed_dates = []
    total = 0
    for day in iter_dates(args.date_from, date_to):
        try:
            saved = job.run(tariff_date=day)
        except ProviderError as e:
            logger.error("Skipping %s: %s", day.isoformat(), e)
            failed_dates.append(day)
            continue
        except StorageError as e:
            logger.error(f"Database error: {e}")
            return 2
        total += saved

    logger.info(
        "%s %d tariffs for %s..%s",
        "Would save" if args.dry_run else "Saved",
        total,
        args.date_from.isoformat(),
        date_to.isoformat(),
        extra={"failed_dates": [d.isoformat() for d in failed_dates]},
    )
    return 1 if failed_dates else 0


if __name__ == "__main__":
    sys.exit(main())
