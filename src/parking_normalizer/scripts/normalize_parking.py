#!/usr/bin/env python3
"""
Parking Normalizer - Normalization Script

Fills NORMALIZED_PARKING_DATA with one hourly average per garage per hour.
Meant to be triggered by an external scheduler; each invocation is a single
run to completion. Hours already normalized are skipped, so overlapping or
repeated runs only fill gaps.

Usage:
    parking-normalize [--mode {full,recent}] [--backtrack-hours N]
                      [--min-samples N] [--start "YYYY-MM-DD HH" --end "YYYY-MM-DD HH"]

Options:
    --mode              full: whole history; recent: last N hours (default: recent)
    --backtrack-hours   Hours re-checked by a recent run (default: RECENT_BACKTRACK_HOURS)
    --min-samples       Minimum samples per garage per hour (default: MIN_SAMPLES_PER_HOUR)
    --start / --end     Explicit bucket range [start, end); newest first if start > end

Cron example:
    5 * * * * parking-normalize --mode recent
    30 3 * * 0 parking-normalize --mode full
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from ..database.connection import DatabaseConnection
from ..processor.reconciliation_service import ReconciliationDriver, ReconciliationReport
from ..utils.hour_buckets import HourBucket
from ..utils.logger import logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Normalize raw parking samples into hourly averages'
    )
    parser.add_argument(
        '--mode',
        choices=['full', 'recent'],
        default='recent',
        help='full: backfill all history; recent: re-check the last few hours (default: recent)'
    )
    parser.add_argument(
        '--backtrack-hours',
        type=int,
        help='Hours re-checked by a recent run'
    )
    parser.add_argument(
        '--min-samples',
        type=int,
        help='Minimum raw samples required to normalize an hour'
    )
    parser.add_argument(
        '--start',
        type=HourBucket,
        help='First hour of an explicit range (YYYY-MM-DD HH, inclusive)'
    )
    parser.add_argument(
        '--end',
        type=HourBucket,
        help='End of an explicit range (YYYY-MM-DD HH, exclusive)'
    )

    args = parser.parse_args(argv)
    if (args.start is None) != (args.end is None):
        parser.error('--start and --end must be given together')
    if args.backtrack_hours is not None and args.backtrack_hours < 1:
        parser.error('--backtrack-hours must be at least 1')
    if args.min_samples is not None and args.min_samples < 1:
        parser.error('--min-samples must be at least 1')
    return args


async def run(args: argparse.Namespace, db: Optional[DatabaseConnection] = None) -> ReconciliationReport:
    """Execute one normalization run inside a single database session."""
    db = db or DatabaseConnection()
    try:
        async with db.session_scope() as session:
            driver = ReconciliationDriver(
                session,
                min_samples=args.min_samples,
                backtrack_hours=args.backtrack_hours,
            )
            if args.start is not None:
                return await driver.run_range(args.start, args.end)
            if args.mode == 'full':
                return await driver.run_full_backfill()
            return await driver.run_recent_window()
    finally:
        await db.close()


def _print_summary(report: ReconciliationReport):
    logger.info("Normalization run finished", extra=report.to_dict())
    logger.info("=" * 60)
    logger.info("NORMALIZATION SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Mode:                 {report.mode}")
    logger.info(f"Range:                [{report.range_start}, {report.range_end})")
    logger.info(f"Garages:              {report.garages}")
    logger.info(f"Hours visited:        {report.buckets_visited}")
    logger.info(f"Records inserted:     {report.records_inserted}")
    logger.info(f"Already normalized:   {report.existing_skipped}")
    logger.info(f"Insufficient data:    {report.insufficient_skipped}")
    logger.info("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        report = asyncio.run(run(args))
    except Exception as e:
        logger.error(f"Fatal error during normalization: {e}", exc_info=True)
        return 1

    _print_summary(report)
    return 0


if __name__ == '__main__':
    sys.exit(main())
