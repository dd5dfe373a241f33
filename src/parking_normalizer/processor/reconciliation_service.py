"""
Parking Normalizer - Reconciliation Service
Creates every missing row in NORMALIZED_PARKING_DATA for a range of hours.

Runs are idempotent: each (hour, garage) pair is checked before anything is
inserted, so re-running over the same range only fills gaps. The hour of
the latest raw sample is still accumulating and is never normalized by
full or recent-window runs.
"""

import time
from dataclasses import asdict, dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.repositories.normalized_repository import NormalizedRecordRepository
from ..database.repositories.raw_sample_repository import RawSampleRepository
from ..models.records import Garage
from ..utils.config import MIN_SAMPLES_PER_HOUR, RECENT_BACKTRACK_HOURS
from ..utils.hour_buckets import HourBucket, enumerate_range, truncate_to_hour
from ..utils.logger import (
    logger,
    log_insufficient_data,
    log_reconciliation_complete,
    log_reconciliation_error,
    log_reconciliation_start,
)
from ..utils.timezone import format_civil_timestamp
from .aggregator import aggregate
from .exceptions import InsufficientDataError


class RunMode(str, Enum):
    FULL = "full"
    RECENT = "recent"
    RANGE = "range"


@dataclass
class ReconciliationReport:
    """Counters for one reconciliation run."""
    mode: str
    range_start: str
    range_end: str
    garages: int = 0
    buckets_visited: int = 0
    records_inserted: int = 0
    existing_skipped: int = 0
    insufficient_skipped: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


class ReconciliationDriver:
    """
    Backfills hourly normalized records from raw samples.

    Modes:
    - run_full_backfill(): every hour from the earliest sample up to, but
      excluding, the hour of the latest sample
    - run_recent_window(): only the last backtrack_hours hours before the
      hour of the latest sample, so late samples are picked up
    - run_range(): an explicit [start, end) range; newest first when
      start is after end

    Processing is strictly sequential. A (garage, hour) with too few samples
    is skipped and left for a later run; any other error aborts the run.
    Each inserted record is committed immediately when the driver owns a
    session, so records stored before an abort survive it.
    """

    def __init__(
        self,
        session: Optional[AsyncSession] = None,
        raw_samples: Optional[RawSampleRepository] = None,
        normalized: Optional[NormalizedRecordRepository] = None,
        min_samples: Optional[int] = None,
        backtrack_hours: Optional[int] = None
    ):
        """
        Args:
            session: Async session shared by both repositories
            raw_samples: Raw sample repository (default: built from session)
            normalized: Normalized record repository (default: built from session)
            min_samples: Minimum samples per hour (default: MIN_SAMPLES_PER_HOUR)
            backtrack_hours: Recent window depth (default: RECENT_BACKTRACK_HOURS)
        """
        if session is None and (raw_samples is None or normalized is None):
            raise ValueError("Either a session or both repositories are required")

        self.session = session
        self.raw_samples = raw_samples or RawSampleRepository(session)
        self.normalized = normalized or NormalizedRecordRepository(session)
        self.min_samples = MIN_SAMPLES_PER_HOUR if min_samples is None else min_samples
        self.backtrack_hours = RECENT_BACKTRACK_HOURS if backtrack_hours is None else backtrack_hours

    async def run_full_backfill(self) -> ReconciliationReport:
        """Normalize every hour from the first sample up to the current hour (exclusive)."""
        lower = await self.raw_samples.min_timestamp()
        upper = await self.raw_samples.max_timestamp()
        logger.info(f"Full backfill: lower={format_civil_timestamp(lower)} upper={format_civil_timestamp(upper)}")

        return await self._reconcile(RunMode.FULL, truncate_to_hour(lower), truncate_to_hour(upper))

    async def run_recent_window(self) -> ReconciliationReport:
        """Re-check the last backtrack_hours hours before the current hour."""
        upper = await self.raw_samples.max_timestamp()
        start = truncate_to_hour(upper - timedelta(hours=self.backtrack_hours))

        return await self._reconcile(RunMode.RECENT, start, truncate_to_hour(upper))

    async def run_range(self, start: HourBucket, end: HourBucket) -> ReconciliationReport:
        """Normalize the explicit range [start, end)."""
        return await self._reconcile(RunMode.RANGE, start, end)

    async def _reconcile(self, mode: RunMode, start: HourBucket, end: HourBucket) -> ReconciliationReport:
        started = time.monotonic()
        report = ReconciliationReport(mode=mode.value, range_start=str(start), range_end=str(end))

        garages = await self.raw_samples.list_garages()
        report.garages = len(garages)
        log_reconciliation_start(mode.value, str(start), str(end), len(garages))

        for bucket in enumerate_range(start, end):
            report.buckets_visited += 1
            logger.debug(f"Reconciling {bucket}")
            for garage in garages:
                try:
                    await self._reconcile_one(garage, bucket, report)
                except Exception as e:
                    log_reconciliation_error(e, mode.value, bucket=str(bucket), garage_id=garage.id)
                    raise

        report.duration_seconds = round(time.monotonic() - started, 3)
        log_reconciliation_complete(
            mode.value,
            buckets_visited=report.buckets_visited,
            records_inserted=report.records_inserted,
            existing_skipped=report.existing_skipped,
            insufficient_skipped=report.insufficient_skipped,
            duration_seconds=report.duration_seconds,
        )
        return report

    async def _reconcile_one(self, garage: Garage, bucket: HourBucket, report: ReconciliationReport):
        if await self.normalized.exists(garage.id, bucket):
            report.existing_skipped += 1
            return

        samples = await self.raw_samples.samples_for(garage.id, bucket)
        try:
            record = aggregate(garage.id, bucket, samples, min_samples=self.min_samples)
        except InsufficientDataError as e:
            log_insufficient_data(garage.id, str(bucket), e.sample_count, e.min_samples)
            report.insufficient_skipped += 1
            return

        await self.normalized.put(record)
        # Committed per record, a later run resumes after the last insert
        if self.session is not None:
            await self.session.commit()
        report.records_inserted += 1
        logger.debug("Normalized record inserted", extra=record.to_dict())
