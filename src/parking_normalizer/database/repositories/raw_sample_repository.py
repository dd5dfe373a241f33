"""
Parking Normalizer - Raw Sample Repository
Read-only access to GARAGES and GARAGE_MONITOR_DATA.
"""

from datetime import datetime
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.orm_garage import GarageEntity
from ...models.orm_parking_data import GarageMonitorData
from ...models.records import Garage, RawSample
from ...models.schemas import GarageRowSchema, ParkingRowSchema, TimestampRowSchema, validate_row
from ...processor.exceptions import EmptyDatasetError
from ...utils.hour_buckets import HourBucket
from ...utils.timezone import utc_to_civil

_SAMPLE_COLUMNS = (
    GarageMonitorData.garage_id.label("garage_id"),
    GarageMonitorData.available.label("available"),
    GarageMonitorData.capacity.label("capacity"),
    GarageMonitorData.timestamp.label("timestamp"),
)


class RawSampleRepository:
    """
    Repository for raw availability samples.

    Implements:
    - Overall time span of the dataset (min/max timestamp)
    - Garage listing
    - Per-garage and all-garage samples for one hour bucket
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def min_timestamp(self) -> datetime:
        """
        Earliest sample timestamp across all garages, in civil time.

        Raises:
            EmptyDatasetError: If there are no samples
        """
        return await self._timestamp_bound(func.min(GarageMonitorData.timestamp), "min timestamp")

    async def max_timestamp(self) -> datetime:
        """
        Latest sample timestamp across all garages, in civil time.

        Raises:
            EmptyDatasetError: If there are no samples
        """
        return await self._timestamp_bound(func.max(GarageMonitorData.timestamp), "max timestamp")

    async def _timestamp_bound(self, aggregate, context: str) -> datetime:
        stmt = select(aggregate.label("timestamp"))
        row = (await self.session.execute(stmt)).one()

        # MIN/MAX over an empty table yields a single NULL row
        if row.timestamp is None:
            raise EmptyDatasetError("GARAGE_MONITOR_DATA holds no samples")

        validated = validate_row(TimestampRowSchema, row._mapping, context)
        return utc_to_civil(validated.timestamp)

    async def list_garages(self) -> List[Garage]:
        """All known garages, ordered by id. May be empty."""
        stmt = (
            select(GarageEntity.id.label("id"), GarageEntity.name.label("name"))
            .order_by(GarageEntity.id)
        )
        result = await self.session.execute(stmt)
        garages = []
        for row in result:
            validated = validate_row(GarageRowSchema, row._mapping, "list garages")
            garages.append(Garage(id=validated.id, name=validated.name))
        return garages

    async def samples_for(self, garage_id: int, bucket: HourBucket) -> List[RawSample]:
        """
        All samples of one garage whose civil time truncates to bucket.

        Args:
            garage_id: A valid id from GARAGES
            bucket: Hour to fetch

        Returns:
            Samples ordered by timestamp; empty if there are none
        """
        start_utc, end_utc = bucket.utc_range()
        stmt = (
            select(*_SAMPLE_COLUMNS)
            .where(
                GarageMonitorData.garage_id == garage_id,
                GarageMonitorData.timestamp >= start_utc,
                GarageMonitorData.timestamp < end_utc,
            )
            .order_by(GarageMonitorData.timestamp, GarageMonitorData.id)
        )
        return await self._fetch_samples(stmt, f"samples for garage {garage_id} at {bucket}")

    async def samples_for_all_garages(self, bucket: HourBucket) -> List[RawSample]:
        """All samples of every garage within one hour bucket, ordered by garage then time."""
        start_utc, end_utc = bucket.utc_range()
        stmt = (
            select(*_SAMPLE_COLUMNS)
            .where(
                GarageMonitorData.timestamp >= start_utc,
                GarageMonitorData.timestamp < end_utc,
            )
            .order_by(GarageMonitorData.garage_id, GarageMonitorData.timestamp, GarageMonitorData.id)
        )
        return await self._fetch_samples(stmt, f"samples for all garages at {bucket}")

    async def _fetch_samples(self, stmt, context: str) -> List[RawSample]:
        result = await self.session.execute(stmt)
        samples = []
        for row in result:
            validated = validate_row(ParkingRowSchema, row._mapping, context)
            samples.append(RawSample(
                garage_id=validated.garage_id,
                available=validated.available,
                capacity=validated.capacity,
                timestamp=utc_to_civil(validated.timestamp),
            ))
        return samples
