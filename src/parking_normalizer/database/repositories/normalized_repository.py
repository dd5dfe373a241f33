"""
Parking Normalizer - Normalized Record Repository
Keyed lookups and inserts against NORMALIZED_PARKING_DATA.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.orm_parking_data import NormalizedParkingData
from ...models.records import NormalizedRecord
from ...models.schemas import ParkingRowSchema, validate_row
from ...processor.exceptions import MalformedResultError
from ...utils.hour_buckets import HourBucket, truncate_to_hour
from ...utils.logger import log_database_error
from ...utils.timezone import utc_to_civil


class NormalizedRecordRepository:
    """
    Repository for hourly normalized records, keyed by (garage id, hour).

    put() inserts unconditionally. Callers must check exists() first;
    uniqueness is not enforced here, and two runs racing on the same
    key can both insert.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def exists(self, garage_id: int, bucket: HourBucket) -> bool:
        """
        Check whether a record is stored for the garage and hour.

        Sees records put earlier through the same session.
        """
        start_utc, _ = bucket.utc_range()
        stmt = (
            select(func.count())
            .select_from(NormalizedParkingData)
            .where(
                NormalizedParkingData.garage_id == garage_id,
                NormalizedParkingData.timestamp == start_utc,
            )
        )
        count = (await self.session.execute(stmt)).scalar_one()
        return count > 0

    async def exists_for_record(self, record: NormalizedRecord) -> bool:
        """Same as exists(), keyed by the record's garage and hour. Other fields are ignored."""
        return await self.exists(record.garage_id, record.bucket)

    async def get(self, garage_id: int, bucket: HourBucket) -> Optional[NormalizedRecord]:
        """
        Fetch the stored record for the garage and hour.

        Returns:
            The record, or None if absent

        Raises:
            MalformedResultError: If more than one row is stored for the key
        """
        start_utc, _ = bucket.utc_range()
        stmt = (
            select(
                NormalizedParkingData.garage_id.label("garage_id"),
                NormalizedParkingData.available.label("available"),
                NormalizedParkingData.capacity.label("capacity"),
                NormalizedParkingData.timestamp.label("timestamp"),
            )
            .where(
                NormalizedParkingData.garage_id == garage_id,
                NormalizedParkingData.timestamp == start_utc,
            )
        )
        rows = (await self.session.execute(stmt)).all()

        if not rows:
            return None
        if len(rows) > 1:
            raise MalformedResultError(
                f"{len(rows)} normalized records for garage {garage_id} at {bucket}",
                context="get normalized record",
            )

        validated = validate_row(ParkingRowSchema, rows[0]._mapping, "get normalized record")
        return NormalizedRecord(
            garage_id=validated.garage_id,
            available=validated.available,
            capacity=validated.capacity,
            timestamp=truncate_to_hour(utc_to_civil(validated.timestamp)).timestamp,
        )

    async def put(self, record: NormalizedRecord):
        """
        Insert a normalized record. Call exists() before calling this.

        The row is flushed immediately so later exists() calls in the same
        session see it.
        """
        start_utc, _ = record.bucket.utc_range()
        row = NormalizedParkingData(
            garage_id=record.garage_id,
            available=record.available,
            capacity=record.capacity,
            timestamp=start_utc,
        )
        try:
            self.session.add(row)
            await self.session.flush()
        except Exception as e:
            log_database_error(e, f"Failed to insert normalized record for garage {record.garage_id}")
            raise
