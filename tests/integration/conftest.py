"""
Integration test fixtures and configuration.

Runs the repositories and the reconciliation driver against an in-memory
SQLite database through aiosqlite, with the same schema the MySQL
deployment uses.

Fixture Types:
- db: Fresh DatabaseConnection with all tables created
- session: One session from db.session_scope(), committed on exit
"""

from typing import Iterable, List, Tuple

import pytest_asyncio
from sqlalchemy import insert

from parking_normalizer.database.connection import DatabaseConnection
from parking_normalizer.models import GarageEntity, GarageMonitorData, NormalizedParkingData
from parking_normalizer.utils.timezone import civil_to_utc, parse_civil_timestamp

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db():
    database = DatabaseConnection(TEST_DATABASE_URL)
    await database.create_schema()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def session(db):
    async with db.session_scope() as session:
        yield session


# =============================================================================
# Data helpers
# =============================================================================

def utc(civil_timestamp: str):
    """Naive UTC datetime, as stored, for a civil 'YYYY-MM-DD HH:mm:ss' string."""
    return civil_to_utc(parse_civil_timestamp(civil_timestamp))


async def insert_garages(session, garages: Iterable[Tuple[int, str]]):
    await session.execute(
        insert(GarageEntity),
        [{"id": garage_id, "name": name} for garage_id, name in garages],
    )


async def insert_samples(session, samples: Iterable[Tuple[int, str, int, int]]):
    """Insert raw samples given as (garage_id, civil timestamp, available, capacity)."""
    await session.execute(
        insert(GarageMonitorData),
        [
            {"garage_id": garage_id, "timestamp": utc(ts), "available": available, "capacity": capacity}
            for garage_id, ts, available, capacity in samples
        ],
    )


def hour_of_samples(garage_id: int, bucket: str, availabilities: List[int],
                    capacity: int = 100) -> List[Tuple[int, str, int, int]]:
    """One sample every 10 minutes of a bucket, one per availability value."""
    return [
        (garage_id, f"{bucket}:{10 * i:02d}:00", available, capacity)
        for i, available in enumerate(availabilities)
    ]


async def insert_normalized(session, garage_id: int, civil_hour: str, available: int, capacity: int = 100):
    await session.execute(
        insert(NormalizedParkingData),
        [{"garage_id": garage_id, "timestamp": utc(civil_hour), "available": available, "capacity": capacity}],
    )
