"""
Parking Normalizer - pytest Configuration and Fixtures

Provides shared test fixtures for:
- Sample data objects (garages, raw samples)
- In-memory fakes of the two stores used by the reconciliation driver

Note: Database fixtures are in tests/integration/conftest.py
"""

from datetime import datetime
from typing import Dict, List, Tuple

import pytest

from parking_normalizer.models.records import Garage, NormalizedRecord, RawSample
from parking_normalizer.processor.exceptions import EmptyDatasetError
from parking_normalizer.utils.hour_buckets import HourBucket, truncate_to_hour
from parking_normalizer.utils.timezone import parse_civil_timestamp


def make_sample(garage_id: int, timestamp: str, available: int, capacity: int = 100) -> RawSample:
    """Build a RawSample from a civil 'YYYY-MM-DD HH:mm:ss' string."""
    return RawSample(
        garage_id=garage_id,
        available=available,
        capacity=capacity,
        timestamp=parse_civil_timestamp(timestamp),
    )


def make_hour(garage_id: int, bucket: str, availabilities: List[int], capacity: int = 100) -> List[RawSample]:
    """One sample every 10 minutes of a bucket, one per availability value."""
    return [
        make_sample(garage_id, f"{bucket}:{10 * i:02d}:00", available, capacity)
        for i, available in enumerate(availabilities)
    ]


# ============================================================================
# In-memory store fakes
# ============================================================================

class FakeRawSampleStore:
    """Stands in for RawSampleRepository."""

    def __init__(self, garages: List[Garage], samples: List[RawSample]):
        self.garages = garages
        self.samples = samples
        self.samples_for_calls: List[Tuple[int, HourBucket]] = []

    async def min_timestamp(self) -> datetime:
        if not self.samples:
            raise EmptyDatasetError("no samples")
        return min(s.timestamp for s in self.samples)

    async def max_timestamp(self) -> datetime:
        if not self.samples:
            raise EmptyDatasetError("no samples")
        return max(s.timestamp for s in self.samples)

    async def list_garages(self) -> List[Garage]:
        return list(self.garages)

    async def samples_for(self, garage_id: int, bucket: HourBucket) -> List[RawSample]:
        self.samples_for_calls.append((garage_id, bucket))
        return [
            s for s in sorted(self.samples, key=lambda s: s.timestamp)
            if s.garage_id == garage_id and truncate_to_hour(s.timestamp) == bucket
        ]


class FakeNormalizedStore:
    """Stands in for NormalizedRecordRepository. Keeps every put, duplicates included."""

    def __init__(self):
        self.records: List[NormalizedRecord] = []

    @property
    def by_key(self) -> Dict[Tuple[int, str], NormalizedRecord]:
        return {(r.garage_id, r.timestamp): r for r in self.records}

    async def exists(self, garage_id: int, bucket: HourBucket) -> bool:
        return any(r.garage_id == garage_id and r.bucket == bucket for r in self.records)

    async def put(self, record: NormalizedRecord):
        self.records.append(record)


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_garages() -> List[Garage]:
    return [
        Garage(id=1, name='Fourth Street Garage'),
        Garage(id=7, name='Seventh Street Garage'),
    ]


@pytest.fixture
def sample_samples() -> List[RawSample]:
    """
    Samples for garages 1 and 7 between 10:00 and 13:05 on 2023-06-01.

    - 10: both garages have 5 samples
    - 11: garage 1 has 5 samples, garage 7 only 2
    - 12: both garages have 6 samples
    - 13: the still-accumulating hour of the latest sample
    """
    return (
        make_hour(1, '2023-06-01 10', [10, 12, 14, 16, 18])
        + make_hour(7, '2023-06-01 10', [3, 4, 4, 5, 5])
        + make_hour(1, '2023-06-01 11', [20, 20, 21, 21, 22])
        + make_hour(7, '2023-06-01 11', [9, 9])
        + make_hour(1, '2023-06-01 12', [1, 2, 3, 4, 5, 6])
        + make_hour(7, '2023-06-01 12', [50, 50, 50, 50, 50, 51])
        + make_hour(1, '2023-06-01 13', [7, 7, 7, 7, 7, 7])
    )


@pytest.fixture
def raw_store(sample_garages, sample_samples) -> FakeRawSampleStore:
    return FakeRawSampleStore(sample_garages, sample_samples)


@pytest.fixture
def normalized_store() -> FakeNormalizedStore:
    return FakeNormalizedStore()
