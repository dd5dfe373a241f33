"""
Parking Normalizer - Domain Records
Immutable values passed between the stores, the aggregator and the driver.
"""

from dataclasses import dataclass
from datetime import datetime

from ..utils.hour_buckets import HourBucket, truncate_to_hour


@dataclass(frozen=True)
class Garage:
    """A garage as listed in the GARAGES table."""
    id: int
    name: str


@dataclass(frozen=True)
class RawSample:
    """
    One availability observation.

    timestamp is a timezone-aware civil datetime.
    """
    garage_id: int
    available: int
    capacity: int
    timestamp: datetime

    @property
    def bucket(self) -> HourBucket:
        return truncate_to_hour(self.timestamp)


@dataclass(frozen=True)
class NormalizedRecord:
    """
    Hourly average for one garage.

    timestamp is the civil 'YYYY-MM-DD HH:00:00' string of the hour.
    """
    garage_id: int
    available: int
    capacity: int
    timestamp: str

    @property
    def bucket(self) -> HourBucket:
        return truncate_to_hour(self.timestamp)

    def to_dict(self) -> dict:
        return {
            "garage_id": self.garage_id,
            "available": self.available,
            "capacity": self.capacity,
            "timestamp": self.timestamp,
        }
