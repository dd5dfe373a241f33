"""
Parking Normalizer - Hour Bucket Utilities
Hour-aligned bucket keys and range enumeration. No I/O.

A bucket is a civil 'YYYY-MM-DD HH' key. Buckets step by wall-clock hour,
so the bucket space is exactly the set of keys a civil timestamp can be
truncated to. Around DST transitions this means:
- the repeated fall-back hour is a single bucket spanning two real hours
- the skipped spring-forward hour is a bucket with an empty UTC window
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator, Tuple

from .timezone import (
    CIVIL_DATEHOUR_FORMAT,
    CIVIL_TZ,
    Timestamp,
    civil_to_unix,
    civil_to_utc,
    to_civil,
)

ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True, order=True)
class HourBucket:
    """
    A civil date-hour such as '2023-05-01 14'.

    Equality and ordering follow the canonical key string, which sorts
    chronologically because the format is zero padded and most-significant
    field first.
    """
    key: str

    def __post_init__(self):
        try:
            parsed = datetime.strptime(self.key, CIVIL_DATEHOUR_FORMAT)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid hour bucket {self.key!r}, expected 'YYYY-MM-DD HH'") from e
        if parsed.strftime(CIVIL_DATEHOUR_FORMAT) != self.key:
            raise ValueError(f"Hour bucket {self.key!r} is not in canonical 'YYYY-MM-DD HH' form")

    def __str__(self) -> str:
        return self.key

    @classmethod
    def from_civil(cls, civil_start: datetime) -> 'HourBucket':
        """Build a bucket from a (naive or civil) datetime, ignoring minutes and seconds."""
        return cls(civil_start.strftime(CIVIL_DATEHOUR_FORMAT))

    @property
    def civil_start(self) -> datetime:
        """Naive wall-clock start of the hour."""
        return datetime.strptime(self.key, CIVIL_DATEHOUR_FORMAT)

    @property
    def start(self) -> datetime:
        """Timezone-aware civil start of the hour."""
        return self.civil_start.replace(tzinfo=CIVIL_TZ)

    @property
    def timestamp(self) -> str:
        """The bucket as a full civil timestamp, 'YYYY-MM-DD HH:00:00'."""
        return f"{self.key}:00:00"

    def utc_range(self) -> Tuple[datetime, datetime]:
        """
        Naive UTC window [start, end) covered by this bucket.

        Every instant whose civil time truncates to this bucket falls in
        the window.
        """
        return civil_to_utc(self.civil_start), civil_to_utc(self.civil_start + ONE_HOUR)

    def to_unix(self) -> int:
        """Unix timestamp of the start of the hour."""
        return civil_to_unix(self.start)

    def shift(self, hours: int) -> 'HourBucket':
        return HourBucket.from_civil(self.civil_start + timedelta(hours=hours))

    def next(self) -> 'HourBucket':
        return self.shift(1)

    def previous(self) -> 'HourBucket':
        return self.shift(-1)


def truncate_to_hour(timestamp: Timestamp) -> HourBucket:
    """
    Drop the minutes and seconds of a timestamp.

    Args:
        timestamp: Aware datetime, naive civil datetime, or
                   'YYYY-MM-DD HH:mm:ss' civil string

    Returns:
        HourBucket covering the timestamp
    """
    return HourBucket.from_civil(to_civil(timestamp))


def ceil_to_hour(timestamp: Timestamp) -> HourBucket:
    """
    Round up to the next hour in ALL cases.

    A timestamp already on the hour still moves to the following bucket;
    use truncate_to_hour() when idempotent rounding is needed. The hour
    skipped by a spring-forward transition is never returned.
    """
    bucket = truncate_to_hour(timestamp).next()
    while bucket.utc_range()[0] == bucket.utc_range()[1]:
        bucket = bucket.next()
    return bucket


def enumerate_range(start: HourBucket, end: HourBucket) -> Iterator[HourBucket]:
    """
    Lazily yield buckets from start (inclusive) to end (exclusive).

    Steps backward one hour at a time when start is after end, forward
    otherwise. Calling again with the same arguments yields the same
    sequence.
    """
    step = -1 if start > end else 1
    current = start
    while current != end:
        yield current
        current = current.shift(step)
