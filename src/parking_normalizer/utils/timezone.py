"""
Parking Normalizer - Timezone Utilities
Converts between the UTC instants stored by the database and the civil
(wall-clock) timestamps all hour bucketing is done in.

The raw sample store records naive UTC datetimes. Everything above the
store-access boundary works with timezone-aware datetimes in CIVIL_TZ,
serialized as 'YYYY-MM-DD HH:mm:ss'.
"""

from datetime import datetime
from typing import Union
from zoneinfo import ZoneInfo

from .config import CIVIL_TIMEZONE

CIVIL_TZ = ZoneInfo(CIVIL_TIMEZONE)
UTC_TZ = ZoneInfo('UTC')

CIVIL_TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
CIVIL_DATEHOUR_FORMAT = '%Y-%m-%d %H'

Timestamp = Union[datetime, str]


def utc_to_civil(utc_datetime: datetime) -> datetime:
    """
    Convert a UTC datetime to civil time.

    Args:
        utc_datetime: A datetime in UTC; naive values are assumed to be UTC

    Returns:
        datetime: Timezone-aware datetime in CIVIL_TZ
    """
    if utc_datetime.tzinfo is None:
        utc_datetime = utc_datetime.replace(tzinfo=UTC_TZ)
    return utc_datetime.astimezone(CIVIL_TZ)


def civil_to_utc(civil_datetime: datetime) -> datetime:
    """
    Convert a civil datetime to a naive UTC datetime for database queries.

    Naive input is interpreted as wall-clock time in CIVIL_TZ.
    """
    if civil_datetime.tzinfo is None:
        civil_datetime = civil_datetime.replace(tzinfo=CIVIL_TZ)
    return civil_datetime.astimezone(UTC_TZ).replace(tzinfo=None)


def to_civil(timestamp: Timestamp) -> datetime:
    """
    Normalize a timestamp to an aware civil datetime.

    Accepts an aware datetime (any zone), a naive datetime (already civil),
    or a 'YYYY-MM-DD HH:mm:ss' civil string.
    """
    if isinstance(timestamp, str):
        return parse_civil_timestamp(timestamp)
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=CIVIL_TZ)
    return timestamp.astimezone(CIVIL_TZ)


def parse_civil_timestamp(value: str) -> datetime:
    """
    Parse a 'YYYY-MM-DD HH:mm:ss' civil string.

    Raises:
        ValueError: If the string does not have that shape
    """
    return datetime.strptime(value, CIVIL_TIMESTAMP_FORMAT).replace(tzinfo=CIVIL_TZ)


def format_civil_timestamp(timestamp: Timestamp) -> str:
    """Format a timestamp as 'YYYY-MM-DD HH:mm:ss' in civil time."""
    return to_civil(timestamp).strftime(CIVIL_TIMESTAMP_FORMAT)


def civil_to_unix(timestamp: Timestamp) -> int:
    """Unix timestamp (whole seconds) of a civil timestamp."""
    return int(to_civil(timestamp).timestamp())
