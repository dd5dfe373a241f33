"""
Parking Normalizer - Hourly Aggregator
Folds the raw samples of one (garage, hour) pair into a NormalizedRecord.
"""

from typing import Optional, Sequence

from ..models.records import NormalizedRecord, RawSample
from ..utils.config import MIN_SAMPLES_PER_HOUR
from ..utils.hour_buckets import HourBucket
from .exceptions import EmptyAggregationError, InsufficientDataError


def average_availability(samples: Sequence[RawSample]) -> int:
    """
    Floor of the mean availability.

    Raises:
        EmptyAggregationError: If samples is empty
    """
    if not samples:
        raise EmptyAggregationError("Cannot take average of empty sample list")
    return sum(sample.available for sample in samples) // len(samples)


def aggregate(
    garage_id: int,
    bucket: HourBucket,
    samples: Sequence[RawSample],
    min_samples: Optional[int] = None
) -> NormalizedRecord:
    """
    Normalize one garage's hour of samples into a single record.

    The normalization is the floor of the mean availability. Capacity is
    taken from the first sample as given; samples that disagree on
    capacity within the hour are not reconciled.

    Args:
        garage_id: Garage the samples belong to
        bucket: Hour the samples fall in
        samples: Raw samples for that garage and hour
        min_samples: Minimum sample count (default: MIN_SAMPLES_PER_HOUR)

    Returns:
        NormalizedRecord stamped 'YYYY-MM-DD HH:00:00'

    Raises:
        InsufficientDataError: When len(samples) < min_samples
        EmptyAggregationError: When samples is empty and min_samples is 0
    """
    if min_samples is None:
        min_samples = MIN_SAMPLES_PER_HOUR

    if len(samples) < min_samples:
        raise InsufficientDataError(
            garage_id=garage_id,
            bucket=str(bucket),
            sample_count=len(samples),
            min_samples=min_samples,
        )

    return NormalizedRecord(
        garage_id=garage_id,
        available=average_availability(samples),
        capacity=samples[0].capacity,
        timestamp=bucket.timestamp,
    )
