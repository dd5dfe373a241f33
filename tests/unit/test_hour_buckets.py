"""
Parking Normalizer - Hour Bucket Unit Tests

Tests:
- Canonical bucket keys and ordering
- truncate_to_hour() / ceil_to_hour() rounding rules
- enumerate_range() direction, bounds and restartability
- UTC windows around DST transitions
"""

from datetime import datetime

import pytest

from parking_normalizer.utils.hour_buckets import (
    HourBucket,
    ceil_to_hour,
    enumerate_range,
    truncate_to_hour,
)
from parking_normalizer.utils.timezone import CIVIL_TZ, UTC_TZ


def keys(buckets):
    return [str(b) for b in buckets]


class TestHourBucket:

    def test_equality_follows_key(self):
        assert HourBucket('2023-05-01 14') == HourBucket('2023-05-01 14')
        assert HourBucket('2023-05-01 14') != HourBucket('2023-05-01 15')
        assert len({HourBucket('2023-05-01 14'), HourBucket('2023-05-01 14')}) == 1

    def test_ordering_is_chronological(self):
        assert HourBucket('2023-05-01 09') < HourBucket('2023-05-01 10')
        assert HourBucket('2023-04-30 23') < HourBucket('2023-05-01 00')
        assert HourBucket('2022-12-31 23') < HourBucket('2023-01-01 00')

    @pytest.mark.parametrize('key', ['2023-05-01', '2023-05-01 14:00', '2023-5-1 9', 'garbage', '2023-05-01 24'])
    def test_rejects_non_canonical_keys(self, key):
        with pytest.raises(ValueError):
            HourBucket(key)

    def test_timestamp_appends_zero_minutes_and_seconds(self):
        assert HourBucket('2023-06-01 10').timestamp == '2023-06-01 10:00:00'

    def test_next_and_previous_cross_day_boundaries(self):
        assert HourBucket('2023-06-01 23').next() == HourBucket('2023-06-02 00')
        assert HourBucket('2023-06-01 00').previous() == HourBucket('2023-05-31 23')
        assert HourBucket('2023-12-31 23').next() == HourBucket('2024-01-01 00')

    def test_start_is_civil_and_aware(self):
        start = HourBucket('2023-06-01 10').start
        assert start.tzinfo is CIVIL_TZ
        assert (start.hour, start.minute, start.second) == (10, 0, 0)

    def test_utc_range_in_summer(self):
        # EDT is UTC-4
        start, end = HourBucket('2023-06-01 10').utc_range()
        assert start == datetime(2023, 6, 1, 14, 0)
        assert end == datetime(2023, 6, 1, 15, 0)
        assert start.tzinfo is None

    def test_utc_range_in_winter(self):
        # EST is UTC-5
        start, end = HourBucket('2023-01-15 10').utc_range()
        assert start == datetime(2023, 1, 15, 15, 0)
        assert end == datetime(2023, 1, 15, 16, 0)

    def test_repeated_fall_back_hour_spans_two_real_hours(self):
        start, end = HourBucket('2023-11-05 01').utc_range()
        assert start == datetime(2023, 11, 5, 5, 0)
        assert end == datetime(2023, 11, 5, 7, 0)

    def test_skipped_spring_forward_hour_is_empty(self):
        start, end = HourBucket('2023-03-12 02').utc_range()
        assert start == end

    def test_to_unix(self):
        # 2023-06-01 10:00 EDT == 14:00 UTC
        expected = int(datetime(2023, 6, 1, 14, tzinfo=UTC_TZ).timestamp())
        assert HourBucket('2023-06-01 10').to_unix() == expected


class TestTruncateToHour:

    def test_drops_minutes_and_seconds_from_string(self):
        assert truncate_to_hour('2023-06-01 14:30:59') == HourBucket('2023-06-01 14')

    def test_exact_hour_is_unchanged(self):
        assert truncate_to_hour('2023-06-01 14:00:00') == HourBucket('2023-06-01 14')

    def test_converts_aware_datetimes_to_civil_time(self):
        utc = datetime(2023, 6, 1, 18, 45, tzinfo=UTC_TZ)
        assert truncate_to_hour(utc) == HourBucket('2023-06-01 14')

    def test_naive_datetimes_are_civil(self):
        assert truncate_to_hour(datetime(2023, 6, 1, 14, 45)) == HourBucket('2023-06-01 14')

    def test_is_idempotent(self):
        bucket = truncate_to_hour('2023-06-01 14:30:00')
        assert truncate_to_hour(bucket.start) == bucket


class TestCeilToHour:

    def test_rounds_up_mid_hour(self):
        assert ceil_to_hour('2023-06-01 14:30:00') == HourBucket('2023-06-01 15')

    def test_rounds_up_even_on_exact_hour(self):
        assert ceil_to_hour('2023-06-01 14:00:00') == HourBucket('2023-06-01 15')

    def test_rounds_up_across_midnight(self):
        assert ceil_to_hour('2023-06-01 23:59:59') == HourBucket('2023-06-02 00')

    def test_skips_spring_forward_gap(self):
        # 02:00-03:00 does not exist on 2023-03-12 in New York
        assert ceil_to_hour('2023-03-12 01:30:00') == HourBucket('2023-03-12 03')

    def test_fall_back_hour_rounds_up_once(self):
        assert ceil_to_hour('2023-11-05 01:30:00') == HourBucket('2023-11-05 02')


class TestEnumerateRange:

    def test_forward_is_start_inclusive_end_exclusive(self):
        buckets = enumerate_range(HourBucket('2023-06-01 11'), HourBucket('2023-06-01 14'))
        assert keys(buckets) == ['2023-06-01 11', '2023-06-01 12', '2023-06-01 13']

    def test_backward_when_start_is_after_end(self):
        buckets = enumerate_range(HourBucket('2023-06-01 14'), HourBucket('2023-06-01 11'))
        assert keys(buckets) == ['2023-06-01 14', '2023-06-01 13', '2023-06-01 12']

    def test_empty_when_start_equals_end(self):
        assert list(enumerate_range(HourBucket('2023-06-01 11'), HourBucket('2023-06-01 11'))) == []

    def test_is_lazy(self):
        buckets = enumerate_range(HourBucket('2000-01-01 00'), HourBucket('2100-01-01 00'))
        assert next(buckets) == HourBucket('2000-01-01 00')
        assert next(buckets) == HourBucket('2000-01-01 01')

    def test_is_restartable(self):
        start, end = HourBucket('2023-06-01 22'), HourBucket('2023-06-02 03')
        assert list(enumerate_range(start, end)) == list(enumerate_range(start, end))

    def test_crosses_day_boundary(self):
        buckets = enumerate_range(HourBucket('2023-06-01 22'), HourBucket('2023-06-02 01'))
        assert keys(buckets) == ['2023-06-01 22', '2023-06-01 23', '2023-06-02 00']

    @pytest.mark.parametrize('a, b', [
        ('2023-06-01 11', '2023-06-01 14'),
        ('2023-06-01 11', '2023-06-01 12'),
        ('2023-06-03 05', '2023-06-01 20'),
    ])
    def test_reverse_direction_is_mirror_image(self, a, b):
        a, b = HourBucket(a), HourBucket(b)
        step = 1 if a < b else -1
        forward = list(enumerate_range(a, b))
        backward = list(enumerate_range(b, a))
        assert forward == [bucket.shift(-step) for bucket in reversed(backward)]

    def test_fall_back_day_has_24_buckets(self):
        buckets = list(enumerate_range(HourBucket('2023-11-05 00'), HourBucket('2023-11-06 00')))
        assert len(buckets) == 24
        assert len(set(buckets)) == 24
