"""Tests for the date helpers used to key and display standups."""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import InvalidDateTimeError, UnknownTimezoneError
from app.utils.datefunctions import (
    combine_date_time_in_zone,
    format_utc_date,
    from_epoch_millis,
    offset_for_zone,
    parse_local_date_time,
    print_in_zone,
    time_to_live_for,
    to_epoch_millis,
    zero_utc,
)


def test_zero_utc_truncates_to_midnight():
    value = datetime(2020, 10, 20, 15, 8, 42, 123, tzinfo=timezone.utc)
    assert zero_utc(value) == datetime(2020, 10, 20, tzinfo=timezone.utc)


def test_zero_utc_is_idempotent():
    once = zero_utc(datetime(2021, 3, 14, 23, 59, tzinfo=timezone.utc))
    assert zero_utc(once) == once


def test_zero_utc_converts_other_zones_first():
    # 20:00 at UTC-7 is 03:00 the next day in UTC
    value = datetime(2020, 10, 20, 20, 0, tzinfo=timezone(timedelta(hours=-7)))
    assert zero_utc(value) == datetime(2020, 10, 21, tzinfo=timezone.utc)


def test_zero_utc_treats_naive_as_utc():
    assert zero_utc(datetime(2020, 10, 20, 5)) == datetime(
        2020, 10, 20, tzinfo=timezone.utc
    )


def test_time_to_live_is_one_day_after_standup_date():
    value = datetime(2020, 10, 20, 15, 8, tzinfo=timezone.utc)
    assert time_to_live_for(value) == datetime(2020, 10, 21, tzinfo=timezone.utc)


def test_epoch_millis_conversion():
    value = datetime(2020, 10, 20, 15, 8, tzinfo=timezone.utc)
    assert from_epoch_millis(to_epoch_millis(value)) == value


def test_combine_date_time_in_zone_denver():
    epoch_ms = combine_date_time_in_zone("2020-10-20", "09:08", "America/Denver")
    assert from_epoch_millis(epoch_ms) == datetime(
        2020, 10, 20, 15, 8, tzinfo=timezone.utc
    )


def test_combine_date_time_in_zone_honours_dst():
    # Denver is UTC-7 in January
    epoch_ms = combine_date_time_in_zone("2021-01-15", "09:00", "America/Denver")
    assert from_epoch_millis(epoch_ms).hour == 16


@pytest.mark.parametrize(
    "date_str, time_str",
    [
        ("2020-13-01", "09:00"),
        ("20-10-2020", "09:00"),
        ("2020-10-20", "9am"),
        ("", ""),
        ("2020-10-20", "9:8"),
        ("2020-1-5", "09:00"),
        ("2020-10-20", "09:08:00"),
        ("2020-10-20", "25:99"),
    ],
)
def test_combine_date_time_in_zone_rejects_malformed_input(date_str, time_str):
    with pytest.raises(InvalidDateTimeError):
        combine_date_time_in_zone(date_str, time_str, "America/Denver")


def test_combine_date_time_in_zone_rejects_unknown_zone():
    with pytest.raises(UnknownTimezoneError):
        combine_date_time_in_zone("2020-10-20", "09:08", "Mars/Olympus_Mons")


def test_parse_local_date_time_is_naive_wall_clock():
    assert parse_local_date_time("2020-10-20", "09:08") == datetime(2020, 10, 20, 9, 8)


def test_parse_local_date_time_rejects_missing_values():
    with pytest.raises(InvalidDateTimeError):
        parse_local_date_time(None, "09:08")


def test_offset_for_zone():
    summer = datetime(2020, 7, 1, tzinfo=timezone.utc)
    winter = datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert offset_for_zone("America/Denver", summer) == -360
    assert offset_for_zone("America/Denver", winter) == -420
    assert offset_for_zone("UTC", summer) == 0


def test_offset_for_zone_unknown():
    with pytest.raises(UnknownTimezoneError):
        offset_for_zone("Not/AZone")


def test_print_in_zone_named_zone():
    epoch_ms = to_epoch_millis(datetime(2020, 10, 20, 15, 8, tzinfo=timezone.utc))
    assert print_in_zone(epoch_ms, "America/Denver") == "10/20/2020 at 9:08 AM"


def test_print_in_zone_offset_minutes():
    epoch_ms = to_epoch_millis(datetime(2020, 10, 20, 15, 8, tzinfo=timezone.utc))
    assert print_in_zone(epoch_ms, 120) == "10/20/2020 at 5:08 PM"


def test_print_in_zone_midnight_and_noon():
    midnight = to_epoch_millis(datetime(2020, 1, 2, 0, 5, tzinfo=timezone.utc))
    noon = to_epoch_millis(datetime(2020, 1, 2, 12, 0, tzinfo=timezone.utc))
    assert print_in_zone(midnight, "UTC") == "1/2/2020 at 12:05 AM"
    assert print_in_zone(noon, "UTC") == "1/2/2020 at 12:00 PM"


def test_format_utc_date():
    epoch_ms = to_epoch_millis(datetime(2020, 3, 4, 23, 0, tzinfo=timezone.utc))
    assert format_utc_date(epoch_ms) == "3/4/2020"
