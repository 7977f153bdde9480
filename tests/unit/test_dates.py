"""
Tests for the date helpers.

Covers spreadsheet serials, date tokens in free text, ISO formatting and
calendar-day differences.
"""
from datetime import date, datetime, timezone

import pytest

from buildtrack.utils.dates import (
    calendar_days_between,
    excel_serial_to_datetime,
    find_dates,
    format_display_date,
    to_iso_string,
    to_utc_datetime,
)


class TestExcelSerial:
    """Spreadsheet serial date decoding."""

    def test_serial_44927_is_new_year_2023(self):
        assert excel_serial_to_datetime(44927) == datetime(2023, 1, 1, tzinfo=timezone.utc)

    def test_fraction_keeps_time_of_day(self):
        assert excel_serial_to_datetime(44927.5) == datetime(2023, 1, 1, 12, tzinfo=timezone.utc)

    def test_numbers_are_treated_as_serials(self):
        assert to_utc_datetime(44928) == datetime(2023, 1, 2, tzinfo=timezone.utc)

    def test_bool_is_not_a_date(self):
        assert to_utc_datetime(True) is None


class TestToUtcDatetime:
    """Coercion of raw cell values."""

    def test_iso_string(self):
        assert to_utc_datetime('2024-01-10') == datetime(2024, 1, 10, tzinfo=timezone.utc)

    def test_naive_datetime_is_taken_as_utc(self):
        assert to_utc_datetime(datetime(2024, 5, 1, 8, 30)).tzinfo == timezone.utc

    def test_date_object(self):
        assert to_utc_datetime(date(2024, 2, 29)) == datetime(2024, 2, 29, tzinfo=timezone.utc)

    @pytest.mark.parametrize('value', [None, '', '   ', 'pending', 'March'])
    def test_unreadable_values(self, value):
        assert to_utc_datetime(value) is None


class TestFindDates:
    """Date tokens inside text lines."""

    def test_year_first_token(self):
        found = find_dates('Pour slab 2024-04-01')
        assert [parsed for _, parsed in found] == [datetime(2024, 4, 1, tzinfo=timezone.utc)]

    def test_day_first_is_preferred(self):
        _, parsed = find_dates('01/02/2024')[0]
        assert (parsed.month, parsed.day) == (2, 1)

    def test_month_first_when_day_first_is_impossible(self):
        _, parsed = find_dates('01/15/2024')[0]
        assert (parsed.month, parsed.day) == (1, 15)

    def test_two_digit_year(self):
        _, parsed = find_dates('5.6.24')[0]
        assert parsed == datetime(2024, 6, 5, tzinfo=timezone.utc)

    def test_time_of_day_suffix(self):
        found = find_dates('Framing 2024-01-08T09:00 2024-01-19T17:00')
        assert [parsed.day for _, parsed in found] == [8, 19]

    def test_longer_digit_run_is_not_a_token(self):
        assert find_dates('Ref 2024-01-081') == []

    def test_invalid_token_is_skipped(self):
        assert find_dates('Ref 45/45/2024') == []

    def test_order_of_appearance(self):
        found = find_dates('from 2024-03-01 to 10/03/2024')
        assert [parsed.day for _, parsed in found] == [1, 10]


class TestFormatting:
    """ISO output and display strings."""

    def test_iso_string_has_milliseconds_and_z(self):
        value = datetime(2024, 1, 1, 9, 5, 7, 123456, tzinfo=timezone.utc)
        assert to_iso_string(value) == '2024-01-01T09:05:07.123Z'

    def test_display_date(self):
        assert format_display_date('2024-01-05T00:00:00.000Z') == 'Jan 5, 2024'

    def test_display_date_missing(self):
        assert format_display_date(None) == '-'


class TestCalendarDaysBetween:
    """Whole-day differences."""

    def test_time_of_day_is_ignored(self):
        assert calendar_days_between('2024-01-10T23:00:00.000Z', '2024-01-11T01:00:00.000Z') == 1

    def test_negative_when_end_is_earlier(self):
        assert calendar_days_between('2024-01-10', '2024-01-07') == -3

    def test_unreadable_date_raises(self):
        with pytest.raises(ValueError):
            calendar_days_between('soon', '2024-01-07')
