"""Tests for src/utils/date_utils.py"""

from datetime import date

import pytest

from src.utils.date_utils import (
    iter_dates,
    output_dir_name,
    parse_date_range,
    to_s3_date_prefix,
    today_utc,
    validate_date,
)


class TestParseDateRange:
    def test_single_date(self):
        assert parse_date_range(single_date='2025-10-28') == ('2025-10-28', '2025-10-28')

    def test_slash_format_is_normalised(self):
        assert parse_date_range('2025/10/27', '2025/10/31') == ('2025-10-27', '2025-10-31')

    def test_end_defaults_to_start(self):
        assert parse_date_range('2025-10-27') == ('2025-10-27', '2025-10-27')

    def test_defaults_to_today(self):
        today = today_utc()
        assert parse_date_range() == (today, today)

    def test_start_after_end(self):
        with pytest.raises(ValueError, match="before or equal"):
            parse_date_range('2025-10-31', '2025-10-27')

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="Invalid date format"):
            parse_date_range('28-10-2025')


def test_validate_date():
    validate_date('2025-10-28')
    validate_date('2025/10/28')
    with pytest.raises(ValueError):
        validate_date('2025.10.28')


def test_iter_dates_is_inclusive():
    days = iter_dates('2025-10-30', '2025/11/02')
    assert days == [date(2025, 10, 30), date(2025, 10, 31), date(2025, 11, 1), date(2025, 11, 2)]


def test_to_s3_date_prefix():
    assert to_s3_date_prefix(date(2025, 1, 5)) == '2025/01/05'


def test_output_dir_name():
    assert output_dir_name('2025-10-28', '2025/10/28') == '2025-10-28'
    assert output_dir_name('2025-10-27', '2025-10-31') == '2025-10-27_to_2025-10-31'
