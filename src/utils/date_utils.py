"""
Date and time utility functions
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d")


def parse_datetime(date_str: str) -> datetime:
    """Parse YYYY-MM-DD or YYYY/MM/DD into a datetime."""
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            pass
    raise ValueError(
        f"Invalid date format: {date_str} "
        "(expected YYYY-MM-DD or YYYY/MM/DD, e.g. 2025-10-28 or 2025/10/28)"
    )


def validate_date(date_str: str) -> None:
    """Validate date format (supports YYYY-MM-DD or YYYY/MM/DD)."""
    parse_datetime(date_str)


def today_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def parse_date_range(start_date: Optional[str] = None,
                     end_date: Optional[str] = None,
                     single_date: Optional[str] = None) -> Tuple[str, str]:
    """
    Parse date range from arguments.

    Args:
        start_date: Start date in YYYY-MM-DD or YYYY/MM/DD format
        end_date: End date, defaults to start_date
        single_date: Single day to cover (overrides start/end)

    Returns:
        Tuple of (start_date, end_date) normalised to YYYY-MM-DD
    """
    if single_date:
        start_date = end_date = single_date

    if not start_date:
        start_date = end_date or today_utc()
    if not end_date:
        end_date = start_date

    start_dt = parse_datetime(start_date)
    end_dt = parse_datetime(end_date)

    if start_dt > end_dt:
        raise ValueError("Start date must be before or equal to end date")

    return (start_dt.strftime("%Y-%m-%d"), end_dt.strftime("%Y-%m-%d"))


def iter_dates(start_date: str, end_date: str) -> List[date]:
    """Inclusive list of days between start_date and end_date."""
    current = parse_datetime(start_date).date()
    last = parse_datetime(end_date).date()
    days = []
    while current <= last:
        days.append(current)
        current += timedelta(days=1)
    return days


def to_s3_date_prefix(day: date) -> str:
    """ALB log keys are partitioned as YYYY/MM/DD."""
    return day.strftime("%Y/%m/%d")


def output_dir_name(start_date: str, end_date: str) -> str:
    """Directory name for a downloaded range: a single day or 'start_to_end'."""
    start = parse_datetime(start_date).strftime("%Y-%m-%d")
    end = parse_datetime(end_date).strftime("%Y-%m-%d")
    if start == end:
        return start
    return f"{start}_to_{end}"
