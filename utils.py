# oee_tracker/utils.py
"""Utility functions for OEE Tracker"""
from datetime import date, datetime, timedelta
from typing import Any, Optional, Tuple
import logging
import re

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_int(value: Any, default: int = 0) -> int:
    """
    Parse a possibly string-encoded integer such as "480" or "100 u/hr".

    Only the leading integer is read; anything unparseable yields the default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else default


def date_key(value: Any) -> str:
    """ISO 'YYYY-MM-DD' key for a date, datetime or ISO string"""
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)[:10]


def days_ago(days: int, now: Optional[datetime] = None) -> datetime:
    """Start of a trailing window of `days` days ending at `now`"""
    return (now or datetime.now()) - timedelta(days=days)


def parse_date_parameters(
    date_str: Optional[str] = None,
    week: Optional[str] = None,
    month: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None
) -> Tuple[Optional[date], Optional[date]]:
    """
    Resolve the various date selectors to an inclusive (start, end) range.

    Args:
        date_str: Single day 'YYYY-MM-DD'
        week: ISO week 'YYYY-Www'
        month: Month 'YYYY-MM'
        start_date: Range start 'YYYY-MM-DD'
        end_date: Range end 'YYYY-MM-DD'

    Returns:
        Tuple of (start, end) dates, (None, None) when nothing was selected
    """
    if start_date and end_date:
        return (datetime.strptime(start_date, '%Y-%m-%d').date(),
                datetime.strptime(end_date, '%Y-%m-%d').date())

    if date_str:
        day = datetime.strptime(date_str, '%Y-%m-%d').date()
        return day, day

    if week:
        match = re.match(r'^(\d{4})-W(\d{1,2})$', week)
        if match:
            year, week_num = int(match.group(1)), int(match.group(2))
            return date.fromisocalendar(year, week_num, 1), date.fromisocalendar(year, week_num, 7)
        logger.warning(f"Ignoring malformed week '{week}'")

    if month:
        year, month_num = map(int, month.split('-'))
        start = date(year, month_num, 1)
        end = (date(year + 1, 1, 1) if month_num == 12
               else date(year, month_num + 1, 1)) - timedelta(days=1)
        return start, end

    return None, None
