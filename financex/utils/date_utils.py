"""Date manipulation utilities"""

import calendar
from datetime import date, datetime
from typing import Tuple


def as_date(value: date | datetime) -> date:
    """Drop the time-of-day component if there is one"""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month (leap-year aware)"""
    return calendar.monthrange(year, month)[1]


def same_month(day: date, reference: date) -> bool:
    return day.year == reference.year and day.month == reference.month


def add_months(year: int, month: int, months: int) -> Tuple[int, int]:
    """Shift a (year, month) pair by a number of months"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1
