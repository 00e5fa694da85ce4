"""Date manipulation utilities"""

from datetime import date


def first_day_of_month(day: date) -> date:
    return day.replace(day=1)


def previous_month(day: date) -> tuple[int, int]:
    """Return (year, month) of the calendar month before the month of `day`"""
    if day.month == 1:
        return day.year - 1, 12
    return day.year, day.month - 1
