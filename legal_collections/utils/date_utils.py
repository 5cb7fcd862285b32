"""Date manipulation utilities"""

from datetime import date, timedelta


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end precedes start)"""
    return (end - start).days


def window_end(start: date, days: int) -> date:
    """Last day of an inclusive window of `days` days starting on start (7 days from Monday ends Sunday)"""
    return start + timedelta(days=days - 1)
