"""Unit tests for date helpers"""

from datetime import date
from legal_collections.utils.date_utils import days_between, window_end


def test_window_end_counts_start_day():
    """Seven days starting Monday 2024-05-06 end on Sunday 2024-05-12"""
    assert window_end(date(2024, 5, 6), 7) == date(2024, 5, 12)


def test_single_day_window_ends_on_start():
    assert window_end(date(2024, 5, 6), 1) == date(2024, 5, 6)


def test_days_between_signed():
    assert days_between(date(2024, 5, 1), date(2024, 5, 11)) == 10
    assert days_between(date(2024, 5, 11), date(2024, 5, 1)) == -10
