"""Unit tests for simple interest accrual"""

import pytest
from datetime import date, timedelta
from legal_collections.domain.interest import calculate_accrued_interest, days_overdue, is_overdue


def test_accrued_interest_hundred_days_overdue():
    """1000 at 5% for 100 days: 1000 * 0.05 * 100/365"""
    due = date(2024, 2, 1)
    as_of = due + timedelta(days=100)

    assert calculate_accrued_interest(1000.0, 5.0, due, as_of) == pytest.approx(13.70, abs=0.01)


def test_not_yet_due_accrues_nothing():
    due = date(2024, 6, 1)
    assert calculate_accrued_interest(1000.0, 5.0, due, date(2024, 5, 1)) == 0.0


def test_due_today_accrues_nothing():
    due = date(2024, 6, 1)
    assert not is_overdue(due, due)
    assert calculate_accrued_interest(1000.0, 5.0, due, due) == 0.0


def test_days_overdue_never_negative():
    assert days_overdue(date(2024, 6, 1), date(2024, 5, 1)) == 0
    assert days_overdue(date(2024, 6, 1), date(2024, 6, 11)) == 10


def test_accrual_is_monotonic_in_elapsed_days():
    """Later reference dates never yield less interest"""
    due = date(2023, 1, 1)
    values = [
        calculate_accrued_interest(2500.0, 12.5, due, due + timedelta(days=d))
        for d in range(0, 800, 37)
    ]

    assert values == sorted(values)
    assert values[0] == 0.0


def test_full_year_equals_annual_rate():
    due = date(2023, 1, 1)
    assert calculate_accrued_interest(1000.0, 10.0, due, due + timedelta(days=365)) == 100.0


def test_zero_rate_accrues_nothing():
    due = date(2023, 1, 1)
    assert calculate_accrued_interest(1000.0, 0.0, due, date(2024, 1, 1)) == 0.0
