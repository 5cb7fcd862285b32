"""Simple interest accrual for overdue instruments"""

from datetime import date
from legal_collections.utils.date_utils import days_between

DAYS_PER_YEAR = 365


def days_overdue(due_date: date, as_of: date) -> int:
    """Whole days past the due date, zero when not yet due"""
    return max(days_between(due_date, as_of), 0)


def is_overdue(due_date: date, as_of: date) -> bool:
    return due_date < as_of


def calculate_accrued_interest(principal: float, annual_rate: float, due_date: date, as_of: date) -> float:
    """
    Simple (non-compounding) interest accrued since the due date.

    accrued = principal * (annual_rate / 100) * (days_overdue / 365)

    Args:
        principal: Amount owed on the instrument
        annual_rate: Percent per annum, e.g. 5.0
        due_date: Date the instrument fell due
        as_of: Reference date, normally today

    Returns:
        Interest rounded to cents; 0.0 when the instrument is not overdue

    Example:
        1000.00 at 5% with 100 days overdue
        1000 * 0.05 * 100 / 365 = 13.70
    """
    days = days_overdue(due_date, as_of)
    if days == 0:
        return 0.0

    accrued = principal * (annual_rate / 100) * (days / DAYS_PER_YEAR)
    return round(accrued, 2)
