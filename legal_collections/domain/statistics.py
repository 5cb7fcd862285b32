"""Portfolio statistics derived from aggregate totals"""

from legal_collections.domain.models import AggregateTotals, PortfolioStatistics


def calculate_recovery_percentage(pending_debt: float, total_recovered: float) -> float:
    """
    Share of total exposure already collected, as a percentage.

    recovery = recovered / (pending + recovered) * 100, rounded to 2 decimals.
    Returns 0.0 when there is no exposure at all.
    """
    exposure = pending_debt + total_recovered
    if exposure <= 0:
        return 0.0

    percentage = (total_recovered / exposure) * 100
    # Clamp float noise so the result stays within [0, 100]
    return round(min(max(percentage, 0.0), 100.0), 2)


def build_statistics(totals: AggregateTotals) -> PortfolioStatistics:
    """Main entry point: turn raw aggregates into the statistics snapshot"""
    pending = round(totals.pending_debt, 2)
    recovered = round(totals.total_recovered, 2)

    return PortfolioStatistics(
        total_debtors=totals.total_debtors,
        total_instruments=totals.total_instruments,
        pending_debt=pending,
        total_recovered=recovered,
        recovery_percentage=calculate_recovery_percentage(totals.pending_debt, totals.total_recovered),
        upcoming_due=totals.upcoming_due,
        overdue_count=totals.overdue_count,
    )
