"""
Pure reducers over enriched investments.

Totals never filter on status: matured and terminated investments still
count. Group helpers return groups in first-occurrence order; sorting is left
to the presentation layer (see `sort_breakdown`).
"""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from investdash.domain.portfolio.schemas.investments import EnrichedInvestment, InvestmentRecord
from investdash.domain.portfolio.schemas.products import ProductRecord
from investdash.domain.portfolio.schemas.projections import ProjectionRecord
from investdash.domain.portfolio.schemas.stats import (
    CategoryTotal,
    CurrencyTotal,
    PortfolioStats,
    YearlyProjectionRow,
)
from investdash.shared.enums import InvestmentStatus


I = TypeVar("I", bound=InvestmentRecord)
B = TypeVar("B", CategoryTotal, CurrencyTotal)


def total_invested_usd(investments: Iterable[InvestmentRecord]) -> float:
    return sum((inv.usd_equivalent for inv in investments), 0.0)


def active_count(investments: Iterable[InvestmentRecord]) -> int:
    return sum(1 for inv in investments if inv.status == InvestmentStatus.active)


def group_by_category(investments: Iterable[EnrichedInvestment]) -> dict[str, list[EnrichedInvestment]]:
    groups: dict[str, list[EnrichedInvestment]] = {}
    for inv in investments:
        groups.setdefault(inv.product.category, []).append(inv)
    return groups


def group_by_currency(investments: Iterable[I]) -> dict[str, list[I]]:
    groups: dict[str, list[I]] = {}
    for inv in investments:
        groups.setdefault(inv.currency, []).append(inv)
    return groups


def category_breakdown(investments: Iterable[EnrichedInvestment]) -> list[CategoryTotal]:
    return [
        CategoryTotal(category=category, total_usd=total_invested_usd(group), count=len(group))
        for category, group in group_by_category(investments).items()
    ]


def currency_breakdown(investments: Iterable[InvestmentRecord]) -> list[CurrencyTotal]:
    return [
        CurrencyTotal(currency=currency, total_usd=total_invested_usd(group), count=len(group))
        for currency, group in group_by_currency(investments).items()
    ]


def sort_breakdown(rows: Iterable[B]) -> list[B]:
    """Largest total first; ties keep their incoming order."""
    return sorted(rows, key=lambda row: row.total_usd, reverse=True)


def filter_by_category(investments: Iterable[EnrichedInvestment], category: str) -> list[EnrichedInvestment]:
    return [inv for inv in investments if inv.product.category == category]


def filter_by_currency(investments: Iterable[I], currency: str) -> list[I]:
    return [inv for inv in investments if inv.currency == currency]


def yearly_portfolio_projection(
    investments: Iterable[InvestmentRecord],
    get_projections: Callable[[str], Sequence[ProjectionRecord]],
) -> list[YearlyProjectionRow]:
    """
    Sum each year's projections across the portfolio.

    An investment without a row for some year adds nothing to that year.
    Duplicate (investment, year) rows are all summed.
    """
    totals: dict[int, dict[str, float]] = defaultdict(lambda: {"total_value": 0.0, "principal": 0.0, "yield": 0.0})
    for inv in investments:
        for proj in get_projections(inv.id):
            row = totals[proj.year]
            row["total_value"] += proj.total_value
            row["principal"] += proj.principal_amount
            row["yield"] += proj.yield_amount

    return [
        YearlyProjectionRow(year=year, total_value=row["total_value"], principal=row["principal"], yield_=row["yield"])
        for year, row in sorted(totals.items())
    ]


def window_years(rows: Iterable[YearlyProjectionRow], start: int, end: int) -> list[YearlyProjectionRow]:
    return [row for row in rows if start <= row.year <= end]


def total_expected_yield(investments: Iterable[EnrichedInvestment]) -> float:
    """
    Approximate portfolio yield: each investment contributes the yield of the
    last row of its (ascending) history, not a sum over years.
    """
    total = 0.0
    for inv in investments:
        if inv.performance_history:
            total += inv.performance_history[-1].yield_amount
    return total


def portfolio_stats(investments: Sequence[EnrichedInvestment]) -> PortfolioStats:
    return PortfolioStats(
        total_invested_usd=total_invested_usd(investments),
        total_expected_yield=total_expected_yield(investments),
        investment_count=len(investments),
        active_count=active_count(investments),
        category_breakdown=category_breakdown(investments),
        currency_breakdown=currency_breakdown(investments),
    )


def product_categories(products: Iterable[ProductRecord]) -> list[str]:
    return sorted({p.category for p in products})


def projection_year_range(projections: Iterable[ProjectionRecord]) -> tuple[int, int] | None:
    years = [p.year for p in projections]
    if not years:
        return None
    return min(years), max(years)
