from __future__ import annotations

import datetime as dt
import random

import pytest

from investdash.domain.portfolio.schemas.investments import EnrichedInvestment
from investdash.domain.portfolio.schemas.products import ProductRecord
from investdash.domain.portfolio.schemas.projections import ProjectionRecord
from investdash.domain.portfolio.services import aggregation
from investdash.domain.portfolio.services.enrichment import enrich_investments
from investdash.shared.enums import InvestmentStatus


def _proj(investment_id: str, year: int, principal: float, yield_amount: float, suffix: str = "") -> ProjectionRecord:
    return ProjectionRecord(
        id=f"{investment_id}-{year}{suffix}",
        investment_id=investment_id,
        year=year,
        principal_amount=principal,
        yield_amount=yield_amount,
        total_value=principal + yield_amount,
    )


def _enriched(
    investment_id: str,
    *,
    category: str,
    usd: float,
    currency: str = "USD",
    status: InvestmentStatus = InvestmentStatus.active,
    history: list[ProjectionRecord] | None = None,
) -> EnrichedInvestment:
    return EnrichedInvestment(
        id=investment_id,
        user_id="user-1",
        product_id=f"prod-{category}",
        amount_invested=usd,
        currency=currency,
        usd_equivalent=usd,
        investment_date=dt.date(2024, 1, 1),
        status=status,
        contract_pdf="https://example.com/c.pdf",
        product=ProductRecord(id=f"prod-{category}", category=category, investment_company="Co"),
        performance_history=history,
    )


def test_totals_of_empty_portfolio_are_zero():
    stats = aggregation.portfolio_stats([])

    assert stats.total_invested_usd == 0
    assert stats.total_expected_yield == 0
    assert stats.investment_count == 0
    assert stats.active_count == 0
    assert stats.category_breakdown == []
    assert stats.currency_breakdown == []


def test_loan_notes_and_reit_scenario():
    portfolio = [
        _enriched("inv-1", category="Loan Notes", usd=40000),
        _enriched("inv-3", category="REIT", usd=33000),
    ]

    assert aggregation.total_invested_usd(portfolio) == 73000
    assert {(row.category, row.total_usd, row.count) for row in aggregation.category_breakdown(portfolio)} == {
        ("Loan Notes", 40000, 1),
        ("REIT", 33000, 1),
    }


def test_total_is_independent_of_order():
    portfolio = [
        _enriched("a", category="Gold", usd=1234.5),
        _enriched("b", category="REIT", usd=0.25),
        _enriched("c", category="Private Equity", usd=98765.125),
        _enriched("d", category="Gold", usd=17),
    ]
    expected = aggregation.total_invested_usd(portfolio)

    assert aggregation.total_invested_usd(list(reversed(portfolio))) == pytest.approx(expected)
    for seed in range(5):
        shuffled = list(portfolio)
        random.Random(seed).shuffle(shuffled)
        assert aggregation.total_invested_usd(shuffled) == pytest.approx(expected)


def test_category_breakdown_is_repeatable():
    portfolio = [
        _enriched("a", category="Gold", usd=10),
        _enriched("b", category="REIT", usd=20),
        _enriched("c", category="Gold", usd=30),
    ]

    def as_set(rows):
        return {(row.category, row.total_usd, row.count) for row in rows}

    assert as_set(aggregation.category_breakdown(portfolio)) == as_set(aggregation.category_breakdown(portfolio))


def test_two_categories_scenario():
    portfolio = [
        _enriched("a", category="Gold", usd=100),
        _enriched("b", category="Gold", usd=50),
        _enriched("c", category="REIT", usd=200),
    ]

    breakdown = aggregation.category_breakdown(portfolio)

    assert [(row.category, row.total_usd, row.count) for row in breakdown] == [
        ("Gold", 150, 2),
        ("REIT", 200, 1),
    ]
    assert aggregation.total_invested_usd(portfolio) == 350
    assert [row.category for row in aggregation.sort_breakdown(breakdown)] == ["REIT", "Gold"]


def test_category_groups_partition_the_portfolio():
    portfolio = [
        _enriched("a", category="Gold", usd=10),
        _enriched("b", category="REIT", usd=20),
        _enriched("c", category="Gold", usd=30),
        _enriched("d", category="Private Equity", usd=40),
    ]

    groups = aggregation.group_by_category(portfolio)

    assert sum(len(g) for g in groups.values()) == len(portfolio)
    assert sum(row.total_usd for row in aggregation.category_breakdown(portfolio)) == aggregation.total_invested_usd(
        portfolio
    )
    for category, members in groups.items():
        assert all(inv.product.category == category for inv in members)
        assert members == aggregation.filter_by_category(portfolio, category)


def test_currency_breakdown_uses_usd_equivalent():
    portfolio = [
        _enriched("a", category="Gold", usd=120, currency="GBP"),
        _enriched("b", category="Gold", usd=100, currency="USD"),
        _enriched("c", category="REIT", usd=60, currency="GBP"),
    ]

    rows = aggregation.currency_breakdown(portfolio)

    assert [(r.currency, r.total_usd, r.count) for r in rows] == [("GBP", 180, 2), ("USD", 100, 1)]
    assert [inv.id for inv in aggregation.filter_by_currency(portfolio, "GBP")] == ["a", "c"]


def test_status_does_not_affect_totals():
    portfolio = [
        _enriched("a", category="Gold", usd=100),
        _enriched("b", category="Gold", usd=100, status=InvestmentStatus.matured),
        _enriched("c", category="Gold", usd=100, status=InvestmentStatus.terminated),
    ]

    assert aggregation.total_invested_usd(portfolio) == 300
    assert aggregation.active_count(portfolio) == 1


def test_expected_yield_takes_last_year_only():
    portfolio = [
        _enriched("a", category="Gold", usd=100, history=[_proj("a", 2025, 0, 2000), _proj("a", 2026, 40000, 4000)]),
        _enriched("b", category="Gold", usd=100, history=[]),
        _enriched("c", category="Gold", usd=100, history=None),
    ]

    assert aggregation.total_expected_yield(portfolio) == 4000


def test_yearly_projection_sums_by_year_and_sorts():
    histories = {
        "a": [_proj("a", 2026, 40000, 4000), _proj("a", 2025, 0, 2000)],
        "b": [_proj("b", 2025, 0, 3500)],
    }
    portfolio = [_enriched("a", category="Gold", usd=1), _enriched("b", category="Gold", usd=1)]

    rows = aggregation.yearly_portfolio_projection(portfolio, lambda inv_id: histories.get(inv_id, []))

    assert [(r.year, r.total_value, r.principal, r.yield_) for r in rows] == [
        (2025, 5500, 0, 5500),
        (2026, 44000, 40000, 4000),
    ]
    assert rows[0].model_dump(by_alias=True)["yield"] == 5500


def test_yearly_projection_sums_duplicate_rows():
    histories = {"a": [_proj("a", 2025, 100, 10), _proj("a", 2025, 100, 10, suffix="-dup")]}

    rows = aggregation.yearly_portfolio_projection(
        [_enriched("a", category="Gold", usd=1)], lambda inv_id: histories[inv_id]
    )

    assert len(rows) == 1
    assert rows[0].total_value == 220


def test_window_years_is_inclusive():
    histories = {"a": [_proj("a", y, 0, 1) for y in (2024, 2025, 2029, 2030)]}
    rows = aggregation.yearly_portfolio_projection(
        [_enriched("a", category="Gold", usd=1)], lambda inv_id: histories[inv_id]
    )

    assert [r.year for r in aggregation.window_years(rows, 2025, 2029)] == [2025, 2029]


def test_product_categories_and_year_range():
    products = [
        ProductRecord(id="1", category="REIT", investment_company="A"),
        ProductRecord(id="2", category="Gold", investment_company="B"),
        ProductRecord(id="3", category="Gold", investment_company="C"),
    ]

    assert aggregation.product_categories(products) == ["Gold", "REIT"]
    assert aggregation.projection_year_range([_proj("a", 2027, 0, 1), _proj("a", 2025, 0, 1)]) == (2025, 2027)
    assert aggregation.projection_year_range([]) is None


@pytest.mark.asyncio
async def test_seeded_stats_for_john_doe(seeded_store):
    raw = await seeded_store.list_investments_by_user("user-1")
    enriched = await enrich_investments(seeded_store, raw, up_to_year=2026)

    stats = aggregation.portfolio_stats(enriched)

    assert stats.investment_count == 8
    assert stats.total_invested_usd == pytest.approx(241260)
    # inv-8 has no rows up to 2026 and contributes nothing.
    assert stats.total_expected_yield == pytest.approx(21420)
    totals = {row.category: row.total_usd for row in stats.category_breakdown}
    assert totals["Loan Notes"] == pytest.approx(65000)
    assert totals["Gold"] == pytest.approx(63820)
