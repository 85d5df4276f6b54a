from __future__ import annotations

import argparse
import asyncio
import os
import sys
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import create_async_engine

# Ensure `backend/` is importable when running as a script.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from investdash.core.config import settings  # noqa: E402
from investdash.core.db.session import create_tables, drop_tables, get_session_local  # noqa: E402
from investdash.core.logging import configure_logging, get_logger  # noqa: E402
from investdash.domain.portfolio.schemas.investments import InvestmentCreate  # noqa: E402
from investdash.domain.portfolio.schemas.products import ProductCreate  # noqa: E402
from investdash.domain.portfolio.schemas.projections import ProjectionCreate  # noqa: E402
from investdash.domain.portfolio.schemas.users import UserCreate  # noqa: E402
from investdash.domain.portfolio.store.base import RecordStore  # noqa: E402
from investdash.domain.portfolio.store.sqlalchemy_store import SqlAlchemyRecordStore  # noqa: E402


logger = get_logger(__name__)


USERS = [
    ("user-1", "john.doe@example.com", "John Doe", "normal_user"),
    ("user-2", "jane.smith@example.com", "Jane Smith", "normal_user"),
    ("super-1", "admin@example.com", "Admin User", "super_user"),
]

PRODUCTS = [
    ("prod-1", "Loan Notes", "Woodville"),
    ("prod-2", "Loan Notes", "EIGHT Cloud"),
    ("prod-3", "REIT", "Assisted Living Project"),
    ("prod-4", "Loan Notes and Profit Share", "Acorn (St. Lenard's Quarter)"),
    ("prod-5", "Gold", "3RT"),
    ("prod-6", "Gold", "Omega Minerals"),
    ("prod-7", "Private Equity", "Bricksave"),
    ("prod-8", "Private Equity", "Precomb"),
]

INVESTMENTS = [
    {
        "id": "inv-1", "user_id": "user-1", "product_id": "prod-1",
        "amount_invested": 40000.0, "currency": "USD", "usd_equivalent": 40000.0,
        "details_of_investment": "Maturity May 2027 (2 years)",
        "expected_yield": "10% per annum / paid quarterly",
        "investment_type": "Lumpsum/Regular", "investment_date": "2025-05-01", "maturity_date": "2027-05-01",
        "contract_pdf": "https://example.com/contracts/woodville.pdf",
    },
    {
        "id": "inv-2", "user_id": "user-1", "product_id": "prod-2",
        "amount_invested": 25000.0, "currency": "USD", "usd_equivalent": 25000.0,
        "details_of_investment": "Maturity Feb 2026 (2 years)",
        "expected_yield": "Pays 14% per annum semi annually",
        "investment_type": "Lumpsum", "investment_date": "2024-02-01", "maturity_date": "2026-02-01",
        "contract_pdf": "https://example.com/contracts/eightcloud.pdf",
    },
    {
        "id": "inv-3", "user_id": "user-1", "product_id": "prod-3",
        "amount_invested": 25000.0, "currency": "GBP", "usd_equivalent": 33000.0,
        "details_of_investment": "Invested June 2025",
        "expected_yield": "Dividends paid quarterly and exit via IPO/sale by 2028",
        "investment_type": "Buy and Hold", "investment_date": "2025-06-01", "maturity_date": None,
        "contract_pdf": "https://example.com/contracts/assisted-living.pdf",
    },
    {
        "id": "inv-4", "user_id": "user-1", "product_id": "prod-4",
        "amount_invested": 14000.0, "currency": "GBP", "usd_equivalent": 18760.0,
        "details_of_investment": "Maturity October 2025 (3 years) - extended to October 2026",
        "expected_yield": "17% per annum / paid at maturity",
        "investment_type": "Lumpsum", "investment_date": "2023-10-01", "maturity_date": "2026-10-01",
        "contract_pdf": "https://example.com/contracts/acorn.pdf",
    },
    {
        "id": "inv-5", "user_id": "user-1", "product_id": "prod-5",
        "amount_invested": 33000.0, "currency": "USD", "usd_equivalent": 33000.0,
        "details_of_investment": "Buy-and-Hold to make gains from coin entering centralized platforms",
        "expected_yield": "Coin value expected to reach USD1.00 by approx. Q4 2025",
        "investment_type": "Buy and Hold", "investment_date": "2024-01-15", "maturity_date": None,
        "contract_pdf": "https://example.com/contracts/3rt.pdf",
    },
    {
        "id": "inv-6", "user_id": "user-1", "product_id": "prod-6",
        "amount_invested": 27000.0, "currency": "EUR", "usd_equivalent": 30820.0,
        "details_of_investment": "2 year convertible loan note with bullet payment at 24 months",
        "expected_yield": "22% bullet payment at 24 months",
        "investment_type": "Lumpsum", "investment_date": "2024-06-01", "maturity_date": "2026-06-01",
        "contract_pdf": "https://example.com/contracts/omega.pdf",
    },
    {
        "id": "inv-7", "user_id": "user-1", "product_id": "prod-7",
        "amount_invested": 27000.0, "currency": "GBP", "usd_equivalent": 36180.0,
        "details_of_investment": "Buy and hold stake in private company, targeting an exit in 24 months",
        "expected_yield": "Expected exit value is 2.5 to 3x entry value.",
        "investment_type": "Buy and Hold", "investment_date": "2024-01-01", "maturity_date": "2026-01-01",
        "contract_pdf": "https://example.com/contracts/bricksave.pdf",
    },
    {
        "id": "inv-8", "user_id": "user-1", "product_id": "prod-8",
        "amount_invested": 20000.0, "currency": "EUR", "usd_equivalent": 24500.0,
        "details_of_investment": "Anticipated exit approximately 2028",
        "expected_yield": "Expected exit value is 4-5x entry value.",
        "investment_type": "Buy and Hold", "investment_date": "2023-03-01", "maturity_date": "2028-03-01",
        "contract_pdf": "https://example.com/contracts/precomb.pdf",
    },
    {
        "id": "inv-9", "user_id": "user-2", "product_id": "prod-1",
        "amount_invested": 50000.0, "currency": "USD", "usd_equivalent": 50000.0,
        "details_of_investment": "Maturity May 2027 (2 years)",
        "expected_yield": "10% per annum / paid quarterly",
        "investment_type": "Lumpsum", "investment_date": "2025-05-01", "maturity_date": "2027-05-01",
        "contract_pdf": "https://example.com/contracts/woodville-2.pdf",
    },
    {
        "id": "inv-10", "user_id": "user-2", "product_id": "prod-3",
        "amount_invested": 30000.0, "currency": "GBP", "usd_equivalent": 39600.0,
        "details_of_investment": "Invested June 2025",
        "expected_yield": "Dividends paid quarterly and exit via IPO/sale by 2028",
        "investment_type": "Buy and Hold", "investment_date": "2025-06-01", "maturity_date": None,
        "contract_pdf": "https://example.com/contracts/assisted-living-2.pdf",
    },
]

# (id, investment_id, year, principal, yield, total)
PROJECTIONS = [
    ("proj-1", "inv-1", 2025, 0.0, 2000.0, 2000.0),
    ("proj-2", "inv-1", 2026, 40000.0, 4000.0, 44000.0),
    ("proj-3", "inv-1", 2027, 40000.0, 6000.0, 46000.0),
    ("proj-4", "inv-2", 2025, 0.0, 3500.0, 3500.0),
    ("proj-5", "inv-2", 2026, 25000.0, 3500.0, 28500.0),
    ("proj-6", "inv-3", 2025, 0.0, 1500.0, 1500.0),
    ("proj-7", "inv-3", 2026, 33000.0, 0.0, 33000.0),
    ("proj-8", "inv-4", 2025, 0.0, 0.0, 0.0),
    ("proj-9", "inv-4", 2026, 18760.0, 7140.0, 25900.0),
    ("proj-10", "inv-5", 2025, 33000.0, 0.0, 33000.0),
    ("proj-11", "inv-6", 2026, 30820.0, 6780.0, 37600.0),
    ("proj-12", "inv-7", 2026, 36180.0, 0.0, 36180.0),
    ("proj-13", "inv-8", 2028, 24500.0, 0.0, 24500.0),
    ("proj-14", "inv-9", 2025, 0.0, 2500.0, 2500.0),
    ("proj-15", "inv-9", 2026, 50000.0, 5000.0, 55000.0),
    ("proj-16", "inv-9", 2027, 50000.0, 7500.0, 57500.0),
    ("proj-17", "inv-10", 2025, 0.0, 1800.0, 1800.0),
    ("proj-18", "inv-10", 2026, 39600.0, 0.0, 39600.0),
]


@dataclass(frozen=True)
class SeedCounts:
    users: int
    products: int
    investments: int
    projections: int


async def seed_portfolio(store: RecordStore) -> SeedCounts:
    """
    Load the demo data set through the store, skipping records that already exist.

    Writes are not atomic: a failure part-way leaves what was already written.
    """
    counts = {"users": 0, "products": 0, "investments": 0, "projections": 0}

    for user_id, email, name, role in USERS:
        if await store.get_user(user_id) is None:
            await store.create_user(UserCreate(email=email, name=name, role=role), user_id=user_id)
            counts["users"] += 1

    for product_id, category, company in PRODUCTS:
        if await store.get_product(product_id) is None:
            await store.create_product(ProductCreate(category=category, investment_company=company), product_id=product_id)
            counts["products"] += 1

    for row in INVESTMENTS:
        data = dict(row)
        investment_id = data.pop("id")
        if await store.get_investment(investment_id) is None:
            await store.create_investment(InvestmentCreate(**data), investment_id=investment_id)
            counts["investments"] += 1

    for projection_id, investment_id, year, principal, yield_amount, total in PROJECTIONS:
        existing = {p.id for p in await store.list_projections(investment_id)}
        if projection_id in existing:
            continue
        await store.create_projection(
            ProjectionCreate(
                investment_id=investment_id,
                year=year,
                principal_amount=principal,
                yield_amount=yield_amount,
                total_value=total,
            ),
            projection_id=projection_id,
        )
        counts["projections"] += 1

    result = SeedCounts(**counts)
    logger.info("seed.completed", **counts)
    return result


async def run(database_url: str, *, reset: bool) -> SeedCounts:
    engine = create_async_engine(database_url)
    try:
        if reset:
            await drop_tables(engine)
        await create_tables(engine)
        async with get_session_local(engine)() as session:
            return await seed_portfolio(SqlAlchemyRecordStore(session))
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the portfolio database with the demo data set.")
    parser.add_argument("--database-url", default=settings.database_url)
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    args = parser.parse_args()

    configure_logging()
    counts = asyncio.run(run(args.database_url, reset=args.reset))
    print(
        f"users={counts.users} products={counts.products} "
        f"investments={counts.investments} projections={counts.projections}"
    )


if __name__ == "__main__":
    main()
