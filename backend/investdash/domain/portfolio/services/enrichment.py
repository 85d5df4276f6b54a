from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from investdash.core.logging import get_logger
from investdash.domain.portfolio.schemas.investments import EnrichedInvestment, InvestmentRecord
from investdash.domain.portfolio.schemas.products import ProductRecord
from investdash.domain.portfolio.schemas.projections import ProjectionRecord
from investdash.domain.portfolio.store.base import RecordStore
from investdash.shared.exceptions import MissingReferenceError


logger = get_logger(__name__)


def history_up_to(projections: Iterable[ProjectionRecord], year: int | None) -> list[ProjectionRecord]:
    """Projections with year <= `year` (all of them when year is None), ascending by year."""
    rows = [p for p in projections if year is None or p.year <= year]
    return sorted(rows, key=lambda p: p.year)


def enrich(
    investment: InvestmentRecord,
    product_lookup: Mapping[str, ProductRecord],
    projections: Sequence[ProjectionRecord] | None = None,
) -> EnrichedInvestment:
    """
    Join one investment to its product and (optionally) its projection history.

    `projections` is taken as already filtered and ordered by the caller.
    Raises MissingReferenceError when the product does not resolve; no partial
    record is ever returned.
    """
    product = product_lookup.get(investment.product_id)
    if product is None:
        raise MissingReferenceError(investment.id, "product_id", investment.product_id)

    return EnrichedInvestment.model_validate(
        {
            **investment.model_dump(),
            "product": product,
            "performance_history": list(projections) if projections is not None else None,
        }
    )


async def enrich_investments(
    store: RecordStore,
    investments: Sequence[InvestmentRecord],
    *,
    up_to_year: int | None,
) -> list[EnrichedInvestment]:
    """
    Enrich a batch against the store.

    up_to_year=<year> cuts each history at that year (dashboard snapshot);
    up_to_year=None loads the full history (detail views). The first missing
    product aborts the whole batch.
    """
    products = await store.list_products()
    product_map = {p.id: p for p in products}

    enriched: list[EnrichedInvestment] = []
    for investment in investments:
        if investment.product_id not in product_map:
            logger.warning(
                "enrichment.missing_product",
                investment_id=investment.id,
                product_id=investment.product_id,
            )
            raise MissingReferenceError(investment.id, "product_id", investment.product_id)

        if up_to_year is None:
            history = await store.list_projections(investment.id)
        else:
            history = await store.list_projections_up_to_year(investment.id, up_to_year)

        enriched.append(enrich(investment, product_map, history))
    return enriched
