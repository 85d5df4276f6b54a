from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from investdash.core.config import settings
from investdash.core.security.dependencies import get_controller
from investdash.domain.portfolio.routes.investments import load_snapshot
from investdash.domain.portfolio.schemas.stats import PortfolioStats, YearlyProjectionRow
from investdash.domain.portfolio.services import aggregation
from investdash.domain.portfolio.services.controller import InvestmentController


router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=PortfolioStats)
async def portfolio_stats(
    sort_by_total: bool = Query(default=True),
    controller: InvestmentController = Depends(get_controller),
) -> PortfolioStats:
    await load_snapshot(controller)
    stats = controller.stats
    if sort_by_total:
        stats = stats.model_copy(
            update={
                "category_breakdown": aggregation.sort_breakdown(stats.category_breakdown),
                "currency_breakdown": aggregation.sort_breakdown(stats.currency_breakdown),
            }
        )
    return stats


@router.get("/projections", response_model=list[YearlyProjectionRow])
async def yearly_projection(
    start: int | None = Query(default=None, ge=2020, le=2100),
    end: int | None = Query(default=None, ge=2020, le=2100),
    controller: InvestmentController = Depends(get_controller),
) -> list[YearlyProjectionRow]:
    await load_snapshot(controller)
    rows = await controller.yearly_projection()
    return aggregation.window_years(
        rows,
        start if start is not None else settings.projection_window_start,
        end if end is not None else settings.projection_window_end,
    )
