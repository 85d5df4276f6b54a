from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from investdash.core.logging import get_logger
from investdash.core.security.dependencies import get_controller
from investdash.domain.portfolio.schemas.investments import (
    EnrichedInvestment,
    InvestmentCreate,
    InvestmentRecord,
    InvestmentUpdate,
)
from investdash.domain.portfolio.schemas.projections import ProjectionRecord
from investdash.domain.portfolio.services.access_policy import visible_investments
from investdash.domain.portfolio.services.controller import InvestmentController
from investdash.domain.portfolio.services.enrichment import history_up_to


logger = get_logger(__name__)

STALE_SNAPSHOT_HEADER = "X-Snapshot-Stale"

router = APIRouter(prefix="/investments", tags=["Investments"])


async def load_snapshot(controller: InvestmentController) -> InvestmentController:
    await controller.refresh()
    if controller.error is not None:
        raise controller.error
    return controller


def flag_stale_snapshot(controller: InvestmentController, response: Response) -> None:
    """Mark a committed write whose follow-up refresh failed; the write itself still succeeds."""
    if controller.error is None:
        return
    logger.warning("investment.snapshot_stale", error_type=type(controller.error).__name__, error=str(controller.error))
    response.headers[STALE_SNAPSHOT_HEADER] = "true"


@router.get("", response_model=list[EnrichedInvestment])
async def list_investments(controller: InvestmentController = Depends(get_controller)) -> list[EnrichedInvestment]:
    await load_snapshot(controller)
    return controller.investments


@router.get("/{investment_id}/projections", response_model=list[ProjectionRecord])
async def list_investment_projections(
    investment_id: str,
    up_to_year: int | None = Query(default=None, ge=2020, le=2100),
    controller: InvestmentController = Depends(get_controller),
) -> list[ProjectionRecord]:
    investment = await controller.store.get_investment(investment_id)
    if investment is None or not visible_investments([investment], controller.user):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Investment not found")
    return history_up_to(await controller.get_projections(investment_id), up_to_year)


@router.post("", response_model=InvestmentRecord, status_code=status.HTTP_200_OK)
async def create_investment(
    payload: InvestmentCreate,
    response: Response,
    controller: InvestmentController = Depends(get_controller),
) -> InvestmentRecord:
    created = await controller.add_investment(payload)
    flag_stale_snapshot(controller, response)
    return created


@router.patch("/{investment_id}", response_model=InvestmentRecord)
async def update_investment(
    investment_id: str,
    payload: InvestmentUpdate,
    response: Response,
    controller: InvestmentController = Depends(get_controller),
) -> InvestmentRecord:
    updated = await controller.update_investment(investment_id, payload)
    flag_stale_snapshot(controller, response)
    return updated


@router.delete("/{investment_id}")
async def delete_investment(
    investment_id: str,
    response: Response,
    controller: InvestmentController = Depends(get_controller),
) -> dict[str, str]:
    await controller.delete_investment(investment_id)
    flag_stale_snapshot(controller, response)
    return {"status": "deleted", "id": investment_id}
