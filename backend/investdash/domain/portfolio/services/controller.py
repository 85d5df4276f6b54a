from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

from investdash.core.logging import get_logger
from investdash.domain.portfolio.schemas.investments import (
    EnrichedInvestment,
    InvestmentCreate,
    InvestmentRecord,
    InvestmentUpdate,
)
from investdash.domain.portfolio.schemas.projections import ProjectionRecord
from investdash.domain.portfolio.schemas.stats import PortfolioStats, YearlyProjectionRow
from investdash.domain.portfolio.schemas.users import UserRecord
from investdash.domain.portfolio.services import aggregation
from investdash.domain.portfolio.services.access_policy import require_mutation, visible_investments
from investdash.domain.portfolio.services.conversion import mock_usd_equivalent
from investdash.domain.portfolio.services.enrichment import enrich_investments
from investdash.domain.portfolio.store.base import RecordStore
from investdash.shared.enums import SessionState
from investdash.shared.exceptions import AppError, AuthorizationError


logger = get_logger(__name__)

T = TypeVar("T")


class InvestmentController:
    """
    Owns one user's portfolio session: fetch -> enrich -> aggregate.

    Every mutation re-runs the whole read pipeline; there is no incremental or
    optimistic update. Overlapping refreshes are not coordinated and the last
    one to finish overwrites the snapshot. A failed refresh keeps the previous
    snapshot (last known good) next to the error.
    """

    def __init__(self, store: RecordStore, user: UserRecord | None, *, reference_year: int | None) -> None:
        self.store = store
        self.user = user
        self.reference_year = reference_year

        self.state = SessionState.uninitialized
        self.investments: list[EnrichedInvestment] = []
        self.stats: PortfolioStats | None = None
        self.error: AppError | None = None

    @property
    def loading(self) -> bool:
        return self.state == SessionState.loading

    async def _fetch_raw(self, user: UserRecord) -> list[InvestmentRecord]:
        if user.is_super_user:
            raw = await self.store.list_investments()
        else:
            raw = await self.store.list_investments_by_user(user.id)
        return visible_investments(raw, user)

    async def refresh(self) -> None:
        if self.user is None:
            self.investments = []
            self.stats = None
            self.error = None
            self.state = SessionState.uninitialized
            return

        self.state = SessionState.loading
        self.error = None
        try:
            raw = await self._fetch_raw(self.user)
            enriched = await enrich_investments(self.store, raw, up_to_year=self.reference_year)
            stats = aggregation.portfolio_stats(enriched)
        except AppError as exc:
            self.error = exc
            self.state = SessionState.error
            logger.error("portfolio.refresh_failed", user_id=self.user.id, error=str(exc))
            return

        self.investments = enriched
        self.stats = stats
        self.state = SessionState.ready
        logger.info(
            "portfolio.refreshed",
            user_id=self.user.id,
            investment_count=stats.investment_count,
            total_invested_usd=stats.total_invested_usd,
        )

    async def switch_user(self, user: UserRecord | None) -> None:
        """Login, logout or switch: the snapshot is rebuilt for the new user."""
        self.user = user
        self.investments = []
        self.stats = None
        self.state = SessionState.loading
        await self.refresh()

    def _require_user(self) -> UserRecord:
        if self.user is None:
            raise AuthorizationError("no authenticated user")
        return self.user

    async def _mutate(self, action: str, operation: Callable[[], Awaitable[T]]) -> T:
        user = self._require_user()
        require_mutation(user)
        self.error = None
        try:
            result = await operation()
        except AppError as exc:
            self.error = exc
            self.state = SessionState.error
            logger.error("investment.mutation_failed", action=action, user_id=user.id, error=str(exc))
            raise
        logger.info("investment.mutated", action=action, user_id=user.id)
        await self.refresh()
        return result

    async def add_investment(self, data: InvestmentCreate) -> InvestmentRecord:
        if data.usd_equivalent is None:
            data = data.model_copy(
                update={"usd_equivalent": mock_usd_equivalent(data.amount_invested, data.currency)}
            )
        return await self._mutate("created", lambda: self.store.create_investment(data))

    async def update_investment(self, investment_id: str, patch: InvestmentUpdate) -> InvestmentRecord:
        return await self._mutate("updated", lambda: self.store.update_investment(investment_id, patch))

    async def delete_investment(self, investment_id: str) -> None:
        await self._mutate("deleted", lambda: self.store.delete_investment(investment_id))

    async def get_projections(self, investment_id: str) -> list[ProjectionRecord]:
        """Full, unfiltered history for one investment (detail view)."""
        return await self.store.list_projections(investment_id)

    async def yearly_projection(self) -> list[YearlyProjectionRow]:
        histories: dict[str, list[ProjectionRecord]] = {}
        for inv in self.investments:
            histories[inv.id] = await self.store.list_projections(inv.id)
        return aggregation.yearly_portfolio_projection(self.investments, lambda inv_id: histories.get(inv_id, []))
