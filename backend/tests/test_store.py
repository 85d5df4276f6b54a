from __future__ import annotations

import datetime as dt

import pytest

from investdash.domain.portfolio.schemas.investments import InvestmentCreate, InvestmentUpdate
from investdash.domain.portfolio.schemas.projections import ProjectionCreate
from investdash.domain.portfolio.schemas.users import UserCreate
from investdash.shared.enums import InvestmentStatus, UserRole
from investdash.shared.exceptions import MissingReferenceError, RecordNotFound, StoreError, ValidationError


def _new_investment(**overrides) -> InvestmentCreate:
    data = {
        "user_id": "user-2",
        "product_id": "prod-5",
        "amount_invested": 5000,
        "currency": "USD",
        "usd_equivalent": 5000,
        "contract_pdf": "https://example.com/contracts/new.pdf",
    }
    data.update(overrides)
    return InvestmentCreate(**data)


@pytest.mark.asyncio
async def test_point_lookups_return_none_when_absent(store):
    assert await store.get_user("nobody") is None
    assert await store.get_user_by_email("nobody@example.com") is None
    assert await store.get_product("prod-404") is None
    assert await store.get_investment("inv-404") is None
    assert await store.list_projections("inv-404") == []


@pytest.mark.asyncio
async def test_users_and_products_round_trip(store):
    user = await store.create_user(UserCreate(email="new.user@example.com", name="New User"))

    assert user.role == UserRole.normal_user
    assert await store.get_user(user.id) == user
    assert await store.get_user_by_email("new.user@example.com") == user
    assert [u.id for u in await store.list_users()] == [user.id]


@pytest.mark.asyncio
async def test_projection_history_up_to_year(seeded_store):
    history = await seeded_store.list_projections_up_to_year("inv-1", 2026)

    assert [(p.year, p.total_value) for p in history] == [(2025, 2000), (2026, 44000)]
    assert [p.year for p in await seeded_store.list_projections("inv-1")] == [2025, 2026, 2027]


@pytest.mark.asyncio
async def test_list_investments_by_user(seeded_store):
    john = await seeded_store.list_investments_by_user("user-1")
    everyone = await seeded_store.list_investments()

    assert len(john) == 8
    assert all(inv.user_id == "user-1" for inv in john)
    assert len(everyone) == 10


@pytest.mark.asyncio
async def test_create_investment_assigns_id(seeded_store):
    created = await seeded_store.create_investment(_new_investment())

    assert created.id
    assert created.investment_date == dt.date.today()
    assert await seeded_store.get_investment(created.id) == created


@pytest.mark.asyncio
async def test_create_investment_requires_usd_equivalent(seeded_store):
    with pytest.raises(ValidationError) as exc_info:
        await seeded_store.create_investment(_new_investment(usd_equivalent=None))
    assert exc_info.value.field == "usd_equivalent"


@pytest.mark.asyncio
async def test_create_investment_rejects_unknown_product(seeded_store):
    with pytest.raises(MissingReferenceError) as exc_info:
        await seeded_store.create_investment(_new_investment(product_id="prod-404"))

    assert exc_info.value.field == "product_id"
    assert len(await seeded_store.list_investments()) == 10


@pytest.mark.asyncio
async def test_partial_update_changes_only_given_fields(seeded_store):
    before = await seeded_store.get_investment("inv-2")

    updated = await seeded_store.update_investment("inv-2", InvestmentUpdate(status=InvestmentStatus.matured))

    assert updated.status == InvestmentStatus.matured
    assert updated.model_dump(exclude={"status"}) == before.model_dump(exclude={"status"})
    assert await seeded_store.get_investment("inv-2") == updated


@pytest.mark.asyncio
async def test_update_can_clear_maturity_date(seeded_store):
    updated = await seeded_store.update_investment("inv-1", InvestmentUpdate(maturity_date=None))

    assert updated.maturity_date is None
    assert (await seeded_store.get_investment("inv-1")).maturity_date is None


@pytest.mark.asyncio
async def test_update_unknown_investment(seeded_store):
    with pytest.raises(RecordNotFound) as exc_info:
        await seeded_store.update_investment("inv-404", InvestmentUpdate(status=InvestmentStatus.matured))

    assert exc_info.value.record_id == "inv-404"
    assert isinstance(exc_info.value, StoreError)


@pytest.mark.asyncio
async def test_update_rejects_unknown_product(seeded_store):
    with pytest.raises(MissingReferenceError):
        await seeded_store.update_investment("inv-1", InvestmentUpdate(product_id="prod-404"))

    assert (await seeded_store.get_investment("inv-1")).product_id == "prod-1"


@pytest.mark.asyncio
async def test_delete_removes_investment_and_projections(seeded_store):
    await seeded_store.delete_investment("inv-1")

    assert await seeded_store.get_investment("inv-1") is None
    assert await seeded_store.list_projections("inv-1") == []
    assert len(await seeded_store.list_investments_by_user("user-1")) == 7


@pytest.mark.asyncio
async def test_delete_unknown_investment(seeded_store):
    with pytest.raises(RecordNotFound):
        await seeded_store.delete_investment("inv-404")


@pytest.mark.asyncio
async def test_duplicate_projection_year_is_a_store_error(seeded_store):
    duplicate = ProjectionCreate(
        investment_id="inv-1", year=2026, principal_amount=1, yield_amount=1, total_value=2
    )

    with pytest.raises(StoreError) as exc_info:
        await seeded_store.create_projection(duplicate)
    assert exc_info.value.operation == "create_projection"

    # The session is usable again after the rollback.
    assert len(await seeded_store.list_projections("inv-1")) == 3


@pytest.mark.asyncio
async def test_projection_for_unknown_investment(seeded_store):
    orphan = ProjectionCreate(investment_id="inv-404", year=2026, principal_amount=0, yield_amount=0, total_value=0)

    with pytest.raises(MissingReferenceError):
        await seeded_store.create_projection(orphan)


@pytest.mark.asyncio
async def test_email_lookup_matches_registered_spelling(store):
    user = await store.create_user(UserCreate(email="Jane.Smith@Example.COM", name="Jane Smith"))

    assert await store.get_user_by_email("Jane.Smith@Example.COM") == user
    assert await store.get_user_by_email(user.email) == user
    assert await store.get_user_by_email("not-an-email") is None
