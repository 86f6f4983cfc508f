"""Tests for the capped selection/favorites sets."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from rabbit_invest.models.database import Base
from rabbit_invest.models.fund import Fund
from rabbit_invest.models.preference import Preference  # noqa: F401
from rabbit_invest.services.fund_sets import BoundedFundSet
from rabbit_invest.services.preferences import FAVORITE_FUNDS_KEY, PreferenceStore

FUNDS = [Fund(scheme_code=100 + i, scheme_name=f"HDFC Test Fund {i}") for i in range(8)]


@pytest_asyncio.fixture
async def store():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield PreferenceStore(factory)
    await engine.dispose()


@pytest.fixture
def favorites(store):
    return BoundedFundSet("favorites", 5, store, FAVORITE_FUNDS_KEY)


@pytest.mark.asyncio
async def test_add_persists_codes(favorites, store):
    assert await favorites.add(FUNDS[0]) is True
    assert favorites.contains(FUNDS[0])
    assert FUNDS[0] in favorites
    assert await store.get_favorite_fund_codes() == ["100"]


@pytest.mark.asyncio
async def test_add_existing_member_is_noop(favorites):
    await favorites.add(FUNDS[0])
    same_code = Fund(scheme_code=100, scheme_name="Renamed")
    assert await favorites.add(same_code) is True
    assert len(favorites) == 1


@pytest.mark.asyncio
async def test_add_beyond_cap_is_rejected(favorites, store):
    for fund in FUNDS[:5]:
        assert await favorites.add(fund) is True
    assert favorites.is_full

    assert await favorites.add(FUNDS[5]) is False
    assert len(favorites) == 5
    assert not favorites.contains(FUNDS[5])
    assert await store.get_favorite_fund_codes() == ["100", "101", "102", "103", "104"]


@pytest.mark.asyncio
async def test_add_member_at_cap_still_succeeds(favorites):
    for fund in FUNDS[:5]:
        await favorites.add(fund)
    assert await favorites.add(FUNDS[2]) is True


@pytest.mark.asyncio
async def test_selection_cap_of_four(store):
    selection = BoundedFundSet("selection", 4, store, "selected_funds")
    results = [await selection.add(f) for f in FUNDS[:5]]
    assert results == [True, True, True, True, False]
    assert selection.codes() == ["100", "101", "102", "103"]


@pytest.mark.asyncio
async def test_remove_absent_is_noop(favorites, store):
    await favorites.remove(FUNDS[0])
    assert len(favorites) == 0
    assert await store.get_favorite_fund_codes() == []


@pytest.mark.asyncio
async def test_insert_then_remove_restores_previous_state(favorites):
    await favorites.add(FUNDS[0])
    await favorites.add(FUNDS[1])
    before = favorites.funds()

    await favorites.add(FUNDS[2])
    await favorites.remove(FUNDS[2])
    assert favorites.funds() == before


@pytest.mark.asyncio
async def test_toggle(favorites):
    assert await favorites.toggle(FUNDS[0]) is True
    assert favorites.contains(FUNDS[0])
    assert await favorites.toggle(FUNDS[0]) is True
    assert not favorites.contains(FUNDS[0])


@pytest.mark.asyncio
async def test_toggle_at_cap_reports_failure(favorites):
    for fund in FUNDS[:5]:
        await favorites.add(fund)
    assert await favorites.toggle(FUNDS[6]) is False
    assert len(favorites) == 5


@pytest.mark.asyncio
async def test_restore_intersects_with_catalog(favorites):
    favorites.restore(FUNDS[:3], ["101", "102", "999999"])
    assert favorites.codes() == ["101", "102"]


@pytest.mark.asyncio
async def test_restore_replaces_contents(favorites):
    favorites.restore(FUNDS, ["100"])
    favorites.restore(FUNDS, ["103"])
    assert favorites.codes() == ["103"]


@pytest.mark.asyncio
async def test_subscribers_are_notified(favorites):
    events = []
    unsubscribe = favorites.subscribe(lambda name, codes: events.append((name, codes)))

    await favorites.add(FUNDS[0])
    await favorites.add(FUNDS[1])
    unsubscribe()
    await favorites.remove(FUNDS[0])

    assert events == [("favorites", ["100"]), ("favorites", ["100", "101"])]


@pytest.mark.asyncio
async def test_rejected_add_does_not_notify(favorites):
    for fund in FUNDS[:5]:
        await favorites.add(fund)
    events = []
    favorites.subscribe(lambda name, codes: events.append(codes))
    await favorites.add(FUNDS[7])
    assert events == []
