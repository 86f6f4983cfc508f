"""Comparison selection and favorites routes."""

from fastapi import APIRouter, Depends, HTTPException

from rabbit_invest.api.deps import get_app_state, get_catalog_fund
from rabbit_invest.api.funds import fund_response
from rabbit_invest.api.schemas import FavoriteNavResponse, FundSetResponse
from rabbit_invest.models.fund import Fund
from rabbit_invest.services.app_state import AppState
from rabbit_invest.services.fund_sets import BoundedFundSet

selection_router = APIRouter(prefix="/api/selection", tags=["selection"])
favorites_router = APIRouter(prefix="/api/favorites", tags=["favorites"])


def _set_response(fund_set: BoundedFundSet, state: AppState) -> FundSetResponse:
    return FundSetResponse(
        name=fund_set.name,
        cap=fund_set.cap,
        count=len(fund_set),
        is_full=fund_set.is_full,
        funds=[fund_response(f, state) for f in fund_set],
    )


def _limit_reached(fund_set: BoundedFundSet) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail=f"Limit reached: at most {fund_set.cap} funds in {fund_set.name}",
    )


# --- Selection (funds to compare) ---


@selection_router.get("", response_model=FundSetResponse)
async def get_selection(state: AppState = Depends(get_app_state)):
    return _set_response(state.selection, state)


@selection_router.post("/{scheme_code}", response_model=FundSetResponse)
async def select_fund(
    fund: Fund = Depends(get_catalog_fund), state: AppState = Depends(get_app_state)
):
    if not await state.selection.add(fund):
        raise _limit_reached(state.selection)
    return _set_response(state.selection, state)


@selection_router.delete("/{scheme_code}", response_model=FundSetResponse)
async def deselect_fund(
    fund: Fund = Depends(get_catalog_fund), state: AppState = Depends(get_app_state)
):
    await state.selection.remove(fund)
    return _set_response(state.selection, state)


@selection_router.post("/{scheme_code}/toggle", response_model=FundSetResponse)
async def toggle_selection(
    fund: Fund = Depends(get_catalog_fund), state: AppState = Depends(get_app_state)
):
    if not await state.selection.toggle(fund):
        raise _limit_reached(state.selection)
    return _set_response(state.selection, state)


# --- Favorites ---


@favorites_router.get("", response_model=FundSetResponse)
async def get_favorites(state: AppState = Depends(get_app_state)):
    return _set_response(state.favorites, state)


@favorites_router.get("/navs", response_model=FavoriteNavResponse)
async def get_favorite_navs(state: AppState = Depends(get_app_state)):
    """Latest NAV per favorite. Funds whose fetch failed are left out."""
    return FavoriteNavResponse(navs=await state.favorite_latest_navs())


@favorites_router.post("/{scheme_code}", response_model=FundSetResponse)
async def add_favorite(
    fund: Fund = Depends(get_catalog_fund), state: AppState = Depends(get_app_state)
):
    if not await state.favorites.add(fund):
        raise _limit_reached(state.favorites)
    return _set_response(state.favorites, state)


@favorites_router.delete("/{scheme_code}", response_model=FundSetResponse)
async def remove_favorite(
    fund: Fund = Depends(get_catalog_fund), state: AppState = Depends(get_app_state)
):
    await state.favorites.remove(fund)
    return _set_response(state.favorites, state)


@favorites_router.post("/{scheme_code}/toggle", response_model=FundSetResponse)
async def toggle_favorite(
    fund: Fund = Depends(get_catalog_fund), state: AppState = Depends(get_app_state)
):
    if not await state.favorites.toggle(fund):
        raise _limit_reached(state.favorites)
    return _set_response(state.favorites, state)
