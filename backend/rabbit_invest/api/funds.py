"""Fund catalog, filter and NAV history routes."""

from fastapi import APIRouter, Depends, HTTPException

from rabbit_invest.api.deps import get_app_state
from rabbit_invest.api.schemas import (
    FilterOptionsResponse,
    FiltersRequest,
    FiltersResponse,
    FundListResponse,
    FundResponse,
    NavHistoryResponse,
    NavPointResponse,
    ReloadResponse,
)
from rabbit_invest.models.fund import Fund, FundFilterSpec
from rabbit_invest.services.app_state import AppState
from rabbit_invest.services.comparison import latest_nav, nav_change
from rabbit_invest.services.fund_filter import match_options
from rabbit_invest.services.mfapi import GatewayError

router = APIRouter(prefix="/api/funds", tags=["funds"])


def fund_response(fund: Fund, state: AppState) -> FundResponse:
    return FundResponse(
        scheme_code=fund.scheme_code,
        scheme_name=fund.scheme_name,
        fund_house=fund.fund_house,
        scheme_type=fund.scheme_type,
        scheme_category=fund.scheme_category,
        isin_growth=fund.isin_growth,
        isin_div_reinvestment=fund.isin_div_reinvestment,
        is_selected=state.selection.contains(fund),
        is_favorite=state.favorites.contains(fund),
    )


def _filters_response(spec: FundFilterSpec) -> FiltersResponse:
    return FiltersResponse(
        search_text=spec.search_text,
        selected_amc=spec.selected_amc,
        selected_category=spec.selected_category,
        selected_type=spec.selected_type,
        active_filter_count=spec.active_filter_count,
    )


async def _ensure_catalog(state: AppState) -> None:
    if state.catalog_loaded:
        return
    try:
        await state.load_catalog()
    except GatewayError as e:
        raise HTTPException(status_code=503, detail=e.message) from e


# Static path routes come before the parameterized /{scheme_code} route.


@router.post("/reload", response_model=ReloadResponse)
async def reload_catalog(state: AppState = Depends(get_app_state)):
    """Manual "try again": refetch the catalog and restore saved state."""
    try:
        funds = await state.load_catalog()
    except GatewayError as e:
        raise HTTPException(status_code=503, detail=e.message) from e
    return ReloadResponse(status="ok", total=len(funds))


def _list_response(state: AppState) -> FundListResponse:
    return FundListResponse(
        total=len(state.filtered),
        filters=_filters_response(state.filters),
        funds=[fund_response(f, state) for f in state.filtered],
    )


@router.get("", response_model=FundListResponse)
async def list_funds(state: AppState = Depends(get_app_state)):
    """Catalog under the current filters, selected funds first."""
    await _ensure_catalog(state)
    return _list_response(state)


@router.get("/filters", response_model=FilterOptionsResponse)
async def get_filter_options(match: str = "", state: AppState = Depends(get_app_state)):
    await _ensure_catalog(state)
    return FilterOptionsResponse(
        amcs=match_options(state.options.amcs, match),
        categories=match_options(state.options.categories, match),
        types=match_options(state.options.types, match),
    )


@router.put("/filters", response_model=FundListResponse)
async def set_filters(req: FiltersRequest, state: AppState = Depends(get_app_state)):
    """Replace the filters, persist them and record the search text in history."""
    await _ensure_catalog(state)
    spec = FundFilterSpec(
        search_text=req.search_text.strip(),
        selected_amc=req.selected_amc.strip(),
        selected_category=req.selected_category.strip(),
        selected_type=req.selected_type.strip(),
    )
    await state.apply_filters(spec)
    return _list_response(state)


@router.delete("/filters", response_model=FiltersResponse)
async def clear_filters(state: AppState = Depends(get_app_state)):
    await state.clear_filters()
    return _filters_response(state.filters)


@router.get("/{scheme_code}/nav", response_model=NavHistoryResponse)
async def get_nav_history(scheme_code: int, state: AppState = Depends(get_app_state)):
    try:
        resp = await state.fund_nav(str(scheme_code))
    except GatewayError as e:
        raise HTTPException(status_code=503, detail=e.message) from e

    change = nav_change(resp.data)
    return NavHistoryResponse(
        scheme_code=resp.meta.scheme_code,
        scheme_name=resp.meta.scheme_name,
        fund_house=resp.meta.fund_house,
        scheme_type=resp.meta.scheme_type,
        scheme_category=resp.meta.scheme_category,
        latest_nav=latest_nav(resp.data),
        change=change.value if change else None,
        change_pct=change.percentage if change else None,
        data=[NavPointResponse(date=p.date, nav=p.nav) for p in resp.data],
    )
