"""NAV comparison routes for the selected funds."""

from fastapi import APIRouter, Depends

from rabbit_invest.api.deps import get_app_state, get_nav_refresher
from rabbit_invest.api.schemas import (
    ChartPointResponse,
    ComparisonFundResponse,
    ComparisonResponse,
)
from rabbit_invest.services.app_state import AppState
from rabbit_invest.services.comparison import chart_points, latest_nav, nav_change
from rabbit_invest.tasks.scheduler import NavRefresher

router = APIRouter(prefix="/api/comparison", tags=["comparison"])


def _comparison_response(state: AppState, refresher: NavRefresher) -> ComparisonResponse:
    funds = []
    for fund in state.selection:
        nav = state.nav_map.get(str(fund.scheme_code))
        points = nav.data if nav else []
        change = nav_change(points)
        funds.append(
            ComparisonFundResponse(
                scheme_code=fund.scheme_code,
                scheme_name=fund.scheme_name,
                fund_house=fund.fund_house,
                scheme_category=fund.scheme_category,
                has_data=nav is not None,
                latest_nav=latest_nav(points),
                change=change.value if change else None,
                change_pct=change.percentage if change else None,
                chart=[ChartPointResponse(**p) for p in chart_points(points)],
            )
        )

    return ComparisonResponse(
        can_show_comparison=state.can_show_comparison,
        auto_refresh=refresher.active,
        last_update=state.last_update.isoformat() if state.last_update else None,
        funds=funds,
    )


@router.get("", response_model=ComparisonResponse)
async def get_comparison(
    state: AppState = Depends(get_app_state),
    refresher: NavRefresher = Depends(get_nav_refresher),
):
    """Selected funds with latest NAV, daily change and chart series.

    NAV data is fetched again on every view, so selection changes are picked up.
    """
    await state.load_comparison()
    return _comparison_response(state, refresher)


@router.post("/refresh", response_model=ComparisonResponse)
async def refresh_comparison(
    state: AppState = Depends(get_app_state),
    refresher: NavRefresher = Depends(get_nav_refresher),
):
    await state.load_comparison()
    return _comparison_response(state, refresher)


@router.post("/watch", response_model=ComparisonResponse)
async def start_watch(
    state: AppState = Depends(get_app_state),
    refresher: NavRefresher = Depends(get_nav_refresher),
):
    """Start periodic NAV refresh while the comparison view is open."""
    refresher.start()
    return _comparison_response(state, refresher)


@router.delete("/watch", response_model=ComparisonResponse)
async def stop_watch(
    state: AppState = Depends(get_app_state),
    refresher: NavRefresher = Depends(get_nav_refresher),
):
    refresher.stop()
    return _comparison_response(state, refresher)
