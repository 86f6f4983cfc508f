"""Route dependencies: the session state and its collaborators."""

from fastapi import Depends, HTTPException, Request

from rabbit_invest.models.fund import Fund
from rabbit_invest.services.app_state import AppState
from rabbit_invest.tasks.scheduler import NavRefresher


def get_app_state(request: Request) -> AppState:
    """Dependency for FastAPI routes. Built once in the app lifespan."""
    return request.app.state.app_state


def get_nav_refresher(request: Request) -> NavRefresher:
    return request.app.state.nav_refresher


def get_catalog_fund(scheme_code: int, state: AppState = Depends(get_app_state)) -> Fund:
    if not state.catalog_loaded:
        raise HTTPException(status_code=409, detail="Fund catalog not loaded")
    fund = state.find_fund(scheme_code)
    if fund is None:
        raise HTTPException(status_code=404, detail="Fund not found")
    return fund
