"""Login, logout and search history routes."""

from fastapi import APIRouter, Depends, HTTPException

from rabbit_invest.api.deps import get_app_state, get_nav_refresher
from rabbit_invest.api.schemas import LoginRequest, SearchHistoryResponse, SessionResponse
from rabbit_invest.services.app_state import AppState, InvalidCredentials
from rabbit_invest.tasks.scheduler import NavRefresher

router = APIRouter(prefix="/api", tags=["session"])


@router.get("/session", response_model=SessionResponse)
async def get_session(state: AppState = Depends(get_app_state)):
    """Current login, plus the last email used so a client can pre-fill it."""
    return SessionResponse(
        logged_in=state.user_email is not None,
        email=state.user_email,
        remembered_email=await state.store.get_user_email(),
    )


@router.post("/session/login", response_model=SessionResponse)
async def login(req: LoginRequest, state: AppState = Depends(get_app_state)):
    try:
        await state.login(req.email.strip(), req.password)
    except InvalidCredentials as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return SessionResponse(logged_in=True, email=state.user_email, remembered_email=state.user_email)


@router.post("/session/logout", response_model=SessionResponse)
async def logout(
    state: AppState = Depends(get_app_state),
    refresher: NavRefresher = Depends(get_nav_refresher),
):
    refresher.stop()
    await state.logout()
    return SessionResponse(logged_in=False)


@router.get("/search-history", response_model=SearchHistoryResponse)
async def get_search_history(state: AppState = Depends(get_app_state)):
    return SearchHistoryResponse(history=await state.store.get_search_history())


@router.delete("/search-history", response_model=SearchHistoryResponse)
async def clear_search_history(state: AppState = Depends(get_app_state)):
    await state.store.clear_search_history()
    return SearchHistoryResponse(history=[])
