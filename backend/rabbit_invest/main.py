"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from rabbit_invest.models.database import async_session_factory, init_db
from rabbit_invest.api.comparison import router as comparison_router
from rabbit_invest.api.fund_sets import favorites_router, selection_router
from rabbit_invest.api.funds import router as funds_router
from rabbit_invest.api.session import router as session_router
from rabbit_invest.services.app_state import AppState
from rabbit_invest.services.mfapi import MFAPIClient, create_http_client
from rabbit_invest.services.preferences import PreferenceStore
from rabbit_invest.tasks.scheduler import (
    NavRefresher,
    create_scheduler,
    start_scheduler,
    stop_scheduler,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    gateway = MFAPIClient(create_http_client())
    state = AppState(gateway, PreferenceStore(async_session_factory))
    scheduler = create_scheduler()
    refresher = NavRefresher(state, scheduler)
    app.state.app_state = state
    app.state.nav_refresher = refresher
    start_scheduler(scheduler)
    yield
    refresher.stop()
    stop_scheduler(scheduler)
    await gateway.aclose()


app = FastAPI(title="Rabbit Invest", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session_router)
app.include_router(funds_router)
app.include_router(selection_router)
app.include_router(favorites_router)
app.include_router(comparison_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
