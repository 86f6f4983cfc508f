"""Session state: catalog, filters, selection, favorites and NAV data.

All mutation goes through the methods here, and every change is announced
to subscribers by event name. State is owned by the event loop, so no
locking is needed.
"""

import logging
import re
from datetime import datetime
from typing import Callable

from rabbit_invest.config import FAVORITES_CAP, SELECTION_CAP
from rabbit_invest.models.fund import FilterOptions, Fund, FundFilterSpec, NAVResponse
from rabbit_invest.services.comparison import latest_nav
from rabbit_invest.services.fund_filter import filter_funds, filter_options, selected_first
from rabbit_invest.services.fund_sets import BoundedFundSet
from rabbit_invest.services.mfapi import GatewayError, MFAPIClient
from rabbit_invest.services.nav_aggregator import NavAggregator
from rabbit_invest.services.preferences import (
    FAVORITE_FUNDS_KEY,
    SELECTED_FUNDS_KEY,
    PreferenceStore,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
MIN_PASSWORD_LENGTH = 6

StateListener = Callable[[str], None]


class InvalidCredentials(ValueError):
    pass


class AppState:
    def __init__(
        self,
        gateway: MFAPIClient,
        store: PreferenceStore,
        aggregator: NavAggregator | None = None,
        selection_cap: int = SELECTION_CAP,
        favorites_cap: int = FAVORITES_CAP,
    ):
        self.gateway = gateway
        self.store = store
        self.aggregator = aggregator or NavAggregator(gateway)
        self.selection = BoundedFundSet("selection", selection_cap, store, SELECTED_FUNDS_KEY)
        self.favorites = BoundedFundSet("favorites", favorites_cap, store, FAVORITE_FUNDS_KEY)

        self.user_email: str | None = None
        self.catalog: list[Fund] = []
        self.catalog_loaded = False
        self.options = FilterOptions()
        self.filters = FundFilterSpec()
        self.filtered: list[Fund] = []
        self.nav_map: dict[str, NAVResponse] = {}
        self.last_update: datetime | None = None
        self.error_message: str | None = None

        self._listeners: list[StateListener] = []
        self.selection.subscribe(lambda name, codes: self._notify(name))
        self.favorites.subscribe(lambda name, codes: self._notify(name))

    # --- Observers ---

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event)

    # --- Session ---

    async def login(self, email: str, password: str) -> None:
        """Accept any syntactically valid email with a 6+ character password."""
        if not EMAIL_PATTERN.match(email):
            raise InvalidCredentials("Please enter a valid email address")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidCredentials(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        self.user_email = email
        await self.store.save_user_email(email)
        logger.info(f"User {email} logged in")
        self._notify("login")

    async def logout(self) -> None:
        self.user_email = None
        self.selection.clear()
        self.favorites.clear()
        self.filters = FundFilterSpec()
        self.nav_map = {}
        self.last_update = None
        await self.store.clear_all()
        logger.info("User logged out, preferences cleared")
        self._notify("logout")

    # --- Catalog ---

    def find_fund(self, scheme_code: int | str) -> Fund | None:
        code = str(scheme_code)
        for fund in self.catalog:
            if str(fund.scheme_code) == code:
                return fund
        return None

    async def load_catalog(self) -> list[Fund]:
        """Fetch the catalog, then restore sets and filters, then filter."""
        self.error_message = None
        try:
            funds = await self.gateway.fetch_all_funds()
        except GatewayError as e:
            logger.error(f"Failed to fetch fund catalog: {e}")
            self.error_message = e.message
            self._notify("error")
            raise

        self.catalog = funds
        self.catalog_loaded = True
        self.options = filter_options(funds)

        self.selection.restore(funds, await self.store.get_selected_fund_codes())
        self.favorites.restore(funds, await self.store.get_favorite_fund_codes())

        self.filters = await self.store.get_last_filters()
        await self.apply_filters()
        self._notify("catalog")
        return funds

    # --- Filters ---

    async def apply_filters(self, spec: FundFilterSpec | None = None) -> list[Fund]:
        if spec is not None:
            self.filters = spec
        self.filtered = selected_first(
            filter_funds(self.catalog, self.filters), self.selection
        )

        await self.store.save_filters(self.filters)
        if self.filters.search_text:
            await self.store.add_to_search_history(self.filters.search_text)
        self._notify("filters")
        return self.filtered

    async def clear_filters(self) -> list[Fund]:
        return await self.apply_filters(FundFilterSpec())

    # --- Comparison ---

    @property
    def can_show_comparison(self) -> bool:
        return 2 <= len(self.selection) <= self.selection.cap

    async def load_comparison(self) -> dict[str, NAVResponse]:
        """Replace the NAV map with fresh history for the selected funds."""
        self.set_nav_map(await self.aggregator.fetch_many(self.selection.codes()))
        return self.nav_map

    def set_nav_map(self, nav_map: dict[str, NAVResponse]) -> None:
        self.nav_map = nav_map
        self.last_update = datetime.now()
        self._notify("nav")

    async def favorite_latest_navs(self) -> dict[str, str]:
        """{scheme_code: latest NAV text} for favorites; failed codes are absent."""
        codes = self.favorites.codes()
        if not codes:
            return {}
        nav_map = await self.aggregator.fetch_many(codes)
        return {
            code: latest_nav(resp.data) or "N/A"
            for code, resp in nav_map.items()
        }

    async def fund_nav(self, scheme_code: str) -> NAVResponse:
        return await self.gateway.fetch_nav_history(scheme_code)
