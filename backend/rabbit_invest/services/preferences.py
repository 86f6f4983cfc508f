"""Local preference store: string keys to JSON values in SQLite."""

import json
import logging
from datetime import datetime
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rabbit_invest.config import SEARCH_HISTORY_LIMIT
from rabbit_invest.models.fund import FundFilterSpec
from rabbit_invest.models.preference import Preference

logger = logging.getLogger(__name__)

USER_EMAIL_KEY = "user_email"
SELECTED_FUNDS_KEY = "selected_funds"
LAST_FILTERS_KEY = "last_filters"
SEARCH_HISTORY_KEY = "search_history"
FAVORITE_FUNDS_KEY = "favorite_funds"


class PreferenceStore:
    """Key-value persistence for the user's email, selections, filters,
    search history and favorites. Last write wins."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        search_history_limit: int = SEARCH_HISTORY_LIMIT,
    ):
        self._session_factory = session_factory
        self._search_history_limit = search_history_limit

    async def get(self, key: str, default: Any = None) -> Any:
        async with self._session_factory() as session:
            pref = await session.get(Preference, key)
            if pref is None:
                return default
            try:
                return json.loads(pref.value)
            except json.JSONDecodeError:
                logger.warning(f"Ignoring unreadable preference {key!r}")
                return default

    async def set(self, key: str, value: Any) -> None:
        async with self._session_factory() as session:
            pref = await session.get(Preference, key)
            encoded = json.dumps(value, ensure_ascii=False)
            if pref is None:
                session.add(Preference(key=key, value=encoded))
            else:
                pref.value = encoded
                pref.updated_at = datetime.now().isoformat()
            await session.commit()

    async def delete(self, key: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(Preference).where(Preference.key == key))
            await session.commit()

    async def clear_all(self) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(Preference))
            await session.commit()

    # --- User ---

    async def get_user_email(self) -> str | None:
        return await self.get(USER_EMAIL_KEY)

    async def save_user_email(self, email: str) -> None:
        await self.set(USER_EMAIL_KEY, email)

    # --- Fund code lists ---

    async def get_codes(self, key: str) -> list[str]:
        codes = await self.get(key, [])
        if not isinstance(codes, list):
            return []
        return [str(code) for code in codes]

    async def save_codes(self, key: str, codes: list[str]) -> None:
        await self.set(key, [str(code) for code in codes])

    async def get_selected_fund_codes(self) -> list[str]:
        return await self.get_codes(SELECTED_FUNDS_KEY)

    async def get_favorite_fund_codes(self) -> list[str]:
        return await self.get_codes(FAVORITE_FUNDS_KEY)

    # --- Filters ---

    async def save_filters(self, spec: FundFilterSpec) -> None:
        await self.set(LAST_FILTERS_KEY, spec.model_dump(by_alias=True))

    async def get_last_filters(self) -> FundFilterSpec:
        data = await self.get(LAST_FILTERS_KEY)
        if not isinstance(data, dict):
            return FundFilterSpec()
        # Missing or non-string fields fall back to "" (unconstrained)
        values = {k: v for k, v in data.items() if isinstance(v, str)}
        return FundFilterSpec.model_validate(values)

    # --- Search history ---

    async def get_search_history(self) -> list[str]:
        history = await self.get(SEARCH_HISTORY_KEY, [])
        return [str(term) for term in history] if isinstance(history, list) else []

    async def add_to_search_history(self, term: str) -> list[str]:
        """Insert `term` at the front, dropping an older copy and the overflow."""
        if not term:
            return await self.get_search_history()
        history = [t for t in await self.get_search_history() if t != term]
        history.insert(0, term)
        history = history[: self._search_history_limit]
        await self.set(SEARCH_HISTORY_KEY, history)
        return history

    async def clear_search_history(self) -> None:
        await self.delete(SEARCH_HISTORY_KEY)
