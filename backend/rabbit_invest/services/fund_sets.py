"""Capped fund sets: the comparison selection and the favorites list."""

import logging
from typing import Callable, Iterator

from rabbit_invest.models.fund import Fund
from rabbit_invest.services.preferences import PreferenceStore

logger = logging.getLogger(__name__)

SetListener = Callable[[str, list[str]], None]


class BoundedFundSet:
    """Set of funds keyed by scheme code, holding at most `cap` members.

    Every mutation persists the member codes under `storage_key` and then
    notifies subscribers with (name, codes).
    """

    def __init__(self, name: str, cap: int, store: PreferenceStore, storage_key: str):
        self.name = name
        self.cap = cap
        self._store = store
        self._storage_key = storage_key
        self._members: dict[int, Fund] = {}
        self._listeners: list[SetListener] = []

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Fund]:
        return iter(list(self._members.values()))

    def __contains__(self, fund: object) -> bool:
        return isinstance(fund, Fund) and self.contains(fund)

    @property
    def is_full(self) -> bool:
        return len(self._members) >= self.cap

    def contains(self, fund: Fund) -> bool:
        return fund.scheme_code in self._members

    def funds(self) -> list[Fund]:
        return list(self._members.values())

    def codes(self) -> list[str]:
        return [str(code) for code in self._members]

    def subscribe(self, listener: SetListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        codes = self.codes()
        for listener in list(self._listeners):
            listener(self.name, codes)

    async def _persist(self) -> None:
        await self._store.save_codes(self._storage_key, self.codes())

    async def add(self, fund: Fund) -> bool:
        """Insert `fund`. Returns False, leaving the set unchanged, at the cap."""
        if self.contains(fund):
            return True
        if self.is_full:
            logger.info(f"{self.name} limit of {self.cap} reached, rejected {fund.scheme_code}")
            return False
        self._members[fund.scheme_code] = fund
        await self._persist()
        self._notify()
        return True

    async def remove(self, fund: Fund) -> None:
        self._members.pop(fund.scheme_code, None)
        await self._persist()
        self._notify()

    async def toggle(self, fund: Fund) -> bool:
        """Remove if present, else add. False only when the add hits the cap."""
        if self.contains(fund):
            await self.remove(fund)
            return True
        return await self.add(fund)

    def restore(self, catalog: list[Fund], codes: list[str]) -> None:
        """Replace members with the catalog funds whose code was persisted.

        Codes that are not in the catalog are dropped.
        """
        wanted = {str(code) for code in codes}
        self._members = {
            fund.scheme_code: fund
            for fund in catalog
            if str(fund.scheme_code) in wanted
        }
        self._notify()

    def clear(self) -> None:
        """Empty the set in memory. Persisted codes are left to the store."""
        self._members = {}
        self._notify()
