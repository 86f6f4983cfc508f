"""Fund, NAV and filter models decoded from mfapi.in payloads."""

import math
import re
from datetime import date, datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from rabbit_invest.services.classifier import (
    infer_fund_house,
    infer_scheme_category,
    infer_scheme_type,
)

# Decimal text with an optional sign and exponent. Underscores, padding and nan/inf do not match.
NAV_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


class Fund(BaseModel):
    """A scheme from the `/mf` listing.

    Identity is the scheme code alone. House, type and category are derived
    from the name on every access.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    scheme_code: int = Field(alias="schemeCode")
    scheme_name: str = Field(alias="schemeName")
    isin_growth: str | None = Field(default=None, alias="isinGrowth")
    isin_div_reinvestment: str | None = Field(
        default=None, alias="isinDivReinvestment"
    )

    @property
    def fund_house(self) -> str:
        return infer_fund_house(self.scheme_name)

    @property
    def amc(self) -> str:
        return self.fund_house

    @property
    def scheme_type(self) -> str:
        return infer_scheme_type(self.scheme_name)

    @property
    def scheme_category(self) -> str:
        return infer_scheme_category(self.scheme_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fund):
            return NotImplemented
        return self.scheme_code == other.scheme_code

    def __hash__(self) -> int:
        return hash(self.scheme_code)


class NAVPoint(BaseModel):
    date: str  # "dd-mm-yyyy"
    nav: str

    @property
    def parsed_date(self) -> date | None:
        try:
            parsed = datetime.strptime(self.date, "%d-%m-%Y")
        except ValueError:
            return None
        return parsed.replace(tzinfo=timezone.utc).date()

    @property
    def parsed_nav(self) -> float | None:
        if not NAV_PATTERN.fullmatch(self.nav):
            return None
        value = float(self.nav)
        return value if math.isfinite(value) else None


class NAVMeta(BaseModel):
    fund_house: str
    scheme_type: str
    scheme_category: str
    scheme_code: int
    scheme_name: str
    isin_growth: str | None = None
    isin_div_reinvestment: str | None = None


class NAVResponse(BaseModel):
    """Payload of `/mf/{scheme_code}`. `data` is newest first as served."""

    meta: NAVMeta
    data: list[NAVPoint]
    status: str


class FundFilterSpec(BaseModel):
    """Search text plus exact-match house/category/type. Empty means any."""

    model_config = ConfigDict(populate_by_name=True)

    search_text: str = Field(default="", alias="searchText")
    selected_amc: str = Field(default="", alias="selectedAMC")
    selected_category: str = Field(default="", alias="selectedCategory")
    selected_type: str = Field(default="", alias="selectedType")

    @property
    def active_filter_count(self) -> int:
        return sum(
            1
            for value in (self.selected_amc, self.selected_category, self.selected_type)
            if value
        )


class FilterOptions(BaseModel):
    amcs: list[str] = []
    categories: list[str] = []
    types: list[str] = []
