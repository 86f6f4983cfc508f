"""Pydantic schemas for API request/response."""

from pydantic import BaseModel


class FundResponse(BaseModel):
    scheme_code: int
    scheme_name: str
    fund_house: str
    scheme_type: str
    scheme_category: str
    isin_growth: str | None = None
    isin_div_reinvestment: str | None = None
    is_selected: bool = False
    is_favorite: bool = False


class FiltersResponse(BaseModel):
    search_text: str
    selected_amc: str
    selected_category: str
    selected_type: str
    active_filter_count: int


class FundListResponse(BaseModel):
    total: int
    filters: FiltersResponse
    funds: list[FundResponse]


class FilterOptionsResponse(BaseModel):
    amcs: list[str]
    categories: list[str]
    types: list[str]


class ReloadResponse(BaseModel):
    status: str
    total: int


class NavPointResponse(BaseModel):
    date: str
    nav: str


class NavHistoryResponse(BaseModel):
    scheme_code: int
    scheme_name: str
    fund_house: str
    scheme_type: str
    scheme_category: str
    latest_nav: str | None = None
    change: float | None = None
    change_pct: float | None = None
    data: list[NavPointResponse]


class ChartPointResponse(BaseModel):
    date: str  # "YYYY-MM-DD"
    nav: float


class ComparisonFundResponse(BaseModel):
    scheme_code: int
    scheme_name: str
    fund_house: str
    scheme_category: str
    has_data: bool
    latest_nav: str | None = None
    change: float | None = None
    change_pct: float | None = None
    chart: list[ChartPointResponse]


class ComparisonResponse(BaseModel):
    can_show_comparison: bool
    auto_refresh: bool
    last_update: str | None = None
    funds: list[ComparisonFundResponse]


class FundSetResponse(BaseModel):
    name: str
    cap: int
    count: int
    is_full: bool
    funds: list[FundResponse]


class FavoriteNavResponse(BaseModel):
    navs: dict[str, str]


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    logged_in: bool
    email: str | None = None
    remembered_email: str | None = None


class SearchHistoryResponse(BaseModel):
    history: list[str]


class FiltersRequest(BaseModel):
    search_text: str = ""
    selected_amc: str = ""
    selected_category: str = ""
    selected_type: str = ""
