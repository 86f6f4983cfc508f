"""Search, filter and ordering over the fund catalog.

Every call is an independent linear scan; derived attributes are recomputed
from the scheme name each time.
"""

from typing import Callable, Collection, Iterable

from rabbit_invest.models.fund import FilterOptions, Fund, FundFilterSpec


def search_funds(funds: list[Fund], query: str) -> list[Fund]:
    """Funds whose name, house, category or AMC contains `query` (any case)."""
    if not query:
        return funds

    q = query.lower()
    return [
        fund
        for fund in funds
        if q in fund.scheme_name.lower()
        or q in fund.fund_house.lower()
        or q in fund.scheme_category.lower()
        or q in fund.amc.lower()
    ]


def filter_funds(funds: list[Fund], spec: FundFilterSpec) -> list[Fund]:
    """Apply the search text, then narrow by exact house/category/type."""
    result = search_funds(funds, spec.search_text)

    if spec.selected_amc:
        amc = spec.selected_amc.lower()
        result = [f for f in result if f.amc.lower() == amc]

    if spec.selected_category:
        category = spec.selected_category.lower()
        result = [f for f in result if f.scheme_category.lower() == category]

    if spec.selected_type:
        scheme_type = spec.selected_type.lower()
        result = [f for f in result if f.scheme_type.lower() == scheme_type]

    return result


def distinct_values(
    funds: Iterable[Fund], selector: Callable[[Fund], str | None]
) -> list[str]:
    values = {selector(fund) for fund in funds}
    return sorted(v for v in values if v)


def filter_options(funds: list[Fund]) -> FilterOptions:
    """Option lists for the filter UI. Recompute on every catalog load."""
    return FilterOptions(
        amcs=distinct_values(funds, lambda f: f.amc),
        categories=distinct_values(funds, lambda f: f.scheme_category),
        types=distinct_values(funds, lambda f: f.scheme_type),
    )


def selected_first(funds: list[Fund], selected: Collection[Fund]) -> list[Fund]:
    """Stable partition: funds in `selected` move to the top."""
    chosen = [f for f in funds if f in selected]
    rest = [f for f in funds if f not in selected]
    return chosen + rest


def match_options(options: list[str], text: str) -> list[str]:
    """Narrow a filter option list by a case-insensitive substring."""
    if not text:
        return options
    needle = text.lower()
    return [option for option in options if needle in option.lower()]
