"""Tests for fund search, filtering and filter options."""

from rabbit_invest.models.fund import Fund, FundFilterSpec
from rabbit_invest.services.fund_filter import (
    distinct_values,
    filter_funds,
    filter_options,
    match_options,
    search_funds,
    selected_first,
)

CATALOG = [
    Fund(scheme_code=101, scheme_name="HDFC Large Cap Fund - Growth"),
    Fund(scheme_code=102, scheme_name="HDFC Mid Cap Opportunities Fund"),
    Fund(scheme_code=103, scheme_name="Axis ELSS Tax Saver Fund"),
    Fund(scheme_code=104, scheme_name="ICICI Prudential Banking and Financial Services"),
    Fund(scheme_code=105, scheme_name="SBI Magnum Gilt Fund"),
    Fund(scheme_code=106, scheme_name="Parag Parikh Flexi Cap Fund"),
]


def codes(funds):
    return [f.scheme_code for f in funds]


def test_search_empty_query_returns_input():
    assert search_funds(CATALOG, "") is CATALOG


def test_search_matches_name_case_insensitively():
    assert codes(search_funds(CATALOG, "hdfc")) == [101, 102]


def test_search_matches_derived_fields():
    # "Sectoral" only exists as a derived category
    assert codes(search_funds(CATALOG, "icici prudential")) == [104]
    assert codes(search_funds(CATALOG, "sectoral")) == [104]


def test_search_no_results():
    assert search_funds(CATALOG, "no such fund xyz") == []


def test_filter_with_empty_spec_is_identity():
    assert filter_funds(CATALOG, FundFilterSpec()) == CATALOG


def test_filter_by_house_is_exact_and_case_insensitive():
    result = filter_funds(CATALOG, FundFilterSpec(selected_amc="hdfc"))
    assert codes(result) == [101, 102]


def test_filter_conditions_are_anded():
    spec = FundFilterSpec(selected_amc="HDFC", selected_category="Mid Cap")
    assert codes(filter_funds(CATALOG, spec)) == [102]

    spec = FundFilterSpec(search_text="fund", selected_type="ELSS")
    assert codes(filter_funds(CATALOG, spec)) == [103]

    spec = FundFilterSpec(selected_amc="Axis", selected_type="Debt Fund")
    assert filter_funds(CATALOG, spec) == []


def test_distinct_values_sorted_and_deduplicated():
    assert distinct_values(CATALOG, lambda f: f.fund_house) == [
        "Axis",
        "HDFC",
        "ICICI Prudential",
        "Parag",
        "SBI",
    ]


def test_distinct_values_drops_empty():
    funds = CATALOG + [Fund(scheme_code=999, scheme_name="")]
    assert "" not in distinct_values(funds, lambda f: f.fund_house)
    assert distinct_values(funds, lambda f: None) == []


def test_filter_options():
    options = filter_options(CATALOG)
    assert options.types == ["Debt Fund", "ELSS", "Equity Fund"]
    assert "Large Cap" in options.categories
    assert options.amcs[0] == "Axis"


def test_selected_first_is_stable():
    selected = {CATALOG[4], CATALOG[1]}
    assert codes(selected_first(CATALOG, selected)) == [102, 105, 101, 103, 104, 106]


def test_match_options():
    options = ["Flexi Cap", "Large Cap", "Sectoral/Thematic"]
    assert match_options(options, "") == options
    assert match_options(options, "CAP") == ["Flexi Cap", "Large Cap"]
