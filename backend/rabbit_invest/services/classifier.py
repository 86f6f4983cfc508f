"""Fund attribute inference from free-text scheme names.

mfapi.in's fund list carries no structured house/type/category fields, so
they are backfilled from the scheme name. Each attribute is its own pass over
an ordered rule table, matched as substrings of the upper-cased name; the
first rule that hits wins.

    classify("HDFC Large Cap Fund - Growth")
    -> FundAttributes(fund_house="HDFC", scheme_type="Equity Fund",
                      scheme_category="Large Cap")
"""

from typing import NamedTuple


class FundAttributes(NamedTuple):
    fund_house: str
    scheme_type: str
    scheme_category: str


# (fragment, canonical house name). First match wins, order is significant.
# Trailing spaces in "JM " and "QUANT " are part of the fragment.
FUND_HOUSES: list[tuple[str, str]] = [
    ("HDFC", "HDFC"),
    ("ICICI", "ICICI Prudential"),
    ("SBI", "SBI"),
    ("AXIS", "Axis"),
    ("KOTAK", "Kotak"),
    ("NIPPON", "Nippon India"),
    ("ADITYA BIRLA", "Aditya Birla Sun Life"),
    ("MIRAE", "Mirae Asset"),
    ("DSP", "DSP"),
    ("FRANKLIN", "Franklin Templeton"),
    ("INVESCO", "Invesco"),
    ("UTI", "UTI"),
    ("TATA", "Tata"),
    ("BAJAJ", "Bajaj Finserv"),
    ("GROWW", "Groww"),
    ("BANDHAN", "Bandhan"),
    ("MOTILAL", "Motilal Oswal"),
    ("CANARA", "Canara Robeco"),
    ("EDELWEISS", "Edelweiss"),
    ("LIC", "LIC MF"),
    ("BARODA", "Baroda BNP Paribas"),
    ("MAHINDRA", "Mahindra Manulife"),
    ("SUNDARAM", "Sundaram"),
    ("UNION", "Union"),
    ("PGIM", "PGIM India"),
    ("HSBC", "HSBC"),
    ("JM ", "JM Financial"),
    ("QUANT ", "Quant"),
    ("SAMCO", "Samco"),
    ("SHRIRAM", "Shriram"),
]

# (any-of fragments, label)
SCHEME_TYPES: list[tuple[tuple[str, ...], str]] = [
    (("ETF",), "ETF"),
    (("INDEX",), "Index Fund"),
    (("DEBT", "GILT", "LIQUID", "DURATION"), "Debt Fund"),
    (("ARBITRAGE",), "Arbitrage Fund"),
    (("ELSS", "TAX"), "ELSS"),
    (("OVERNIGHT",), "Overnight Fund"),
    (("MONEY MARKET",), "Money Market Fund"),
]
DEFAULT_SCHEME_TYPE = "Equity Fund"

SECTOR_KEYWORDS = (
    "SECTOR",
    "BANKING",
    "PHARMA",
    "IT",
    "INFRASTRUCTURE",
    "ENERGY",
    "CONSUMPTION",
    "HEALTHCARE",
    "FINANCIAL",
)

SCHEME_CATEGORIES: list[tuple[tuple[str, ...], str]] = [
    (("LARGE CAP",), "Large Cap"),
    (("MID CAP",), "Mid Cap"),
    (("SMALL CAP",), "Small Cap"),
    (("MULTI CAP",), "Multi Cap"),
    (("FLEXI CAP",), "Flexi Cap"),
    (("FOCUSED",), "Focused Fund"),
    (("VALUE",), "Value Fund"),
    (("CONTRA",), "Contra Fund"),
    (SECTOR_KEYWORDS, "Sectoral/Thematic"),
    (("INTERNATIONAL", "GLOBAL"), "International Fund"),
    (("HYBRID", "BALANCED"), "Hybrid Fund"),
]
DEFAULT_SCHEME_CATEGORY = "Diversified Equity"


def _first_match(name: str, rules: list[tuple[tuple[str, ...], str]]) -> str | None:
    for fragments, label in rules:
        if any(fragment in name for fragment in fragments):
            return label
    return None


def infer_fund_house(scheme_name: str) -> str:
    """Canonical fund house, or the first word of the name if unknown."""
    name = scheme_name.upper()
    for fragment, house in FUND_HOUSES:
        if fragment in name:
            return house
    return scheme_name.split(" ")[0]


def infer_scheme_type(scheme_name: str) -> str:
    return _first_match(scheme_name.upper(), SCHEME_TYPES) or DEFAULT_SCHEME_TYPE


def infer_scheme_category(scheme_name: str) -> str:
    return (
        _first_match(scheme_name.upper(), SCHEME_CATEGORIES)
        or DEFAULT_SCHEME_CATEGORY
    )


def classify(scheme_name: str) -> FundAttributes:
    """Derive house, type and category from a scheme name. Never fails."""
    return FundAttributes(
        fund_house=infer_fund_house(scheme_name),
        scheme_type=infer_scheme_type(scheme_name),
        scheme_category=infer_scheme_category(scheme_name),
    )
