"""NAV comparison analytics.

History is re-sorted by parsed date (newest first) before anything is read
from it, so "latest" and "daily change" do not depend on the order the
gateway served.

Algorithm:
    change = nav[latest] - nav[previous]
    change_pct = change / nav[previous] * 100
"""

from typing import Any, NamedTuple

import pandas as pd

from rabbit_invest.config import CHART_POINTS
from rabbit_invest.models.fund import NAVPoint


class NavChange(NamedTuple):
    value: float
    percentage: float


def nav_frame(points: list[NAVPoint]) -> pd.DataFrame:
    """Parseable points as a DataFrame, newest first.

    Columns: date (Timestamp), nav (float), date_text, nav_text (as served).
    Parsing is NAVPoint's; rows it cannot parse are dropped.
    """
    df = pd.DataFrame(
        {
            "date_text": [p.date for p in points],
            "nav_text": [p.nav for p in points],
            "date": [p.parsed_date for p in points],
            "nav": [p.parsed_nav for p in points],
        },
        columns=["date_text", "nav_text", "date", "nav"],
        dtype=object,
    )
    df["date"] = pd.to_datetime(df["date"])
    df["nav"] = df["nav"].astype(float)
    df = df.dropna(subset=["date", "nav"])
    return df.sort_values("date", ascending=False, kind="stable").reset_index(drop=True)


def latest_nav(points: list[NAVPoint]) -> str | None:
    df = nav_frame(points)
    if df.empty:
        return None
    return str(df.iloc[0]["nav_text"])


def nav_change(points: list[NAVPoint]) -> NavChange | None:
    """Change between the two most recent NAVs, or None if not computable."""
    df = nav_frame(points)
    if len(df) < 2:
        return None

    latest = float(df.iloc[0]["nav"])
    previous = float(df.iloc[1]["nav"])
    if previous == 0:
        return None

    change = latest - previous
    return NavChange(value=change, percentage=change / previous * 100)


def chart_points(points: list[NAVPoint], limit: int = CHART_POINTS) -> list[dict[str, Any]]:
    """The most recent `limit` points in chronological order: [{date, nav}]."""
    recent = nav_frame(points).head(limit).iloc[::-1]
    return [
        {"date": row.date.strftime("%Y-%m-%d"), "nav": float(row.nav)}
        for row in recent.itertuples(index=False)
    ]
