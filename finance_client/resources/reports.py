# finance_client/resources/reports.py
from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from finance_client.api import ApiClient
from finance_client.core.models import BalanceReport, CategoryReport, MonthlyTrend, ReportSummary


def _period_params(
    month: Optional[int] = None,
    year: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Dict[str, object]:
    return {
        "month": month,
        "year": year,
        "startDate": start_date.isoformat() if start_date else None,
        "endDate": end_date.isoformat() if end_date else None,
    }


def summary(api: ApiClient, **period) -> ReportSummary:
    return ReportSummary.from_api(api.get("/reports/summary", _period_params(**period))["data"])


def by_category(api: ApiClient, **period) -> Dict[str, List[CategoryReport]]:
    data = api.get("/reports/by-category", _period_params(**period))["data"]
    return {
        "income": [CategoryReport.from_api(row) for row in data.get("income") or []],
        "expense": [CategoryReport.from_api(row) for row in data.get("expense") or []],
    }


def balance(api: ApiClient) -> BalanceReport:
    return BalanceReport.from_api(api.get("/reports/balance")["data"])


def monthly_trend(api: ApiClient, months: int = 6) -> List[MonthlyTrend]:
    rows = api.get("/reports/monthly-trend", {"months": months})["data"] or []
    return [MonthlyTrend.from_api(row) for row in rows]


def monthly_trend_frame(trend: List[MonthlyTrend]) -> pd.DataFrame:
    """Trend rows as a DataFrame indexed by month, ready for charting."""
    frame = pd.DataFrame(
        [{"month": t.month, "income": t.income, "expense": t.expense, "balance": t.balance} for t in trend],
        columns=["month", "income", "expense", "balance"],
    )
    return frame.sort_values("month").set_index("month")
