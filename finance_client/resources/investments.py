# finance_client/resources/investments.py
from __future__ import annotations

from typing import Any, Dict, List

from finance_client.api import ApiClient
from finance_client.core.models import Investment, PortfolioSummary


def list_investments(api: ApiClient) -> List[Investment]:
    return [Investment.from_api(row) for row in api.get("/investments").get("data") or []]


def portfolio(api: ApiClient) -> PortfolioSummary:
    return PortfolioSummary.from_api(api.get("/investments/portfolio")["data"])


def _validate(data: Dict[str, Any]) -> None:
    if not str(data.get("symbol", "")).strip():
        raise ValueError("Symbol is required")
    if float(data.get("shares", 0)) <= 0:
        raise ValueError("Shares must be positive")
    if float(data.get("purchasePrice", 0)) <= 0:
        raise ValueError("Purchase price must be positive")


def create_investment(api: ApiClient, data: Dict[str, Any]) -> Investment:
    _validate(data)
    payload = dict(data, symbol=data["symbol"].strip().upper())
    return Investment.from_api(api.post("/investments", payload)["data"])


def update_investment(api: ApiClient, investment_id: str, data: Dict[str, Any]) -> Investment:
    return Investment.from_api(api.put(f"/investments/{investment_id}", data)["data"])


def delete_investment(api: ApiClient, investment_id: str) -> None:
    api.delete(f"/investments/{investment_id}")
