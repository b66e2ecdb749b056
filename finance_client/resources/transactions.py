# finance_client/resources/transactions.py
from __future__ import annotations

from typing import Any, Dict, Optional

from finance_client.api import ApiClient
from finance_client.core.models import Page, Transaction, TransactionFilters


def list_transactions(api: ApiClient, filters: Optional[TransactionFilters] = None) -> Page:
    filters = filters or TransactionFilters()
    response = api.get("/transactions", filters.to_params())
    meta = response.get("meta") or {}
    return Page(
        items=[Transaction.from_api(row) for row in response.get("data") or []],
        total=int(meta.get("total", 0)),
        page=int(meta.get("page", filters.page)),
        limit=int(meta.get("limit", filters.limit)),
        total_pages=int(meta.get("totalPages", 0)),
    )


def create_transaction(api: ApiClient, data: Dict[str, Any]) -> Transaction:
    return Transaction.from_api(api.post("/transactions", data)["data"])


def update_transaction(api: ApiClient, transaction_id: str, data: Dict[str, Any]) -> Transaction:
    return Transaction.from_api(api.put(f"/transactions/{transaction_id}", data)["data"])


def delete_transaction(api: ApiClient, transaction_id: str) -> None:
    api.delete(f"/transactions/{transaction_id}")
