# finance_client/resources/categories.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from finance_client.api import ApiClient
from finance_client.core.models import Category, TransactionType

MAX_KEYWORDS = 20


def normalize_keywords(keywords: Iterable[str], limit: int = MAX_KEYWORDS) -> List[str]:
    """Trim and lowercase keywords, dropping blanks and duplicates."""
    result: List[str] = []
    for kw in keywords:
        clean = kw.strip().lower()
        if clean and clean not in result and len(result) < limit:
            result.append(clean)
    return result


def list_categories(api: ApiClient, type: Optional[TransactionType] = None) -> List[Category]:
    params = {"type": type.value} if type else None
    return [Category.from_api(row) for row in api.get("/categories", params).get("data") or []]


def _payload(data: Dict[str, Any]) -> Dict[str, Any]:
    payload = dict(data)
    if "type" in payload:
        payload["type"] = TransactionType.parse(payload["type"]).value
    if "keywords" in payload:
        payload["keywords"] = normalize_keywords(payload["keywords"] or [])
    return payload


def create_category(api: ApiClient, data: Dict[str, Any]) -> Category:
    if not str(data.get("name", "")).strip():
        raise ValueError("Category name is required")
    return Category.from_api(api.post("/categories", _payload(data))["data"])


def update_category(api: ApiClient, category_id: str, data: Dict[str, Any]) -> Category:
    return Category.from_api(api.put(f"/categories/{category_id}", _payload(data))["data"])


def delete_category(api: ApiClient, category_id: str) -> None:
    api.delete(f"/categories/{category_id}")
