# finance_client/suggestions/requester.py
from __future__ import annotations

import logging
from typing import Optional, Protocol

import anyio

from finance_client.api import ApiClient, ApiError
from finance_client.core.models import Suggestion, TransactionType

logger = logging.getLogger(__name__)


class Requester(Protocol):
    async def suggest(self, description: str, type: TransactionType) -> Optional[Suggestion]:
        """Return a suggestion for ``description`` or ``None``."""


class SuggestionRequester:
    """Classifies a description through ``POST /categories/suggest``.

    Every failure collapses to ``None``: a missing suggestion must never block
    transaction entry.
    """

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def fetch(self, description: str, type: TransactionType) -> Optional[Suggestion]:
        description = description.strip()
        if not description:
            return None
        try:
            response = self.api.post(
                "/categories/suggest",
                {"description": description, "type": TransactionType.parse(type).value},
            )
            data = response.get("data") if isinstance(response, dict) else None
            if not data:
                return None
            if not isinstance(data, dict):
                raise TypeError(f"expected an object, got {type(data).__name__}")
            return Suggestion.from_api(data)
        except ApiError as exc:
            logger.warning("Category suggestion failed for %r: %s", description, exc)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Malformed category suggestion for %r: %s", description, exc)
        return None

    async def suggest(self, description: str, type: TransactionType) -> Optional[Suggestion]:
        return await anyio.to_thread.run_sync(self.fetch, description, type)
