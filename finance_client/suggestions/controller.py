# finance_client/suggestions/controller.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Set

from finance_client.core.models import FormMode, Suggestion, TransactionType
from finance_client.suggestions.debounce import Debouncer
from finance_client.suggestions.presentation import PresentationState, render_suggestion
from finance_client.suggestions.requester import Requester
from finance_client.suggestions.suppression import SuppressionState

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LENGTH = 3


class SuggestionController:
    """Session-scoped state for description-driven category suggestions.

    Each input change bumps ``generation``; a response is applied only if the
    generation it was issued under is still current, so the last request wins
    regardless of arrival order.
    """

    def __init__(
        self,
        requester: Requester,
        *,
        delay: float = 0.5,
        min_length: int = MIN_DESCRIPTION_LENGTH,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.requester = requester
        self.min_length = min_length
        self.on_change = on_change
        self.debouncer = Debouncer(delay)
        self.suppression = SuppressionState()

        self.mode = FormMode.CREATE
        self.description = ""
        self.transaction_type = TransactionType.EXPENSE
        self.category_id: Optional[str] = None

        self.suggestion: Optional[Suggestion] = None
        self.loading = False
        self.generation = 0
        self._tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(
        self,
        mode: FormMode = FormMode.CREATE,
        transaction_type: TransactionType = TransactionType.EXPENSE,
        description: str = "",
        category_id: Optional[str] = None,
    ) -> None:
        self._invalidate()
        self.suppression.reset()
        self.mode = mode
        self.transaction_type = TransactionType.parse(transaction_type)
        self.description = description or ""
        self.category_id = category_id or None

    def close(self) -> None:
        self._invalidate()

    # ------------------------------------------------------------------
    # Input changes
    # ------------------------------------------------------------------

    def set_description(self, text: str) -> None:
        text = text or ""
        if text == self.description:
            return
        self.description = text
        self._invalidate()
        self._schedule()

    def set_type(self, transaction_type: TransactionType) -> None:
        transaction_type = TransactionType.parse(transaction_type)
        if transaction_type is self.transaction_type:
            return
        self.transaction_type = transaction_type
        # a new type is a fresh intent
        self.suppression.reset()
        self._invalidate()
        self._schedule()

    def set_category(self, category_id: Optional[str]) -> None:
        category_id = category_id or None
        if category_id == self.category_id:
            return
        self.category_id = category_id
        self._invalidate()
        self._schedule()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def accept(self) -> Optional[str]:
        """Copy the shown suggestion into the category field."""
        if self.suggestion is None:
            return None
        category_id = self.suggestion.category_id
        self.category_id = category_id
        self._invalidate()
        return category_id

    def dismiss(self) -> None:
        self.suppression.suppress()
        self._invalidate()

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    @property
    def eligible(self) -> bool:
        return (
            self.mode is FormMode.CREATE
            and not self.category_id
            and not self.suppression
            and len(self.description.strip()) >= self.min_length
        )

    @property
    def state(self) -> PresentationState:
        if self.loading:
            return PresentationState.LOADING
        if self.suggestion is not None:
            return PresentationState.SHOWN
        return PresentationState.NONE

    def render(self) -> str:
        return render_suggestion(self.state, self.suggestion)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _invalidate(self) -> None:
        self.generation += 1
        self.debouncer.cancel()
        changed = self.loading or self.suggestion is not None
        self.suggestion = None
        self.loading = False
        if changed:
            self._notify()

    def _schedule(self) -> None:
        if self.eligible:
            self.debouncer.call(self._fire)

    def _fire(self) -> None:
        if not self.eligible:
            return
        self.loading = True
        self._notify()
        task = asyncio.ensure_future(
            self._request(self.generation, self.description.strip(), self.transaction_type)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _request(self, generation: int, description: str, transaction_type: TransactionType) -> None:
        logger.debug("Requesting suggestion #%d for %r (%s)", generation, description, transaction_type.value)
        try:
            result = await self.requester.suggest(description, transaction_type)
        except Exception as exc:
            logger.warning("Suggestion request #%d failed: %s", generation, exc)
            result = None
        if generation != self.generation:
            logger.debug("Dropping stale suggestion #%d (current #%d)", generation, self.generation)
            return
        self.loading = False
        self.suggestion = result
        self._notify()

    async def settle(self) -> None:
        """Wait until no timer is armed and no request is in flight."""
        while self.debouncer.pending or self._tasks:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                await asyncio.sleep(self.debouncer.delay)
