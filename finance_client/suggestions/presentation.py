# finance_client/suggestions/presentation.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from finance_client.core.models import Suggestion


class PresentationState(str, Enum):
    NONE = "none"
    LOADING = "loading"
    SHOWN = "shown"


def confidence_band(confidence: int) -> str:
    """Display label for a 0-100 confidence; never used for gating."""
    if confidence >= 80:
        return "high"
    if confidence >= 60:
        return "medium"
    return "low"


def render_suggestion(state: PresentationState, suggestion: Optional[Suggestion]) -> str:
    if state is PresentationState.LOADING:
        return "Analyzing description..."
    if state is PresentationState.SHOWN and suggestion is not None:
        text = (
            f"Suggested: {suggestion.category_name} "
            f"({confidence_band(suggestion.confidence)}, {suggestion.confidence}%)"
        )
        if suggestion.matched_keyword:
            text += f" matched '{suggestion.matched_keyword}'"
        return text
    return ""
