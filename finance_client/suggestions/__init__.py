# finance_client/suggestions/__init__.py
from finance_client.suggestions.controller import SuggestionController
from finance_client.suggestions.presentation import PresentationState, confidence_band, render_suggestion
from finance_client.suggestions.requester import SuggestionRequester

__all__ = [
    "PresentationState",
    "SuggestionController",
    "SuggestionRequester",
    "confidence_band",
    "render_suggestion",
]
