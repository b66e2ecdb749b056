"""Interactive transaction entry (prompt_toolkit-based).

The description prompt runs the category suggestion flow live: every edit is
fed to the form, the bottom toolbar shows the current suggestion, Ctrl-A
accepts it and Ctrl-X dismisses it for the rest of the session.
"""

from __future__ import annotations

from collections.abc import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.application.current import get_app_or_none
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style

from finance_client.core.models import Category
from finance_client.forms import TransactionForm

HINT = " Ctrl-A accept suggestion • Ctrl-X dismiss"

style = Style.from_dict({"bottom-toolbar": "fg:#888888 bg:default noreverse"})


def _refresh() -> None:
    app = get_app_or_none()
    if app is not None:
        app.invalidate()


async def prompt_description(
    form: TransactionForm,
    *,
    session: PromptSession | None = None,
    message: str = "Description: ",
) -> str:
    """Read a description while showing category suggestions as the user types."""

    kb = KeyBindings()

    @kb.add("c-a", eager=True)
    def _(event) -> None:
        if form.accept_suggestion():
            event.app.invalidate()

    @kb.add("c-x", eager=True)
    def _(event) -> None:
        form.dismiss_suggestion()
        event.app.invalidate()

    sess: PromptSession = session or PromptSession()

    def _on_text_changed(buffer) -> None:
        form.set_description(buffer.text)

    def _toolbar() -> str:
        return form.suggestions.render() or HINT

    previous = form.suggestions.on_change
    form.suggestions.on_change = _refresh
    sess.default_buffer.on_text_changed += _on_text_changed
    try:
        text = await sess.prompt_async(
            message,
            key_bindings=kb,
            bottom_toolbar=_toolbar,
            style=style,
        )
    finally:
        sess.default_buffer.on_text_changed -= _on_text_changed
        form.suggestions.on_change = previous

    form.description = text
    return text


def select_category(
    categories: Sequence[Category],
    *,
    session: PromptSession | None = None,
    message: str = "Category: ",
) -> str | None:
    """Pick a category by name; returns its id or ``None`` for an unknown name."""
    by_name = {c.name.lower(): c.id for c in categories}
    completer = WordCompleter([c.name for c in categories], ignore_case=True, match_middle=True, sentence=True)
    sess: PromptSession = session or PromptSession()
    result = sess.prompt(message, completer=completer)
    return by_name.get(result.strip().lower())
