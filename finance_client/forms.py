# finance_client/forms.py
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Optional

from finance_client.api import ApiClient
from finance_client.core.models import Category, FormMode, Transaction, TransactionType
from finance_client.resources import transactions
from finance_client.suggestions.controller import SuggestionController


class FormError(ValueError):
    def __init__(self, errors: Dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class TransactionForm:
    """One create/edit session of a transaction.

    The suggestion controller is owned by the form and restarted every time
    the form is opened.
    """

    def __init__(self, suggestions: SuggestionController, categories: Iterable[Category] = ()) -> None:
        self.suggestions = suggestions
        self.categories = {c.id: c for c in categories}
        self.editing_id: Optional[str] = None
        self.type = TransactionType.EXPENSE
        self.amount: Optional[float] = None
        self.description = ""
        self.date: Optional[date] = None
        self.category_id: Optional[str] = None

    @property
    def mode(self) -> FormMode:
        return FormMode.EDIT if self.editing_id else FormMode.CREATE

    def categories_for_type(self) -> list:
        return [c for c in self.categories.values() if c.type is self.type]

    def open_create(self, today: Optional[date] = None) -> None:
        self.editing_id = None
        self.type = TransactionType.EXPENSE
        self.amount = None
        self.description = ""
        self.date = today or date.today()
        self.category_id = None
        self.suggestions.start_session(FormMode.CREATE, self.type)

    def open_edit(self, tx: Transaction) -> None:
        self.editing_id = tx.id
        self.type = tx.type
        self.amount = tx.amount
        self.description = tx.description or ""
        self.date = tx.date
        self.category_id = tx.category_id
        self.suggestions.start_session(FormMode.EDIT, tx.type, self.description, tx.category_id)

    def set_description(self, text: str) -> None:
        self.description = text
        self.suggestions.set_description(text)

    def set_type(self, transaction_type: TransactionType) -> None:
        self.type = TransactionType.parse(transaction_type)
        current = self.categories.get(self.category_id or "")
        if current is not None and current.type is not self.type:
            self.set_category(None)
        self.suggestions.set_type(self.type)

    def set_category(self, category_id: Optional[str]) -> None:
        self.category_id = category_id or None
        self.suggestions.set_category(self.category_id)

    def accept_suggestion(self) -> Optional[str]:
        category_id = self.suggestions.accept()
        if category_id:
            self.category_id = category_id
        return category_id

    def dismiss_suggestion(self) -> None:
        self.suggestions.dismiss()

    def validate(self) -> Dict[str, str]:
        errors = {}
        if self.amount is None or self.amount <= 0:
            errors["amount"] = "Amount must be positive"
        if self.date is None:
            errors["date"] = "Date is required"
        if not self.category_id:
            errors["categoryId"] = "Category is required"
        return errors

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": self.type.value,
            "amount": self.amount,
            "date": self.date.isoformat() if self.date else None,
            "categoryId": self.category_id,
        }
        if self.description.strip():
            payload["description"] = self.description.strip()
        return payload

    def submit(self, api: ApiClient) -> Transaction:
        errors = self.validate()
        if errors:
            raise FormError(errors)
        if self.editing_id:
            saved = transactions.update_transaction(api, self.editing_id, self.to_payload())
        else:
            saved = transactions.create_transaction(api, self.to_payload())
        self.suggestions.close()
        return saved
