# finance_client/core/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @classmethod
    def parse(cls, value) -> "TransactionType":
        if isinstance(value, cls):
            return value
        return cls(str(value).upper())


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class Suggestion:
    """Server-proposed category for a transaction description."""

    category_id: str
    category_name: str
    confidence: int
    matched_keyword: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Suggestion":
        return cls(
            category_id=str(data["categoryId"]),
            category_name=data.get("categoryName", ""),
            confidence=int(round(float(data.get("confidence", 0)))),
            matched_keyword=data.get("matchedKeyword") or None,
        )


@dataclass
class User:
    id: str
    name: str
    email: str
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            email=data.get("email", ""),
            created_at=data.get("createdAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "createdAt": self.created_at}


@dataclass
class Category:
    id: str
    name: str
    type: TransactionType
    color: str = ""
    icon: str = ""
    keywords: List[str] = field(default_factory=list)
    transaction_count: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            type=TransactionType.parse(data.get("type", "EXPENSE")),
            color=data.get("color") or "",
            icon=data.get("icon") or "",
            keywords=list(data.get("keywords") or []),
            transaction_count=int((data.get("_count") or {}).get("transactions", 0)),
        )


@dataclass
class Transaction:
    id: str
    type: TransactionType
    amount: float
    date: date
    category_id: str
    description: Optional[str] = None
    category_name: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Transaction":
        category = data.get("category") or {}
        return cls(
            id=str(data["id"]),
            type=TransactionType.parse(data["type"]),
            amount=float(data["amount"]),
            date=date.fromisoformat(str(data["date"])[:10]),
            category_id=str(data.get("categoryId") or category.get("id", "")),
            description=data.get("description"),
            category_name=category.get("name", ""),
        )


@dataclass
class TransactionFilters:
    type: Optional[TransactionType] = None
    category_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    page: int = 1
    limit: int = 10

    def to_params(self) -> Dict[str, Any]:
        return {
            "type": self.type.value if self.type else None,
            "categoryId": self.category_id,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "page": self.page or 1,
            "limit": self.limit or 10,
        }


@dataclass
class Page:
    items: list
    total: int
    page: int
    limit: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


@dataclass
class ReportSummary:
    start_date: str
    end_date: str
    income_total: float
    income_count: int
    expense_total: float
    expense_count: int
    balance: float
    savings_rate: float

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ReportSummary":
        period = data.get("period") or {}
        income = data.get("income") or {}
        expense = data.get("expense") or {}
        return cls(
            start_date=period.get("startDate", ""),
            end_date=period.get("endDate", ""),
            income_total=float(income.get("total", 0)),
            income_count=int(income.get("count", 0)),
            expense_total=float(expense.get("total", 0)),
            expense_count=int(expense.get("count", 0)),
            balance=float(data.get("balance", 0)),
            savings_rate=float(data.get("savingsRate", 0)),
        )


@dataclass
class CategoryReport:
    category: str
    color: str
    type: TransactionType
    total: float
    count: int
    percentage: float

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CategoryReport":
        category = data.get("category") or {}
        return cls(
            category=category.get("name", ""),
            color=category.get("color") or "",
            type=TransactionType.parse(data.get("type") or category.get("type", "EXPENSE")),
            total=float(data.get("total", 0)),
            count=int(data.get("count", 0)),
            percentage=float(data.get("percentage", 0)),
        )


@dataclass
class BalanceReport:
    total_income: float
    total_expense: float
    current_balance: float

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "BalanceReport":
        return cls(
            total_income=float(data.get("totalIncome", 0)),
            total_expense=float(data.get("totalExpense", 0)),
            current_balance=float(data.get("currentBalance", 0)),
        )


@dataclass
class MonthlyTrend:
    month: str
    income: float
    expense: float
    balance: float

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "MonthlyTrend":
        return cls(
            month=data["month"],
            income=float(data.get("income", 0)),
            expense=float(data.get("expense", 0)),
            balance=float(data.get("balance", 0)),
        )


@dataclass
class Position:
    id: str
    symbol: str
    name: str
    shares: float
    purchase_price: float
    current_price: float
    current_value: float
    gain: float
    gain_percent: float
    day_change: float = 0.0
    day_change_percent: float = 0.0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Position":
        return cls(
            id=str(data["id"]),
            symbol=data.get("symbol", ""),
            name=data.get("name") or data.get("symbol", ""),
            shares=float(data.get("shares", 0)),
            purchase_price=float(data.get("purchasePrice", 0)),
            current_price=float(data.get("currentPrice", 0)),
            current_value=float(data.get("currentValue", 0)),
            gain=float(data.get("gain", 0)),
            gain_percent=float(data.get("gainPercent", 0)),
            day_change=float(data.get("dayChange", 0)),
            day_change_percent=float(data.get("dayChangePercent", 0)),
        )


@dataclass
class Investment:
    id: str
    symbol: str
    name: str
    shares: float
    purchase_price: float
    purchase_date: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Investment":
        return cls(
            id=str(data["id"]),
            symbol=data.get("symbol", ""),
            name=data.get("name") or data.get("symbol", ""),
            shares=float(data.get("shares", 0)),
            purchase_price=float(data.get("purchasePrice", 0)),
            purchase_date=data.get("purchaseDate"),
            notes=data.get("notes"),
        )


@dataclass
class PortfolioSummary:
    total_invested: float
    current_value: float
    total_gain: float
    total_gain_percent: float
    positions: List[Position] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PortfolioSummary":
        return cls(
            total_invested=float(data.get("totalInvested", 0)),
            current_value=float(data.get("currentValue", 0)),
            total_gain=float(data.get("totalGain", 0)),
            total_gain_percent=float(data.get("totalGainPercent", 0)),
            positions=[Position.from_api(p) for p in data.get("positions") or []],
        )


@dataclass
class Insight:
    id: str
    type: str
    title: str
    description: str
    icon: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Insight":
        return cls(
            id=str(data.get("id", "")),
            type=data.get("type", "tip"),
            title=data.get("title", ""),
            description=data.get("description", ""),
            icon=data.get("icon", ""),
        )


@dataclass
class InsightsData:
    insights: List[Insight]
    generated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "InsightsData":
        return cls(
            insights=[Insight.from_api(i) for i in data.get("insights") or []],
            generated_at=data.get("generatedAt"),
        )


@dataclass
class CurrencyRate:
    symbol: str
    rate: float
    inverse_rate: float
    variation: float
    trend: str
    sparkline: List[float] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CurrencyRate":
        return cls(
            symbol=data["symbol"],
            rate=float(data.get("rate", 0)),
            inverse_rate=float(data.get("inverseRate", 0)),
            variation=float(data.get("variation", 0)),
            trend=data.get("trend", "up"),
            sparkline=[float(v) for v in data.get("sparkline") or []],
        )


@dataclass
class ExchangeWidgetData:
    base: str
    date: str
    currencies: List[CurrencyRate]

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ExchangeWidgetData":
        return cls(
            base=data.get("base", ""),
            date=data.get("date", ""),
            currencies=[CurrencyRate.from_api(c) for c in data.get("currencies") or []],
        )
