from __future__ import annotations

from datetime import date
from pathlib import Path
from urllib.parse import quote

from fastapi import FastAPI, Form, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from finance_client import utils
from finance_client.api import ApiClient, ApiError, SessionExpiredError
from finance_client.auth import AuthSession, TokenStore
from finance_client.config import configure_logging, load_config, suggestion_delay
from finance_client.core.models import TransactionFilters, TransactionType
from finance_client.resources import categories, exchange, insights, investments, reports, transactions
from finance_client.suggestions import SuggestionRequester, confidence_band
from webapp import charts

TOKEN_COOKIE = "finance_token"

app = FastAPI(title="Finance UI")
templates = Jinja2Templates(directory=str(Path(__file__).with_name("templates")))
templates.env.filters.update(
    currency=utils.format_currency,
    date=utils.format_date,
    month=utils.format_month,
    percentage=utils.format_percentage,
    initials=utils.get_initials,
)

configure_logging()
config = load_config()


class LoginRequired(Exception):
    """Raised by pages that need the session cookie when it is missing."""


def _client(request: Request, required: bool = True) -> ApiClient:
    store = TokenStore()
    store.token = request.cookies.get(TOKEN_COOKIE)
    if required and not store.token:
        raise LoginRequired()
    return ApiClient(base_url=str(config["api_url"]), token_store=store, timeout=float(config.get("timeout", 10)))


def _redirect(path: str, message: str | None = None, error: str | None = None) -> RedirectResponse:
    if message:
        path += f"?message={quote(message)}"
    elif error:
        path += f"?error={quote(error)}"
    return RedirectResponse(path, status_code=303)


def _to_login() -> RedirectResponse:
    response = _redirect("/login", error="Session expired. Please log in again.")
    response.delete_cookie(TOKEN_COOKIE)
    return response


def _optional(fn, *args, **kwargs):
    # widgets degrade to an empty state instead of failing the whole page
    try:
        return fn(*args, **kwargs)
    except SessionExpiredError:
        raise
    except ApiError:
        return None


@app.exception_handler(SessionExpiredError)
async def session_expired(request: Request, exc: SessionExpiredError):
    return _to_login()


@app.exception_handler(LoginRequired)
async def login_required(request: Request, exc: LoginRequired):
    return _redirect("/login")


@app.exception_handler(ApiError)
async def api_error(request: Request, exc: ApiError):
    if exc.status == 401:
        return _to_login()
    return _redirect("/", error=exc.message)


@app.get("/login")
async def login_page(request: Request, error: str | None = None, message: str | None = None):
    return templates.TemplateResponse(request, "login.html", {"error": error, "message": message})


@app.post("/login")
async def login(email: str = Form(...), password: str = Form(...)):
    api = ApiClient(base_url=str(config["api_url"]))
    session = AuthSession(api, TokenStore())
    try:
        session.login(email.strip(), password)
    except ApiError as exc:
        return _redirect("/login", error=exc.message)
    response = _redirect("/")
    response.set_cookie(TOKEN_COOKIE, session.store.token or "", httponly=True, samesite="lax")
    return response


@app.get("/logout")
async def logout():
    response = _redirect("/login", message="Logged out")
    response.delete_cookie(TOKEN_COOKIE)
    return response


@app.get("/")
async def dashboard(request: Request, message: str | None = None, error: str | None = None):
    api = _client(request)
    month, year = utils.current_month_year()
    try:
        summary = reports.summary(api, month=month, year=year)
        balance = reports.balance(api)
        by_category = reports.by_category(api, month=month, year=year)
        trend = reports.monthly_trend(api, int(config["reports"]["trend_months"]))
    except SessionExpiredError:
        raise
    except ApiError as exc:
        if exc.status == 401:
            return _to_login()
        # redirecting here would loop back to this page
        summary = balance = None
        by_category, trend = {"income": [], "expense": []}, []
        error = error or exc.message
    exchange_cfg = config["exchange"]
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "summary": summary,
            "balance": balance,
            "trend_chart": charts.trend_chart(reports.monthly_trend_frame(trend)),
            "expense_chart": charts.category_pie(by_category["expense"], "Expenses by category"),
            "insights": _optional(insights.get_insights, api),
            "exchange": _optional(exchange.exchange_widget, api, exchange_cfg["base"], exchange_cfg["symbols"]),
            "message": message,
            "error": error,
        },
    )


@app.get("/transactions")
async def transactions_page(
    request: Request,
    page: int = 1,
    type: str | None = None,
    message: str | None = None,
    error: str | None = None,
):
    api = _client(request)
    tx_type = TransactionType.parse(type) if type else None
    result = transactions.list_transactions(api, TransactionFilters(type=tx_type, page=page))
    return templates.TemplateResponse(
        request,
        "transactions.html",
        {
            "page": result,
            "categories": categories.list_categories(api),
            "type": tx_type.value if tx_type else "",
            "today": date.today().isoformat(),
            "suggest_delay_ms": int(suggestion_delay(config) * 1000),
            "message": message,
            "error": error,
        },
    )


@app.post("/transactions")
async def create_transaction(
    request: Request,
    type: str = Form(...),
    amount: float = Form(...),
    tx_date: str = Form(..., alias="date"),
    category_id: str = Form(""),
    description: str = Form(""),
):
    api = _client(request)
    if amount <= 0:
        return _redirect("/transactions", error="Amount must be positive")
    if not category_id:
        return _redirect("/transactions", error="Category is required")
    data = {
        "type": TransactionType.parse(type).value,
        "amount": amount,
        "date": tx_date,
        "categoryId": category_id,
    }
    if description.strip():
        data["description"] = description.strip()
    try:
        transactions.create_transaction(api, data)
    except SessionExpiredError:
        raise
    except ApiError as exc:
        return _redirect("/transactions", error=exc.message)
    return _redirect("/transactions", message="Transaction saved")


@app.post("/transactions/{transaction_id}/delete")
async def delete_transaction(request: Request, transaction_id: str):
    transactions.delete_transaction(_client(request), transaction_id)
    return _redirect("/transactions", message="Transaction deleted")


class SuggestRequest(BaseModel):
    description: str
    type: TransactionType


@app.post("/transactions/suggest")
async def suggest_category(request: Request, body: SuggestRequest):
    """Classify a description for the transaction form; never fails."""
    suggestion = await SuggestionRequester(_client(request, required=False)).suggest(body.description, body.type)
    if suggestion is None:
        return JSONResponse({"suggestion": None})
    return JSONResponse(
        {
            "suggestion": {
                "categoryId": suggestion.category_id,
                "categoryName": suggestion.category_name,
                "confidence": suggestion.confidence,
                "band": confidence_band(suggestion.confidence),
                "matchedKeyword": suggestion.matched_keyword,
            }
        }
    )


@app.get("/reports")
async def reports_page(request: Request, month: int | None = None, year: int | None = None):
    api = _client(request)
    default_month, default_year = utils.current_month_year()
    month, year = month or default_month, year or default_year
    by_category = reports.by_category(api, month=month, year=year)
    trend = reports.monthly_trend(api, 12)
    return templates.TemplateResponse(
        request,
        "reports.html",
        {
            "month": month,
            "year": year,
            "summary": reports.summary(api, month=month, year=year),
            "by_category": by_category,
            "income_chart": charts.category_pie(by_category["income"], "Income by category"),
            "expense_chart": charts.category_pie(by_category["expense"], "Expenses by category"),
            "trend_chart": charts.trend_chart(reports.monthly_trend_frame(trend)),
        },
    )


@app.get("/investments")
async def investments_page(request: Request):
    portfolio = investments.portfolio(_client(request))
    return templates.TemplateResponse(
        request,
        "investments.html",
        {"portfolio": portfolio, "allocation_chart": charts.allocation_chart(portfolio.positions)},
    )
