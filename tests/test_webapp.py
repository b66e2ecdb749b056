import anyio
import pytest
from fastapi.testclient import TestClient

from conftest import CATEGORIES, transaction_payload
from finance_client.api import ApiError
from webapp import main

USER = {"id": "u-1", "name": "Ana", "email": "ana@example.com"}


@pytest.fixture
def client(monkeypatch, patched_urlopen):
    monkeypatch.setitem(main.config, "api_url", "http://api.test")
    return TestClient(main.app)


def _logged_in(client):
    client.cookies.set(main.TOKEN_COOKIE, "tok")
    return client


def _seed_reports(opener):
    opener.add(
        "GET",
        "/reports/summary",
        {
            "status": "success",
            "data": {
                "period": {"startDate": "2025-03-01", "endDate": "2025-03-31"},
                "income": {"total": 5000, "count": 2},
                "expense": {"total": 3500, "count": 30},
                "balance": 1500,
                "savingsRate": 30,
            },
        },
    )
    opener.add(
        "GET",
        "/reports/by-category",
        {
            "status": "success",
            "data": {
                "income": [],
                "expense": [{"category": CATEGORIES[0], "type": "EXPENSE", "total": 3500, "count": 30, "percentage": 100}],
            },
        },
    )
    opener.add("GET", "/reports/balance", {"status": "success", "data": {"totalIncome": 9000, "totalExpense": 4000, "currentBalance": 5000}})
    opener.add(
        "GET",
        "/reports/monthly-trend",
        {"status": "success", "data": [{"month": "2025-03", "income": 5000, "expense": 3500, "balance": 1500}]},
    )


def test_dashboard_requires_login(client):
    res = client.get("/", follow_redirects=False)
    assert res.status_code == 303
    assert res.headers["location"] == "/login"


def test_login_sets_cookie(client, patched_urlopen):
    patched_urlopen.add("POST", "/auth/login", {"status": "success", "data": {"user": USER, "token": "tok"}})
    res = client.post("/login", data={"email": "ana@example.com", "password": "secret1"}, follow_redirects=False)
    assert res.status_code == 303
    assert res.headers["location"] == "/"
    assert f"{main.TOKEN_COOKIE}=tok" in res.headers["set-cookie"]


def test_login_failure_redirects_with_error(client, patched_urlopen):
    patched_urlopen.add("POST", "/auth/login", {"message": "Invalid credentials"}, status=401)
    res = client.post("/login", data={"email": "ana@example.com", "password": "bad"}, follow_redirects=False)
    assert res.headers["location"] == "/login?error=Invalid%20credentials"


def test_dashboard_renders_with_missing_widgets(client, patched_urlopen):
    _seed_reports(patched_urlopen)
    res = _logged_in(client).get("/")
    assert res.status_code == 200
    assert "R$ 5.000,00" in res.text
    assert "Exchange rates unavailable." in res.text
    assert "No insights available." in res.text
    assert patched_urlopen.last("GET", "/reports/balance")["headers"]["Authorization"] == "Bearer tok"


def test_reports_page(client, patched_urlopen):
    _seed_reports(patched_urlopen)
    res = _logged_in(client).get("/reports?month=3&year=2025")
    assert res.status_code == 200
    assert "Groceries" in res.text
    assert patched_urlopen.last("GET", "/reports/summary")["query"] == {"month": "3", "year": "2025"}


def test_expired_session_redirects_to_login(client, patched_urlopen):
    patched_urlopen.add("GET", "/investments/portfolio", {"message": "jwt expired"}, status=401)
    res = _logged_in(client).get("/investments", follow_redirects=False)
    assert res.status_code == 303
    assert res.headers["location"].startswith("/login?error=")


def test_transactions_page_lists_rows(client, patched_urlopen):
    patched_urlopen.add(
        "GET",
        "/transactions",
        {"status": "success", "data": [transaction_payload()], "meta": {"total": 1, "page": 1, "limit": 10, "totalPages": 1}},
    )
    patched_urlopen.add("GET", "/categories", {"status": "success", "data": CATEGORIES})
    res = _logged_in(client).get("/transactions?type=expense")
    assert res.status_code == 200
    assert "R$ 42,50" in res.text
    assert 'data-type="INCOME"' in res.text
    assert patched_urlopen.last("GET", "/transactions")["query"]["type"] == "EXPENSE"


def test_create_transaction_validates_before_api(client, patched_urlopen):
    res = _logged_in(client).post(
        "/transactions",
        data={"type": "EXPENSE", "amount": "10", "date": "2025-03-10", "category_id": ""},
        follow_redirects=False,
    )
    assert res.headers["location"] == "/transactions?error=Category%20is%20required"
    assert patched_urlopen.requests == []


def test_create_transaction(client, patched_urlopen):
    patched_urlopen.add("POST", "/transactions", {"status": "success", "data": transaction_payload()}, status=201)
    res = _logged_in(client).post(
        "/transactions",
        data={"type": "EXPENSE", "amount": "42.5", "date": "2025-03-10", "category_id": "c-food", "description": " mercado "},
        follow_redirects=False,
    )
    assert res.headers["location"] == "/transactions?message=Transaction%20saved"
    assert patched_urlopen.last("POST", "/transactions")["body"] == {
        "type": "EXPENSE",
        "amount": 42.5,
        "date": "2025-03-10",
        "categoryId": "c-food",
        "description": "mercado",
    }


def test_suggest_endpoint(client, patched_urlopen):
    patched_urlopen.add(
        "POST",
        "/categories/suggest",
        {"status": "success", "data": {"categoryId": "c-food", "categoryName": "Groceries", "confidence": 65, "matchedKeyword": None}},
    )
    res = _logged_in(client).post("/transactions/suggest", json={"description": "mercado", "type": "EXPENSE"})
    assert res.json() == {
        "suggestion": {
            "categoryId": "c-food",
            "categoryName": "Groceries",
            "confidence": 65,
            "band": "medium",
            "matchedKeyword": None,
        }
    }


def test_suggest_endpoint_fails_open(client):
    res = _logged_in(client).post("/transactions/suggest", json={"description": "mercado", "type": "INCOME"})
    assert res.status_code == 200
    assert res.json() == {"suggestion": None}


@pytest.mark.parametrize("path", ["/", "/transactions", "/reports", "/investments"])
def test_pages_without_cookie_redirect_to_login(client, patched_urlopen, path):
    patched_urlopen.add("GET", "/transactions", {"message": "No token provided"}, status=401)
    patched_urlopen.add("GET", "/reports/summary", {"message": "No token provided"}, status=401)
    res = client.get(path, follow_redirects=False)
    assert res.status_code == 303
    assert res.headers["location"] == "/login"
    assert patched_urlopen.requests == []


def test_post_routes_without_cookie_redirect_to_login(client, patched_urlopen):
    res = client.post("/transactions/t-1/delete", follow_redirects=False)
    assert res.headers["location"] == "/login"

    res = client.post(
        "/transactions",
        data={"type": "EXPENSE", "amount": "10", "date": "2025-03-10", "category_id": "c-food"},
        follow_redirects=False,
    )
    assert res.headers["location"] == "/login"
    assert patched_urlopen.requests == []


def test_plain_unauthorized_error_ends_web_session():
    response = anyio.run(main.api_error, None, ApiError("No token provided", status=401))
    assert response.status_code == 303
    assert response.headers["location"].startswith("/login?error=")
    assert main.TOKEN_COOKIE in response.headers["set-cookie"]


def test_api_failure_on_page_redirects_with_error(client, patched_urlopen):
    patched_urlopen.add("GET", "/reports/by-category", {"message": "Database down"}, status=500)
    res = _logged_in(client).get("/reports?month=3&year=2025", follow_redirects=False)
    assert res.status_code == 303
    assert res.headers["location"] == "/?error=Database%20down"


def test_dashboard_renders_when_reports_fail(client, patched_urlopen):
    patched_urlopen.add("GET", "/reports/summary", {"message": "Database down"}, status=500)
    res = _logged_in(client).get("/", follow_redirects=False)
    assert res.status_code == 200
    assert "Summary unavailable." in res.text
    assert "Database down" in res.text


def test_suggest_endpoint_without_cookie_fails_open(client, patched_urlopen):
    patched_urlopen.add("POST", "/categories/suggest", {"message": "No token provided"}, status=401)
    res = client.post("/transactions/suggest", json={"description": "mercado", "type": "EXPENSE"})
    assert res.json() == {"suggestion": None}


def test_suggest_endpoint_with_malformed_envelope(client, patched_urlopen):
    patched_urlopen.add("POST", "/categories/suggest", [])
    res = _logged_in(client).post("/transactions/suggest", json={"description": "mercado", "type": "EXPENSE"})
    assert res.status_code == 200
    assert res.json() == {"suggestion": None}
