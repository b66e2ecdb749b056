import pytest
from click.testing import CliRunner

from conftest import CATEGORIES, transaction_payload
from finance_client.cli import main as cli

USER = {"id": "u-1", "name": "Ana", "email": "ana@example.com"}


@pytest.fixture
def run(tmp_path, monkeypatch, patched_urlopen):
    monkeypatch.setenv("FINANCE_API_URL", "http://api.test")
    monkeypatch.setenv("FINANCE_SESSION_FILE", str(tmp_path / "session.json"))
    monkeypatch.setenv("FINANCE_SUGGEST_DELAY_MS", "1")
    config_path = str(tmp_path / "config.yaml")
    runner = CliRunner()

    def _invoke(*args, input=None):
        return runner.invoke(cli, ["--config", config_path, *args], input=input)

    return _invoke


def test_login_and_whoami(run, patched_urlopen, tmp_path):
    patched_urlopen.add("POST", "/auth/login", {"status": "success", "data": {"user": USER, "token": "tok"}})
    patched_urlopen.add("GET", "/users/me", {"status": "success", "data": USER})

    res = run("login", "--email", "ana@example.com", "--password", "secret1")
    assert res.exit_code == 0, res.output
    assert "Logged in as Ana <ana@example.com>." in res.output
    assert (tmp_path / "session.json").exists()

    res = run("whoami")
    assert res.exit_code == 0, res.output
    assert patched_urlopen.last("GET", "/users/me")["headers"]["Authorization"] == "Bearer tok"


def test_whoami_without_session(run):
    res = run("whoami")
    assert res.exit_code == 1
    assert "Not logged in." in res.output


def test_add_transaction_with_explicit_category(run, patched_urlopen):
    patched_urlopen.add("GET", "/categories", {"status": "success", "data": CATEGORIES})
    patched_urlopen.add("POST", "/transactions", {"status": "success", "data": transaction_payload()}, status=201)

    res = run(
        "transactions", "add", "--amount", "42.5", "--description", "mercado",
        "--date", "2025-03-10", "--category", "Groceries",
    )

    assert res.exit_code == 0, res.output
    assert "Saved transaction t-1" in res.output
    assert patched_urlopen.last("POST", "/transactions")["body"] == {
        "type": "EXPENSE",
        "amount": 42.5,
        "date": "2025-03-10",
        "categoryId": "c-food",
        "description": "mercado",
    }
    assert not [r for r in patched_urlopen.requests if r["path"] == "/categories/suggest"]


def test_add_transaction_accepts_suggestion(run, patched_urlopen):
    patched_urlopen.add("GET", "/categories", {"status": "success", "data": CATEGORIES})
    patched_urlopen.add(
        "POST",
        "/categories/suggest",
        {"status": "success", "data": {"categoryId": "c-food", "categoryName": "Groceries", "confidence": 90, "matchedKeyword": "mercado"}},
    )
    patched_urlopen.add("POST", "/transactions", {"status": "success", "data": transaction_payload()}, status=201)

    res = run("transactions", "add", "--amount", "10", "--description", "mercado", input="y\n")

    assert res.exit_code == 0, res.output
    assert "Suggested: Groceries (high, 90%) matched 'mercado'. Use it?" in res.output
    assert patched_urlopen.last("POST", "/categories/suggest")["body"] == {"description": "mercado", "type": "EXPENSE"}
    assert patched_urlopen.last("POST", "/transactions")["body"]["categoryId"] == "c-food"


def test_add_transaction_rejected_suggestion_needs_category(run, patched_urlopen):
    patched_urlopen.add("GET", "/categories", {"status": "success", "data": CATEGORIES})
    patched_urlopen.add(
        "POST",
        "/categories/suggest",
        {"status": "success", "data": {"categoryId": "c-food", "categoryName": "Groceries", "confidence": 40}},
    )

    res = run("transactions", "add", "--amount", "10", "--description", "mercado", input="n\n")

    assert res.exit_code == 1
    assert "Category is required" in res.output
    assert not [r for r in patched_urlopen.requests if r["path"] == "/transactions"]


def test_add_transaction_suggestion_outage_does_not_block(run, patched_urlopen):
    patched_urlopen.add("GET", "/categories", {"status": "success", "data": CATEGORIES})
    patched_urlopen.add("POST", "/categories/suggest", {"message": "boom"}, status=503)
    patched_urlopen.add("POST", "/transactions", {"status": "success", "data": transaction_payload()}, status=201)

    res = run("transactions", "add", "--amount", "10", "--description", "uber", "--category", "c-fuel")
    assert res.exit_code == 0, res.output

    res = run("transactions", "add", "--amount", "10", "--description", "uber")
    assert res.exit_code == 1
    assert "Use it?" not in res.output
    assert "Category is required" in res.output


def test_list_transactions(run, patched_urlopen):
    patched_urlopen.add(
        "GET",
        "/transactions",
        {"status": "success", "data": [transaction_payload()], "meta": {"total": 1, "page": 1, "limit": 10, "totalPages": 1}},
    )
    res = run("transactions", "list", "--type", "expense")
    assert res.exit_code == 0, res.output
    assert "t-1  10 de mar. de 2025  -R$ 42,50  Groceries  mercado" in res.output
    assert "Page 1 of 1 (1 total)" in res.output


def test_api_errors_become_click_errors(run, patched_urlopen):
    patched_urlopen.add("GET", "/transactions", {"message": "Database unavailable"}, status=500)
    res = run("transactions", "list")
    assert res.exit_code == 1
    assert "Database unavailable" in res.output


def test_reports_summary(run, patched_urlopen):
    patched_urlopen.add(
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
    res = run("reports", "summary", "--month", "3", "--year", "2025")
    assert res.exit_code == 0, res.output
    assert "Income:  R$ 5.000,00 (2)" in res.output
    assert "Savings: 30.0%" in res.output
    assert patched_urlopen.last("GET", "/reports/summary")["query"] == {"month": "3", "year": "2025"}


def test_categories_add_with_keywords(run, patched_urlopen):
    patched_urlopen.add("POST", "/categories", {"status": "success", "data": CATEGORIES[0]}, status=201)
    res = run("categories", "add", "Groceries", "--keyword", "Mercado", "--keyword", "mercado ")
    assert res.exit_code == 0, res.output
    assert patched_urlopen.last("POST", "/categories")["body"]["keywords"] == ["mercado"]


def test_categories_edit_replaces_keywords(run, patched_urlopen):
    patched_urlopen.add("PUT", "/categories/c-food", {"status": "success", "data": CATEGORIES[0]})
    res = run("categories", "edit", "c-food", "--keyword", " Feira", "--keyword", "MERCADO")
    assert res.exit_code == 0, res.output
    assert patched_urlopen.last("PUT", "/categories/c-food")["body"] == {"keywords": ["feira", "mercado"]}


def test_categories_edit_requires_changes(run, patched_urlopen):
    res = run("categories", "edit", "c-food")
    assert res.exit_code == 2
    assert patched_urlopen.requests == []


def test_investments_edit(run, patched_urlopen):
    patched_urlopen.add(
        "PUT", "/investments/i-1",
        {"status": "success", "data": {"id": "i-1", "symbol": "PETR4", "shares": 12, "purchasePrice": 30}},
    )
    res = run("investments", "edit", "i-1", "--shares", "12")
    assert res.exit_code == 0, res.output
    assert "Updated PETR4 (i-1)." in res.output
    assert patched_urlopen.last("PUT", "/investments/i-1")["body"] == {"shares": 12.0}


def test_profile_update_keeps_missing_fields(run, patched_urlopen, tmp_path):
    (tmp_path / "session.json").write_text('{"token": "tok", "user": {"id": "u-1", "name": "Ana", "email": "ana@example.com"}}')
    patched_urlopen.add("GET", "/users/me", {"status": "success", "data": USER})
    patched_urlopen.add("PUT", "/users/me", {"status": "success", "data": dict(USER, name="Ana Souza")})

    res = run("profile", "--name", "Ana Souza")

    assert res.exit_code == 0, res.output
    assert "Profile updated: Ana Souza <ana@example.com>" in res.output
    assert patched_urlopen.last("PUT", "/users/me")["body"] == {"name": "Ana Souza", "email": "ana@example.com"}


def test_password_mismatch_is_reported(run, patched_urlopen):
    res = run("password", "--current", "secret1", "--new", "secret2", "--confirm", "other22")
    assert res.exit_code == 1
    assert "confirmPassword: Passwords do not match" in res.output
    assert patched_urlopen.requests == []
