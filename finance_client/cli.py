# finance_client/cli.py
import asyncio
from datetime import date

import click
from dotenv import load_dotenv

from finance_client.api import ApiClient, ApiError
from finance_client.auth import AuthSession, TokenStore
from finance_client.config import configure_logging, load_config, session_path, suggestion_delay
from finance_client.core.models import TransactionFilters, TransactionType
from finance_client.forms import FormError, TransactionForm
from finance_client.resources import categories, exchange, insights, investments, reports, transactions
from finance_client.suggestions import SuggestionController, SuggestionRequester
from finance_client.utils import (
    current_month_year,
    format_currency,
    format_date,
    format_month,
    format_percentage,
)

TYPE_CHOICE = click.Choice(['income', 'expense'], case_sensitive=False)


class Context:
    def __init__(self, config):
        self.config = config
        self.api = ApiClient(base_url=config['api_url'], timeout=float(config.get('timeout', 10)))
        self.auth = AuthSession(self.api, TokenStore(session_path(config)))

    def build_form(self, category_list):
        settings = self.config.get('suggestions', {})
        controller = SuggestionController(
            SuggestionRequester(self.api),
            delay=suggestion_delay(self.config),
            min_length=int(settings.get('min_length', 3)),
        )
        return TransactionForm(controller, category_list)


pass_ctx = click.make_pass_decorator(Context)


def _run(fn, *args, **kwargs):
    try:
        return fn(*args, **kwargs)
    except ApiError as exc:
        details = "".join(f"\n  {k}: {v}" for k, v in exc.errors.items())
        raise click.ClickException(f"{exc.message}{details}")


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (default: ~/.finance_client/config.yaml)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with FINANCE_* settings'
)
@click.option('--api-url', default=None, help='Override the API base URL')
@click.pass_context
def main(ctx, config_path, env_file, api_url):
    """
    Track income and expenses, browse reports, investments, insights and
    exchange rates served by the finance API.
    """
    if env_file:
        load_dotenv(env_file)
    configure_logging()
    cfg = load_config(config_path)
    if api_url:
        cfg['api_url'] = api_url
    ctx.obj = Context(cfg)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

@main.command()
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True)
@pass_ctx
def login(obj, email, password):
    """Log in and store the session token."""
    user = _run(obj.auth.login, email, password)
    click.echo(f"Logged in as {user.name} <{user.email}>.")


@main.command()
@click.option('--name', prompt=True)
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@pass_ctx
def register(obj, name, email, password):
    """Create an account and log in."""
    user = _run(obj.auth.register, name, email, password)
    click.echo(f"Welcome, {user.name}!")


@main.command()
@pass_ctx
def logout(obj):
    obj.auth.logout()
    click.echo("Logged out.")


@main.command()
@pass_ctx
def whoami(obj):
    """Show the logged-in user (re-validating the stored session)."""
    user = obj.auth.restore()
    if user is None:
        raise click.ClickException("Not logged in.")
    click.echo(f"{user.name} <{user.email}>")


@main.command()
@click.option('--name', default=None)
@click.option('--email', default=None)
@pass_ctx
def profile(obj, name, email):
    """Update the name and/or email of the logged-in user."""
    user = _run(obj.auth.restore)
    if user is None:
        raise click.ClickException("Not logged in.")
    user = _run(obj.auth.update_profile, name or user.name, email or user.email)
    click.echo(f"Profile updated: {user.name} <{user.email}>")


@main.command()
@click.option('--current', prompt='Current password', hide_input=True)
@click.option('--new', 'new_password', prompt='New password', hide_input=True)
@click.option('--confirm', prompt='Confirm new password', hide_input=True)
@pass_ctx
def password(obj, current, new_password, confirm):
    _run(obj.auth.change_password, current, new_password, confirm)
    click.echo("Password changed.")


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

@main.group('transactions')
def transactions_group():
    """List and edit transactions."""


@transactions_group.command('list')
@click.option('--type', 'tx_type', type=TYPE_CHOICE, default=None)
@click.option('--category', 'category_id', default=None, help='Category id')
@click.option('--start', 'start_date', type=click.DateTime(['%Y-%m-%d']), default=None)
@click.option('--end', 'end_date', type=click.DateTime(['%Y-%m-%d']), default=None)
@click.option('--page', default=1, show_default=True)
@click.option('--limit', default=10, show_default=True)
@pass_ctx
def list_transactions(obj, tx_type, category_id, start_date, end_date, page, limit):
    filters = TransactionFilters(
        type=TransactionType.parse(tx_type) if tx_type else None,
        category_id=category_id,
        start_date=start_date.date() if start_date else None,
        end_date=end_date.date() if end_date else None,
        page=page,
        limit=limit,
    )
    result = _run(transactions.list_transactions, obj.api, filters)
    if not result.items:
        click.echo("No transactions found.")
        return
    for tx in result.items:
        sign = '+' if tx.type is TransactionType.INCOME else '-'
        click.echo(
            f"{tx.id}  {format_date(tx.date)}  {sign}{format_currency(tx.amount)}  "
            f"{tx.category_name or tx.category_id}  {tx.description or ''}".rstrip()
        )
    click.echo(f"Page {result.page} of {result.total_pages} ({result.total} total)")


def _find_category(category_list, name_or_id):
    for cat in category_list:
        if name_or_id in (cat.id, cat.name) or cat.name.lower() == name_or_id.lower():
            return cat
    raise click.ClickException(f"Unknown category: {name_or_id}")


async def _interactive_entry(form):
    # imported lazily so non-interactive commands never touch the terminal
    from finance_client.term_ui import prompt_description

    await prompt_description(form)
    form.suggestions.close()


async def _suggest_once(form, description):
    form.set_description(description)
    await form.suggestions.settle()


@transactions_group.command('add')
@click.option('--type', 'tx_type', type=TYPE_CHOICE, default='expense', show_default=True)
@click.option('--amount', type=float, required=True)
@click.option('--description', default=None, help='Skip the interactive prompt')
@click.option('--date', 'tx_date', type=click.DateTime(['%Y-%m-%d']), default=None)
@click.option('--category', default=None, help='Category name or id')
@pass_ctx
def add_transaction(obj, tx_type, amount, description, tx_date, category):
    """Create a transaction; without --description, prompts with live category suggestions."""
    category_list = _run(categories.list_categories, obj.api)
    form = obj.build_form(category_list)
    form.open_create(today=tx_date.date() if tx_date else date.today())
    form.set_type(TransactionType.parse(tx_type))
    form.amount = amount
    if category:
        form.set_category(_find_category(category_list, category).id)

    if description is None:
        asyncio.run(_interactive_entry(form))
        if not form.category_id:
            from finance_client.term_ui import select_category

            form.set_category(select_category(form.categories_for_type()))
    elif form.category_id:
        form.set_description(description)
    else:
        asyncio.run(_suggest_once(form, description))
        if form.suggestions.suggestion is not None:
            if click.confirm(f"{form.suggestions.render()}. Use it?", default=True):
                form.accept_suggestion()
            else:
                form.dismiss_suggestion()

    try:
        saved = _run(form.submit, obj.api)
    except FormError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Saved transaction {saved.id} ({format_currency(saved.amount)}).")


@transactions_group.command('edit')
@click.argument('transaction_id')
@click.option('--type', 'tx_type', type=TYPE_CHOICE, default=None)
@click.option('--amount', type=float, default=None)
@click.option('--description', default=None)
@click.option('--date', 'tx_date', type=click.DateTime(['%Y-%m-%d']), default=None)
@click.option('--category', 'category_id', default=None, help='Category id')
@pass_ctx
def edit_transaction(obj, transaction_id, tx_type, amount, description, tx_date, category_id):
    data = {
        'type': TransactionType.parse(tx_type).value if tx_type else None,
        'amount': amount,
        'description': description,
        'date': tx_date.date().isoformat() if tx_date else None,
        'categoryId': category_id,
    }
    data = {k: v for k, v in data.items() if v is not None}
    if not data:
        raise click.UsageError("Nothing to update.")
    saved = _run(transactions.update_transaction, obj.api, transaction_id, data)
    click.echo(f"Updated transaction {saved.id}.")


@transactions_group.command('delete')
@click.argument('transaction_id')
@click.confirmation_option(prompt='Delete this transaction?')
@pass_ctx
def delete_transaction(obj, transaction_id):
    _run(transactions.delete_transaction, obj.api, transaction_id)
    click.echo("Transaction deleted.")


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

@main.group('categories')
def categories_group():
    """Manage categories and their suggestion keywords."""


@categories_group.command('list')
@click.option('--type', 'cat_type', type=TYPE_CHOICE, default=None)
@pass_ctx
def list_categories(obj, cat_type):
    rows = _run(categories.list_categories, obj.api, TransactionType.parse(cat_type) if cat_type else None)
    for cat in rows:
        keywords = f"  [{', '.join(cat.keywords)}]" if cat.keywords else ""
        click.echo(f"{cat.id}  {cat.type.value:<7}  {cat.name}{keywords}")


@categories_group.command('add')
@click.argument('name')
@click.option('--type', 'cat_type', type=TYPE_CHOICE, default='expense', show_default=True)
@click.option('--color', default=None)
@click.option('--icon', default=None)
@click.option('--keyword', 'keywords', multiple=True, help='Keyword used for suggestions (repeatable)')
@pass_ctx
def add_category(obj, name, cat_type, color, icon, keywords):
    data = {'name': name.strip(), 'type': cat_type, 'keywords': list(keywords)}
    if color:
        data['color'] = color
    if icon:
        data['icon'] = icon
    try:
        cat = _run(categories.create_category, obj.api, data)
    except ValueError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Created category {cat.name} ({cat.id}).")


@categories_group.command('edit')
@click.argument('category_id')
@click.option('--name', default=None)
@click.option('--color', default=None)
@click.option('--icon', default=None)
@click.option('--keyword', 'keywords', multiple=True, help='Replaces the keyword list (repeatable)')
@click.option('--clear-keywords', is_flag=True, default=False)
@pass_ctx
def edit_category(obj, category_id, name, color, icon, keywords, clear_keywords):
    data = {k: v for k, v in {'name': name, 'color': color, 'icon': icon}.items() if v}
    if keywords or clear_keywords:
        data['keywords'] = list(keywords)
    if not data:
        raise click.UsageError("Nothing to update.")
    cat = _run(categories.update_category, obj.api, category_id, data)
    click.echo(f"Updated category {cat.name} ({cat.id}).")


@categories_group.command('delete')
@click.argument('category_id')
@click.confirmation_option(prompt='Delete this category?')
@pass_ctx
def delete_category(obj, category_id):
    _run(categories.delete_category, obj.api, category_id)
    click.echo("Category deleted.")


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@main.group('reports')
def reports_group():
    """Summaries computed by the API."""


def _month_options(fn):
    fn = click.option('--month', type=click.IntRange(1, 12), default=None)(fn)
    fn = click.option('--year', type=int, default=None)(fn)
    return fn


def _period(month, year):
    default_month, default_year = current_month_year()
    return {'month': month or default_month, 'year': year or default_year}


@reports_group.command('summary')
@_month_options
@pass_ctx
def report_summary(obj, month, year):
    s = _run(reports.summary, obj.api, **_period(month, year))
    click.echo(f"Income:  {format_currency(s.income_total)} ({s.income_count})")
    click.echo(f"Expense: {format_currency(s.expense_total)} ({s.expense_count})")
    click.echo(f"Balance: {format_currency(s.balance)}")
    click.echo(f"Savings: {format_percentage(s.savings_rate)}")


@reports_group.command('categories')
@_month_options
@pass_ctx
def report_categories(obj, month, year):
    data = _run(reports.by_category, obj.api, **_period(month, year))
    for label in ('income', 'expense'):
        click.echo(label.capitalize())
        for row in data[label]:
            click.echo(f"  {row.category:<20} {format_currency(row.total):>14}  {format_percentage(row.percentage)}")


@reports_group.command('trend')
@click.option('--months', default=None, type=int)
@pass_ctx
def report_trend(obj, months):
    months = months or int(obj.config.get('reports', {}).get('trend_months', 6))
    for row in _run(reports.monthly_trend, obj.api, months):
        click.echo(
            f"{format_month(row.month):<8} +{format_currency(row.income):>14} "
            f"-{format_currency(row.expense):>14} = {format_currency(row.balance)}"
        )


@reports_group.command('balance')
@pass_ctx
def report_balance(obj):
    b = _run(reports.balance, obj.api)
    click.echo(f"Current balance: {format_currency(b.current_balance)}")


# ---------------------------------------------------------------------------
# Investments, insights, exchange
# ---------------------------------------------------------------------------

@main.group('investments')
def investments_group():
    """Investment positions."""


@investments_group.command('list')
@pass_ctx
def list_investments(obj):
    for inv in _run(investments.list_investments, obj.api):
        click.echo(f"{inv.id}  {inv.symbol:<8} {inv.shares:g} @ {format_currency(inv.purchase_price)}")


@investments_group.command('portfolio')
@pass_ctx
def show_portfolio(obj):
    p = _run(investments.portfolio, obj.api)
    click.echo(f"Invested: {format_currency(p.total_invested)}")
    click.echo(f"Current:  {format_currency(p.current_value)}")
    sign = '+' if p.total_gain >= 0 else ''
    click.echo(f"Gain:     {format_currency(p.total_gain)} ({sign}{format_percentage(p.total_gain_percent)})")
    for pos in p.positions:
        click.echo(f"  {pos.symbol:<8} {format_currency(pos.current_value):>14}  {format_percentage(pos.gain_percent)}")


@investments_group.command('add')
@click.argument('symbol')
@click.option('--shares', type=float, required=True)
@click.option('--price', 'purchase_price', type=float, required=True)
@click.option('--date', 'purchase_date', type=click.DateTime(['%Y-%m-%d']), default=None)
@click.option('--name', default=None)
@click.option('--notes', default=None)
@pass_ctx
def add_investment(obj, symbol, shares, purchase_price, purchase_date, name, notes):
    data = {
        'symbol': symbol,
        'shares': shares,
        'purchasePrice': purchase_price,
        'purchaseDate': (purchase_date.date() if purchase_date else date.today()).isoformat(),
    }
    if name:
        data['name'] = name
    if notes:
        data['notes'] = notes
    try:
        inv = _run(investments.create_investment, obj.api, data)
    except ValueError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Added {inv.symbol} ({inv.id}).")


@investments_group.command('edit')
@click.argument('investment_id')
@click.option('--shares', type=float, default=None)
@click.option('--price', 'purchase_price', type=float, default=None)
@click.option('--notes', default=None)
@pass_ctx
def edit_investment(obj, investment_id, shares, purchase_price, notes):
    data = {'shares': shares, 'purchasePrice': purchase_price, 'notes': notes}
    data = {k: v for k, v in data.items() if v is not None}
    if not data:
        raise click.UsageError("Nothing to update.")
    inv = _run(investments.update_investment, obj.api, investment_id, data)
    click.echo(f"Updated {inv.symbol} ({inv.id}).")


@investments_group.command('delete')
@click.argument('investment_id')
@click.confirmation_option(prompt='Delete this investment?')
@pass_ctx
def delete_investment(obj, investment_id):
    _run(investments.delete_investment, obj.api, investment_id)
    click.echo("Investment deleted.")


@main.command('insights')
@click.option('--refresh', is_flag=True, default=False, help='Ask the API to regenerate insights')
@pass_ctx
def show_insights(obj, refresh):
    data = _run(insights.get_insights, obj.api, refresh)
    if not data.insights:
        click.echo("No insights yet.")
    for item in data.insights:
        click.echo(f"[{item.type}] {item.title}\n    {item.description}")
    if data.generated_at:
        click.echo(f"Generated at {data.generated_at}")


@main.command('exchange')
@click.option('--base', default=None)
@click.option('--symbols', default=None)
@pass_ctx
def show_exchange(obj, base, symbols):
    cfg = obj.config.get('exchange', {})
    data = _run(exchange.exchange_widget, obj.api, base or cfg.get('base'), symbols or cfg.get('symbols'))
    click.echo(f"Base: {data.base} • {data.date}")
    for rate in data.currencies:
        arrow = '▲' if rate.trend == 'up' else '▼'
        click.echo(f"  1 {rate.symbol} = {format_currency(rate.inverse_rate)}  {arrow} {format_percentage(rate.variation)}")


if __name__ == '__main__':
    main()
