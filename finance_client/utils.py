# finance_client/utils.py
from calendar import monthrange
from datetime import date, datetime

MONTHS_PT = ["jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"]


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def format_currency(value, symbol="R$"):
    """
    Format a number the pt-BR way: 'R$ 1.234,56'.
    """
    amount = float(value)
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {text}"


def format_date(value):
    d = _as_date(value)
    return f"{d.day:02d} de {MONTHS_PT[d.month - 1]}. de {d.year}"


def format_date_short(value):
    d = _as_date(value)
    return f"{d.day:02d}/{d.month:02d}"


def format_month(month_str):
    """
    'YYYY-MM' -> 'jan/25'.
    """
    year, month = map(int, month_str.split('-'))
    return f"{MONTHS_PT[month - 1]}/{year % 100:02d}"


def format_percentage(value):
    return f"{float(value):.1f}%"


def get_initials(name):
    return "".join(part[0] for part in name.split() if part).upper()[:2]


def current_month_year(today=None):
    today = today or date.today()
    return today.month, today.year


def date_range_for_month(month, year):
    """
    Return (first_day, last_day) ISO strings for the given month.
    """
    last = monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last).isoformat()
