# finance_client/resources/exchange.py
from finance_client.api import ApiClient
from finance_client.core.models import ExchangeWidgetData


def exchange_widget(api: ApiClient, base: str = "BRL", symbols: str = "USD,EUR,GBP") -> ExchangeWidgetData:
    params = {"base": base or "BRL", "symbols": symbols or "USD,EUR,GBP"}
    return ExchangeWidgetData.from_api(api.get("/exchange/widget", params)["data"])
