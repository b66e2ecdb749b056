# finance_client/resources/insights.py
from finance_client.api import ApiClient
from finance_client.core.models import InsightsData


def get_insights(api: ApiClient, refresh: bool = False) -> InsightsData:
    params = {"refresh": True} if refresh else None
    return InsightsData.from_api(api.get("/insights", params)["data"])
