# finance_client/resources/__init__.py
from finance_client.resources import categories, exchange, insights, investments, reports, transactions

__all__ = ["categories", "exchange", "insights", "investments", "reports", "transactions"]
