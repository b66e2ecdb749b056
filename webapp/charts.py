from __future__ import annotations

from typing import List, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from finance_client.core.models import CategoryReport, Position
from finance_client.utils import format_month


def _to_html(fig: go.Figure) -> str:
    return fig.to_html(full_html=False, include_plotlyjs="cdn")


def build_trend_figure(frame: pd.DataFrame) -> go.Figure:
    labels = [format_month(m) for m in frame.index]
    fig = go.Figure()
    fig.add_trace(go.Bar(x=labels, y=frame["income"], name="Income", marker_color="#4CAF50"))
    fig.add_trace(go.Bar(x=labels, y=frame["expense"], name="Expenses", marker_color="#FF5252"))
    fig.add_trace(go.Scatter(x=labels, y=frame["balance"], name="Balance", mode="lines+markers"))
    fig.update_layout(barmode="group", title="Income vs Expenses", height=380)
    return fig


def trend_chart(frame: pd.DataFrame) -> Optional[str]:
    if frame.empty:
        return None
    return _to_html(build_trend_figure(frame))


def build_category_figure(rows: List[CategoryReport], title: str) -> go.Figure:
    frame = pd.DataFrame({"Category": [r.category for r in rows], "Amount": [r.total for r in rows]})
    colors = [r.color for r in rows] if all(r.color for r in rows) else None
    fig = px.pie(frame, values="Amount", names="Category", hole=0.4, title=title)
    fig.update_traces(textposition="inside", textinfo="percent+label")
    if colors:
        fig.update_traces(marker=dict(colors=colors))
    return fig


def category_pie(rows: List[CategoryReport], title: str) -> Optional[str]:
    if not rows:
        return None
    return _to_html(build_category_figure(rows, title))


def allocation_chart(positions: List[Position]) -> Optional[str]:
    if not positions:
        return None
    frame = pd.DataFrame({"Symbol": [p.symbol for p in positions], "Value": [p.current_value for p in positions]})
    fig = px.pie(frame, values="Value", names="Symbol", hole=0.4, title="Allocation")
    return _to_html(fig)
