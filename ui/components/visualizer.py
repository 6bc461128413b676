"""
Get Rich OS — Chart Component
-----------------------------
Reusable Plotly figures for the dashboard.

Design
------
- Pure functions, no Streamlit imports (pages call these and render).
- Input is already-aggregated data from analytics.metrics.
"""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from analytics.metrics import DashboardStats
from core.config import CURRENCY


def cashflow_figure(cashflow: pd.DataFrame) -> go.Figure:
    """
    Grouped monthly bars: paid revenue, other income and expenses.

    Parameters
    ----------
    cashflow : DataFrame
        Output of analytics.metrics.monthly_cashflow.
    """
    long = cashflow.melt(
        id_vars="month",
        value_vars=["revenue", "income", "expenses"],
        var_name="series",
        value_name="amount",
    )
    fig = px.bar(
        long,
        x="month",
        y="amount",
        color="series",
        barmode="group",
        labels={"month": "Month", "amount": f"Amount ({CURRENCY})", "series": ""},
        color_discrete_map={"revenue": "#2563eb", "income": "#10b981", "expenses": "#f43f5e"},
    )
    fig.update_layout(margin=dict(l=10, r=10, t=30, b=10), legend_title_text="")
    return fig


def revenue_split_figure(stats: DashboardStats, vat_rate: float) -> go.Figure:
    """Donut of paid revenue split into VAT, personal earnings and the rest."""
    vat = stats.total_paid * vat_rate
    remainder = max(stats.total_paid - vat - stats.total_earnings, 0.0)
    fig = go.Figure(
        go.Pie(
            labels=["VAT", "My Earnings", "Business"],
            values=[vat, stats.total_earnings, remainder],
            hole=0.55,
            marker=dict(colors=["#f59e0b", "#10b981", "#1e293b"]),
        )
    )
    fig.update_layout(margin=dict(l=10, r=10, t=10, b=10), showlegend=True)
    return fig
