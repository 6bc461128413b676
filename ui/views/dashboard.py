# ui/views/dashboard.py
"""Main dashboard: headline metrics, cash-flow chart, insights preview."""

from __future__ import annotations

import streamlit as st

from analytics.metrics import monthly_cashflow, upcoming_renewals
from core.app_context import DashboardSnapshot
from core.config import VAT_RATE, format_currency
from core.models import AIInsight, InsightType
from ui.components.visualizer import cashflow_figure, revenue_split_figure

INSIGHT_ICONS = {
    InsightType.WARNING: "⚠️",
    InsightType.SUGGESTION: "💡",
    InsightType.TIP: "💡",
}


def render_insight_cards(insights: list[AIInsight], columns: int = 2) -> None:
    if not insights:
        st.info("✨ Run an analysis to see insights")
        return
    cols = st.columns(columns)
    for idx, insight in enumerate(insights):
        with cols[idx % columns].container(border=True):
            st.markdown(f"{INSIGHT_ICONS.get(insight.type, '💡')} **{insight.title}**")
            st.caption(insight.content)


def render(snapshot: DashboardSnapshot, insights: list[AIInsight]) -> None:
    stats = snapshot.stats

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Paid Invoices", format_currency(stats.total_paid))
    c2.metric(
        "Unpaid Total",
        format_currency(stats.total_unpaid),
        delta=f"{stats.unpaid_count} Pending",
        delta_color="off",
    )
    c3.metric("My Earnings (21%)", format_currency(stats.total_earnings))
    c4.metric("Active Projects", stats.project_count)

    c5, c6, c7, c8 = st.columns(4)
    c5.metric("Expenses", format_currency(stats.total_expenses))
    c6.metric("Other Income", format_currency(stats.total_income))
    c7.metric("Expected Earnings", format_currency(stats.expected_income))
    c8.metric("Earnings This Month", format_currency(stats.monthly_earnings))

    if snapshot.degraded:
        st.warning(f"Could not load: {', '.join(snapshot.degraded)}. Showing what is available.")

    st.divider()

    left, right = st.columns([2, 1])
    with left:
        st.subheader("📈 Cash Flow")
        cashflow = monthly_cashflow(snapshot.invoices, snapshot.transactions)
        if cashflow.empty:
            st.info("No paid invoices or transactions yet.")
        else:
            st.plotly_chart(cashflow_figure(cashflow), width="stretch")
    with right:
        st.subheader("🧮 Revenue Split")
        if stats.total_paid > 0:
            st.plotly_chart(revenue_split_figure(stats, VAT_RATE), width="stretch")
        else:
            st.info("No paid revenue yet.")

    renewals = upcoming_renewals(snapshot.projects)
    if renewals:
        st.subheader("⏰ Upcoming Renewals")
        for r in renewals:
            when = f"in {r.days_left} days" if r.days_left >= 0 else f"{-r.days_left} days overdue"
            st.write(f"**{r.project_name}** — {r.kind} renewal {r.due.isoformat()} ({when})")

    st.divider()
    st.subheader("✨ Business Insights (AI)")
    render_insight_cards(insights)
