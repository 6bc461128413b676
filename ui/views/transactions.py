# ui/views/transactions.py
"""Ledger transactions: income / expense entries by category."""

from __future__ import annotations

from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from core.app_context import AppContext
from core.config import CATEGORIES, CURRENCY
from core.models import Project, Transaction, TransactionCreate, TransactionType
from ui.components.feedback import handle_write
from ui.components.selection import RecordChoices, select_record
from ui.views.projects import describe_project

TYPES = [t.value for t in TransactionType]


def describe_transaction(txn: Transaction) -> str:
    return f"{txn.date} · {txn.type.value} · {txn.amount:,.0f} · {txn.description or txn.category}"


def render(ctx: AppContext, transactions: list[Transaction], projects: list[Project]) -> None:
    st.title("💼 Transactions")

    project_choices = RecordChoices(projects, describe_project, none_label="(none)")

    with st.expander("➕ New Transaction", expanded=not transactions):
        with st.form("new_transaction", clear_on_submit=False):
            c1, c2, c3 = st.columns(3)
            kind = c1.selectbox("Type", TYPES, index=TYPES.index(TransactionType.EXPENSE.value))
            category = c2.selectbox("Category", CATEGORIES)
            amount = c3.number_input("Amount", min_value=0.0, step=1000.0)
            c4, c5 = st.columns(2)
            day = c4.date_input("Date", value=date.today())
            project_id = select_record("Project", project_choices, container=c5)
            description = st.text_input("Description")
            submitted = st.form_submit_button("Save Transaction")

        if submitted:
            record = TransactionCreate(
                type=TransactionType(kind),
                category=category,
                amount=amount,
                date=day,
                project_id=project_id,
                description=description,
            )
            handle_write(ctx, ctx.transactions.add(record), f"{kind} of {amount:,.0f} {CURRENCY} saved.")

    if not transactions:
        st.info("No transactions yet.")
        return

    names_by_id = {p.id: p.name for p in projects}
    df = pd.DataFrame(
        [
            {
                "Date": t.date,
                "Type": t.type.value,
                "Category": t.category,
                "Amount": t.amount,
                "Project": names_by_id.get(t.project_id, ""),
                "Description": t.description,
            }
            for t in transactions
        ]
    )
    st.dataframe(df, width="stretch", hide_index=True)

    expenses = df[df["Type"] == TransactionType.EXPENSE.value]
    if not expenses.empty:
        by_category = expenses.groupby("Category", as_index=False)["Amount"].sum()
        fig = px.pie(by_category, names="Category", values="Amount", hole=0.5, title="Expenses by Category")
        st.plotly_chart(fig, width="stretch")

    st.subheader("Manage")
    choices = RecordChoices(transactions, describe_transaction)
    selected = choices.get(select_record("Transaction", choices))
    if st.button("🗑️ Delete Transaction"):
        handle_write(ctx, ctx.transactions.delete(selected.id), "Transaction deleted.")
