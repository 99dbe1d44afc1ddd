import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import date

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from budgetcore import config
from budgetcore.dates import (
    current_month,
    format_currency,
    format_date,
    month_label,
    month_name,
    month_window,
    upcoming_months,
)
from budgetcore.domain import EXPENSE, EXPENSE_CATEGORIES, INCOME, OVER, SUCCESS, WARNING, categories_for
from budgetcore.lazy import SORT_KEYS, filter_transactions, list_categories
from budgetcore.services import BudgetService, ReportService, TransactionService
from budgetcore.storage import JsonFileBackend, RecordStore
from budgetcore.transforms import load_seed

config.configure_logging()
config.ensure_data_directories()
logger = logging.getLogger("app")

st.set_page_config(page_title="Budget Tracker", layout="wide")

store = RecordStore(JsonFileBackend(config.STORE_PATH))
tx_service = TransactionService(store)
budget_service = BudgetService(store)
reports = ReportService()

today = date.today()
this_month = current_month(today)
month_options = month_window(this_month, 24)[::-1]
selected_month = st.sidebar.selectbox(
    "Month",
    options=month_options,
    index=0,
    format_func=month_name,
)

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "🧾 Transactions", "🎯 Budgets", "💡 Insights"]
)

transactions = store.list_transactions()
budgets = store.list_budgets()

if not transactions and not budgets and config.SEED_PATH.exists():
    st.sidebar.markdown("---")
    if st.sidebar.button("📥 Load demo data"):
        seed_transactions, seed_budgets = load_seed(config.SEED_PATH)
        for t in seed_transactions:
            tx_service.add(t.__dict__)
        for b in seed_budgets:
            budget_service.set_budget(b.__dict__)
        logger.info("Loaded %d demo transactions", len(seed_transactions))
        st.rerun()

report = reports.monthly_report(selected_month, transactions, budgets)["result"]


def show_errors(error: dict) -> None:
    for field, message in error.get("fields", {}).items():
        st.error(f"{field.capitalize()}: {message}")
    if "fields" not in error:
        st.error(error.get("message", "Something went wrong"))


def tx_to_df(tx_list):
    rows = [
        {
            "Date": format_date(t.date),
            "Description": t.description,
            "Type": t.type,
            "Category": t.category,
            "Amount": ("+" if t.type == INCOME else "-") + format_currency(t.amount),
        }
        for t in tx_list
    ]
    return pd.DataFrame(rows, columns=["Date", "Description", "Type", "Category", "Amount"])


if menu == "🏠 Overview":
    st.title("🏠 Overview")
    totals = report["totals"]
    overview = report["budgets"]

    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Total Income", format_currency(totals.income))
    with k2:
        st.metric("Total Expenses", format_currency(totals.expense))
    with k3:
        st.metric("Net Amount", format_currency(totals.net))
    with k4:
        st.metric(f"Budget left ({month_label(selected_month)})", format_currency(overview.remaining))

    series = report["series"]
    labels = [month_label(s.month) for s in series]
    fig_ts = go.Figure()
    fig_ts.add_trace(go.Bar(x=labels, y=[s.income for s in series], name="Income"))
    fig_ts.add_trace(go.Bar(x=labels, y=[s.expense for s in series], name="Expenses"))
    fig_ts.add_trace(go.Scatter(x=labels, y=[s.net for s in series], mode="lines+markers", name="Net"))
    fig_ts.update_layout(
        title="Monthly Income vs Expenses",
        barmode="group",
        template="plotly_dark",
        margin=dict(t=40, b=10, l=10, r=10),
    )
    st.plotly_chart(fig_ts, use_container_width=True)

    categories = report["categories"]
    if categories:
        df_cat = pd.DataFrame([{"Category": c.category, "Total": c.amount} for c in categories])
        fig_cat = px.pie(df_cat, values="Total", names="Category", title="Expenses by Category")
        fig_cat.update_layout(template="plotly_dark")
        st.plotly_chart(fig_cat, use_container_width=True)
    else:
        st.info("No expense data available")

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    st.subheader("➕ Add New Transaction")
    tx_type = st.radio("Type", [EXPENSE, INCOME], horizontal=True, key="new_tx_type")
    with st.form("transaction_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.number_input(f"Amount ({config.CURRENCY_SYMBOL})", min_value=0.0, step=1.0)
            tx_date = st.date_input("Date", value=today)
        with col2:
            category = st.selectbox("Category", categories_for(tx_type), index=None, key="new_tx_category")
            description = st.text_input("Description", max_chars=config.DESCRIPTION_MAX_LENGTH)
        submitted = st.form_submit_button("Add Transaction")

        if submitted:
            result = tx_service.add({
                "amount": amount,
                "date": tx_date,
                "description": description,
                "type": tx_type,
                "category": category,
            })
            if result.is_right():
                st.success("✅ Transaction added!")
                st.rerun()
            else:
                show_errors(result.get_error())

    st.divider()

    st.subheader(f"📋 Transaction History ({len(transactions)})")
    f1, f2, f3, f4 = st.columns(4)
    with f1:
        search = st.text_input("Search", placeholder="Search transactions...")
    with f2:
        type_filter = st.selectbox("Type", ["all", INCOME, EXPENSE], key="type_filter")
    with f3:
        category_filter = st.selectbox("Category", ["all"] + list_categories(transactions), key="category_filter")
    with f4:
        sort_by = st.selectbox("Sort by", SORT_KEYS)

    shown = filter_transactions(transactions, search, type_filter, category_filter, sort_by)
    st.caption(f"Showing {len(shown)} of {len(transactions)}")

    if shown:
        df = tx_to_df(shown)
        st.dataframe(df, use_container_width=True, hide_index=True)
        st.download_button(
            "⬇️ Download CSV",
            df.to_csv(index=False),
            file_name="transactions.csv",
            mime="text/csv",
        )

        st.markdown("**Edit or delete**")
        by_label = {f"{format_date(t.date)} · {t.description} · {format_currency(t.amount)} · {t.id[:6]}": t for t in shown}
        picked = by_label[st.selectbox("Transaction", list(by_label))]
        with st.form("edit_transaction"):
            e1, e2 = st.columns(2)
            with e1:
                new_amount = st.number_input("Amount", min_value=0.0, value=float(picked.amount), step=1.0, key=f"edit_amount_{picked.id}")
                new_date = st.date_input("Date", value=date.fromisoformat(picked.date), key=f"edit_date_{picked.id}")
            with e2:
                options = categories_for(picked.type)
                new_category = st.selectbox(
                    "Category",
                    options,
                    index=options.index(picked.category) if picked.category in options else 0,
                    key=f"edit_category_{picked.id}",
                )
                new_description = st.text_input("Description", value=picked.description, key=f"edit_description_{picked.id}")
            save, remove = st.columns(2)
            with save:
                update_clicked = st.form_submit_button("Update Transaction")
            with remove:
                delete_clicked = st.form_submit_button("🗑 Delete")

        if update_clicked:
            result = tx_service.update(picked.id, {
                "amount": new_amount,
                "date": new_date,
                "description": new_description,
                "category": new_category,
            })
            if result.is_right():
                st.rerun()
            else:
                show_errors(result.get_error())
        if delete_clicked:
            tx_service.delete(picked.id)
            st.rerun()
    elif search or type_filter != "all" or category_filter != "all":
        st.info("No transactions found matching your filters.")
    else:
        st.info("No transactions yet. Add your first transaction above!")

elif menu == "🎯 Budgets":
    st.title(f"🎯 Budget Overview - {month_name(selected_month)}")
    overview = report["budgets"]

    b1, b2, b3 = st.columns(3)
    with b1:
        st.metric("Total Budget", format_currency(overview.total_budget))
    with b2:
        st.metric("Total Spent", format_currency(overview.total_spent))
    with b3:
        st.metric("Remaining", format_currency(overview.remaining))
    st.caption(f"Overall Progress {overview.overall_percentage:.1f}%")
    st.progress(min(overview.overall_percentage, 100) / 100)

    st.subheader("Set Budget")
    c1, c2, c3 = st.columns(3)
    with c1:
        budget_category = st.selectbox("Category", EXPENSE_CATEGORIES, index=None, key="budget_category")
    with c3:
        budget_month = st.selectbox("Month", upcoming_months(this_month), format_func=month_name, key="budget_month")
    existing = budget_service.budget_for(budget_category or "", budget_month).map(lambda b: b.amount)
    with c2:
        budget_amount = st.number_input(
            f"Budget Amount ({config.CURRENCY_SYMBOL})",
            min_value=0.0,
            value=float(existing.get_or_else(0.0)),
            step=100.0,
            key=f"budget_amount_{budget_category}_{budget_month}",
        )
    if existing.is_some():
        st.caption(f"Current budget: {format_currency(existing.get_or_else(0.0))}. Saving replaces it.")
    if st.button("Set Budget"):
        result = budget_service.set_budget({
            "category": budget_category,
            "amount": budget_amount,
            "month": budget_month,
        })
        if result.is_right():
            st.rerun()
        else:
            show_errors(result.get_error())

    if not overview.items:
        st.info(f"Set your first budget to start tracking your spending goals for {month_name(selected_month)}.")

    badge = {OVER: "🔴", WARNING: "🟡"}
    for item in overview.items:
        budget = item.budget
        with st.container(border=True):
            head, action = st.columns([5, 1])
            with head:
                st.markdown(f"**{badge.get(item.status, '🟢')} {item.category}** · {item.percentage:.0f}%")
                st.caption(
                    f"Spent {format_currency(item.spent)} of {format_currency(budget.amount)} · "
                    f"{format_currency(item.remaining)} remaining"
                )
                st.progress(min(item.percentage, 100) / 100)
            with action:
                if st.button("🗑", key=f"del_budget_{budget.id}"):
                    budget_service.delete(budget.id)
                    st.rerun()

            with st.expander("✏️ Edit budget"):
                with st.form(f"edit_budget_{budget.id}"):
                    months = upcoming_months(this_month)
                    if budget.month not in months:
                        months = (budget.month,) + months
                    e1, e2, e3 = st.columns(3)
                    with e1:
                        new_category = st.selectbox(
                            "Category",
                            EXPENSE_CATEGORIES,
                            index=EXPENSE_CATEGORIES.index(budget.category) if budget.category in EXPENSE_CATEGORIES else 0,
                            key=f"edit_budget_category_{budget.id}",
                        )
                    with e2:
                        new_amount = st.number_input(
                            "Amount",
                            min_value=0.0,
                            value=float(budget.amount),
                            step=100.0,
                            key=f"edit_budget_amount_{budget.id}",
                        )
                    with e3:
                        new_month = st.selectbox(
                            "Month",
                            months,
                            index=months.index(budget.month),
                            format_func=month_name,
                            key=f"edit_budget_month_{budget.id}",
                        )
                    edit_clicked = st.form_submit_button("Update Budget")

            if edit_clicked:
                result = budget_service.update(budget.id, {
                    "category": new_category,
                    "amount": new_amount,
                    "month": new_month,
                })
                if result.is_right():
                    st.rerun()
                else:
                    show_errors(result.get_error())

    if overview.items:
        df_budget = pd.DataFrame([
            {"Category": item.category, "Budget": item.budget.amount, "Spent": item.spent}
            for item in overview.items
        ])
        fig_budget = px.bar(
            df_budget,
            x="Category",
            y=["Budget", "Spent"],
            barmode="group",
            title="Budget vs Actual",
            template="plotly_dark",
        )
        st.plotly_chart(fig_budget, use_container_width=True)

elif menu == "💡 Insights":
    st.title("💡 Financial Insights")
    insights = report["insights"]
    if not insights:
        st.info("Add more transactions and budgets to get personalized insights.")

    for insight in insights:
        if insight.severity == WARNING:
            st.warning(f"**{insight.title}**: {insight.message}")
        elif insight.severity == SUCCESS:
            st.success(f"**{insight.title}**: {insight.message}")
        else:
            st.info(f"**{insight.title}**: {insight.message}")
