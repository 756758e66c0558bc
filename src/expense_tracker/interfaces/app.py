# src/expense_tracker/interfaces/app.py
# Streamlit page for the Telegram mini app
# - Day buttons + per-category pie chart + list of the day's expenses
# - Data from the shared Google Sheet, re-fetched every EXPENSES_REFRESH_SECONDS
# - Local mode (EXPENSES_DATA_SOURCE=local): manual entry form + JSON ledger
#
# Run: streamlit run src/expense_tracker/interfaces/app.py

from __future__ import annotations

import time
from datetime import date

import streamlit as st

from expense_tracker.config import load_settings
from expense_tracker.interfaces.charts import pie_figure, transactions_frame, tx_lines
from expense_tracker.interfaces.telegram import TelegramHost
from expense_tracker.logging_setup import configure_logging
from expense_tracker.services.store import ExpenseStore


# -----------------------------
# Page config
# -----------------------------
st.set_page_config(page_title="Финансы", layout="centered")
st.title("Финансы в Telegram")

settings = load_settings()
configure_logging(settings.log_level)


# -----------------------------
# Session state (one store per browser session)
# -----------------------------
if "store" not in st.session_state:
    store = ExpenseStore(settings)
    with st.spinner("Загрузка категорий..."):
        store.load_categories()
    st.session_state["store"] = store
    st.session_state["last_refresh_at"] = None

store: ExpenseStore = st.session_state["store"]
local_mode = settings.data_source == "local"


# -----------------------------
# Host runtime (best-effort)
# -----------------------------
host = TelegramHost(enabled=settings.host_enabled, query_params=st.query_params.to_dict())
if "host_ready" not in st.session_state:
    host.ready()
    st.session_state["host_ready"] = True
if local_mode:
    host.set_main_button("Добавить", visible=True, active=True)


def refresh_if_due(force: bool = False) -> None:
    now = time.monotonic()
    if force or store.refresh_due(st.session_state["last_refresh_at"], now):
        with st.spinner("Загрузка данных..."):
            store.refresh()
        st.session_state["last_refresh_at"] = now


# -----------------------------
# Manual entry (local mode only)
# -----------------------------
if local_mode:
    with st.form("add_tx_form", clear_on_submit=True):
        c1, c2 = st.columns(2)
        with c1:
            f_amount = st.text_input("Сумма")
            f_category = st.selectbox("Категория", store.categories_for_chart())
        with c2:
            f_note = st.text_input("Комментарий")
            f_date = st.date_input("Дата", value=date.today(), max_value=date.today())
        # In Telegram the host main button clicks this one.
        submitted = st.form_submit_button("Добавить")

    if submitted:
        problem = store.add_manual(f_amount, f_category, note=f_note, on=f_date.isoformat())
        if problem:
            st.warning(problem)
        else:
            refresh_if_due(force=True)


# -----------------------------
# Dashboard (re-runs on its own timer)
# -----------------------------
@st.fragment(run_every=settings.refresh_seconds)
def dashboard() -> None:
    refresh_if_due()

    alert = store.pop_alert()
    if alert:
        st.error(alert)

    view = store.view()

    if view.days:
        cols = st.columns(min(len(view.days), 7))
        for i, d in enumerate(view.days):
            with cols[i % len(cols)]:
                if st.button(d, key=f"day_{d}", type="primary" if d == view.day else "secondary"):
                    store.select_day(d)
                    st.rerun(scope="fragment")

    st.subheader(f"Диаграмма за {view.day}")
    if view.totals.is_empty():
        st.info("Нет данных для диаграммы.")
    else:
        st.plotly_chart(pie_figure(view.totals), use_container_width=True)

    st.subheader(f"Траты за {view.day}")
    for line in tx_lines(view.transactions):
        st.markdown(f"- {line}")
    if view.transactions:
        with st.expander("Таблица"):
            st.dataframe(transactions_frame(view.transactions), width="stretch", hide_index=True)


dashboard()
