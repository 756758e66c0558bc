"""
Presentation helpers shared by the Streamlit page and the terminal client.

Nothing here touches Streamlit, so the chart and table building can be
tested without a running app.
"""

from __future__ import annotations

from typing import List, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from expense_tracker.domain.models import CategoryTotals, Transaction

CURRENCY = "₽"
EMPTY_DAY = "Нет трат"


def format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return f"{int(amount)}{CURRENCY}"
    return f"{amount:.2f}{CURRENCY}"


def format_tx_line(tx: Transaction) -> str:
    line = f"{format_amount(tx.amount)} — {tx.category}"
    return f"{line} {tx.note}" if tx.note else line


def tx_lines(transactions: Sequence[Transaction]) -> List[str]:
    if not transactions:
        return [EMPTY_DAY]
    return [format_tx_line(tx) for tx in transactions]


def transactions_frame(transactions: Sequence[Transaction]) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"Сумма": tx.amount, "Категория": tx.category, "Комментарий": tx.note} for tx in transactions],
        columns=["Сумма", "Категория", "Комментарий"],
    )
    return df


def pie_figure(totals: CategoryTotals, title: str | None = None) -> go.Figure:
    """Pie chart from finished totals; never sees raw transactions."""
    fig = px.pie(
        names=totals.labels,
        values=totals.totals,
        color=totals.labels,
        color_discrete_map=dict(zip(totals.labels, totals.colors)),
        title=title,
    )
    fig.update_traces(sort=False, textinfo="percent+label")
    fig.update_layout(margin=dict(t=30, b=0, l=0, r=0), height=360, showlegend=True)
    return fig
