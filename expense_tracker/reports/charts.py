"""Plotly chart builders for the report views.

Each function takes aggregation output and returns a
``plotly.graph_objects.Figure`` ready for ``st.plotly_chart``.
Empty input returns an empty figure titled "No data to display"
rather than raising.
"""

from typing import Sequence

import plotly.express as px
import plotly.graph_objects as go

from expense_tracker.formatting import format_inr, format_short_date
from expense_tracker.models.expense import ExpenseCategory
from expense_tracker.models.report import (
    CategorySummary,
    DailySummary,
    DayIntensity,
    GroupSummary,
)


CATEGORY_COLORS = {
    ExpenseCategory.FOOD: "#FF6B6B",
    ExpenseCategory.TRANSPORTATION: "#4ECDC4",
    ExpenseCategory.SHOPPING: "#45B7D1",
    ExpenseCategory.ENTERTAINMENT: "#96CEB4",
    ExpenseCategory.BILLS_UTILITIES: "#FECA57",
    ExpenseCategory.HEALTHCARE: "#FF9FF3",
    ExpenseCategory.EDUCATION: "#54A0FF",
    ExpenseCategory.TRAVEL: "#5F27CD",
    ExpenseCategory.OTHER: "#777777",
}

# Heat-map palette indexed by DayIntensity.level
INTENSITY_COLORS = (
    "rgba(148, 163, 184, 0.1)",
    "rgba(37, 99, 235, 0.2)",
    "rgba(37, 99, 235, 0.4)",
    "rgba(37, 99, 235, 0.6)",
    "rgba(37, 99, 235, 0.8)",
    "rgba(37, 99, 235, 1)",
)


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def category_color(category: ExpenseCategory) -> str:
    return CATEGORY_COLORS.get(category, "#777777")


def create_category_pie_chart(categories: Sequence[CategorySummary]) -> go.Figure:
    """Share of the month's spend per category."""
    if not categories:
        return _empty_figure()
    fig = px.pie(
        names=[c.category.value for c in categories],
        values=[float(c.total) for c in categories],
        color=[c.category.value for c in categories],
        color_discrete_map={k.value: v for k, v in CATEGORY_COLORS.items()},
    )
    fig.update_traces(
        textinfo="label+percent",
        customdata=[format_inr(c.total) for c in categories],
        hovertemplate="%{label}: %{customdata}<extra></extra>",
    )
    fig.update_layout(title="Distribution", showlegend=False)
    return fig


def create_category_bar_chart(categories: Sequence[CategorySummary]) -> go.Figure:
    """Amount spent per category, largest first."""
    if not categories:
        return _empty_figure()
    fig = go.Figure(go.Bar(
        x=[c.category.value for c in categories],
        y=[float(c.total) for c in categories],
        marker_color=[category_color(c.category) for c in categories],
        customdata=[[format_inr(c.total), c.count] for c in categories],
        hovertemplate="%{x}<br>%{customdata[0]} (%{customdata[1]} expenses)<extra></extra>",
    ))
    fig.update_layout(
        title="Amount by Category",
        xaxis_title="Category",
        yaxis_title="Amount (₹)",
        xaxis_tickangle=-45,
    )
    return fig


def create_daily_line_chart(daily: Sequence[DailySummary]) -> go.Figure:
    """Spending over time; expects chronological input (see recent_daily_trend)."""
    if not daily:
        return _empty_figure()
    fig = go.Figure(go.Scatter(
        x=[format_short_date(d.date) for d in daily],
        y=[float(d.total) for d in daily],
        mode="lines+markers",
        line={"color": "#45B7D1", "width": 3, "shape": "spline"},
        marker={"size": 8},
        customdata=[format_inr(d.total) for d in daily],
        hovertemplate="%{x}: %{customdata}<extra></extra>",
    ))
    fig.update_layout(title="Spending Over Time", xaxis_title="Date", yaxis_title="Amount (₹)")
    return fig


def create_daily_bar_chart(daily: Sequence[DailySummary]) -> go.Figure:
    """Daily amounts as bars; expects chronological input."""
    if not daily:
        return _empty_figure()
    fig = go.Figure(go.Bar(
        x=[format_short_date(d.date) for d in daily],
        y=[float(d.total) for d in daily],
        marker_color="#96CEB4",
        customdata=[format_inr(d.total) for d in daily],
        hovertemplate="%{x}: %{customdata}<extra></extra>",
    ))
    fig.update_layout(title="Daily Amounts", xaxis_title="Date", yaxis_title="Amount (₹)")
    return fig


def create_group_bar_chart(groups: Sequence[GroupSummary], title: str) -> go.Figure:
    """Horizontal bars for paid-by / payment-method breakdowns."""
    if not groups:
        return _empty_figure()
    fig = go.Figure(go.Bar(
        y=[g.label for g in groups],
        x=[float(g.total) for g in groups],
        orientation="h",
        marker_color="#2563EB",
        customdata=[format_inr(g.total) for g in groups],
        hovertemplate="%{y}: %{customdata}<extra></extra>",
    ))
    fig.update_layout(title=title, xaxis_title="Amount (₹)", yaxis={"autorange": "reversed"})
    return fig


def create_heatmap_calendar(cells: Sequence[DayIntensity], columns: int = 7) -> go.Figure:
    """
    Month grid of daily spending intensity, ``columns`` days per row.

    Colour comes from the cell's level so the legend buckets match the
    thresholds used by the aggregation engine.
    """
    if not cells:
        return _empty_figure()
    rows = (len(cells) + columns - 1) // columns
    z, text, hover = [], [], []
    for row in range(rows):
        chunk = cells[row * columns:(row + 1) * columns]
        z.append([c.level for c in chunk] + [None] * (columns - len(chunk)))
        text.append([str(c.day) for c in chunk] + [""] * (columns - len(chunk)))
        hover.append(
            [f"Day {c.day}: {format_inr(c.amount, decimals=0)}" for c in chunk]
            + [""] * (columns - len(chunk))
        )

    last = len(INTENSITY_COLORS) - 1
    colorscale = [[level / last, color] for level, color in enumerate(INTENSITY_COLORS)]
    fig = go.Figure(go.Heatmap(
        z=z,
        text=text,
        texttemplate="%{text}",
        hovertext=hover,
        hoverinfo="text",
        zmin=0,
        zmax=last,
        colorscale=colorscale,
        showscale=False,
        xgap=3,
        ygap=3,
    ))
    fig.update_layout(
        title="Daily Spending Intensity",
        xaxis={"visible": False},
        yaxis={"visible": False, "autorange": "reversed"},
        height=80 + 50 * rows,
    )
    return fig
