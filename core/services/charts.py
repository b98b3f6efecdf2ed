from __future__ import annotations

import plotly.graph_objects as go

from core.services.monthly import MonthlyAggregate

KENYA_COLOR = "#FF9800"
UK_COLOR = "#4CAF50"


def _fmt(v: float) -> str:
    return f"{v:,.0f}"


def cumulative_distribution_figure(aggregates: list[MonthlyAggregate]) -> go.Figure:
    """Stacked cumulative Kenya/UK bars per month, with the running total above each bar."""
    months = [a.month_key for a in aggregates]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=months,
        y=[a.cumulative_kenya for a in aggregates],
        name="Kenya Sales (Cumulative)",
        marker_color=KENYA_COLOR,
        hovertemplate="%{y:,.0f} bottles<extra>Kenya Market (Cumulative)</extra>",
    ))
    fig.add_trace(go.Bar(
        x=months,
        y=[a.cumulative_uk for a in aggregates],
        name="UK Sales (Cumulative)",
        marker_color=UK_COLOR,
        text=[f"Total: {_fmt(a.cumulative_total)}" for a in aggregates],
        textposition="outside",
        hovertemplate="%{y:,.0f} bottles<extra>UK Market (Cumulative)</extra>",
    ))

    fig.update_layout(
        barmode="stack",
        height=380,
        xaxis_title="Month/Year",
        yaxis_title="Cumulative Bottle Count",
        legend=dict(orientation="h", yanchor="bottom", y=1.02),
        margin=dict(t=40, b=40),
    )
    # Chronological, not alphabetical.
    fig.update_xaxes(categoryorder="array", categoryarray=months, tickangle=-45)
    fig.update_yaxes(tickformat=",.0f")
    return fig
