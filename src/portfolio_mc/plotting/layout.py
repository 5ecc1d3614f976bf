from typing import List, Optional

import plotly.graph_objects as go
from plotly.subplots import make_subplots


def make_stacked_subplots(
    row_titles: List[str],
    vertical_spacing: float = 0.12,
    height_per_row: int = 420,
) -> go.Figure:
    """
    One subplot per title, stacked vertically. Rows do not share an x axis:
    the growth view is indexed by year, the distribution view by value range.
    """
    fig = make_subplots(
        rows=len(row_titles),
        cols=1,
        vertical_spacing=vertical_spacing,
        subplot_titles=row_titles,
    )
    fig.update_layout(height=len(row_titles) * height_per_row, showlegend=True)
    return fig


def format_currency_axis(
    fig: go.Figure,
    title: str = "Portfolio value ($)",
    row: Optional[int] = None,
    col: Optional[int] = None,
):
    """Dollar tick labels with thousands separators on a y axis."""
    loc = dict(row=row, col=col) if row is not None else {}
    fig.update_yaxes(title_text=title, tickprefix="$", tickformat=",.0f", **loc)


def apply_standard_layout(fig: go.Figure, title: str, hovermode: str = "x unified"):
    fig.update_layout(
        title=title,
        template="plotly_white",
        margin=dict(l=50, r=50, t=80, b=50),
        hovermode=hovermode,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
