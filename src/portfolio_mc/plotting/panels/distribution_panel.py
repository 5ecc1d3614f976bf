from typing import List, Optional

import plotly.graph_objects as go

from ...data_structures import HistogramBin
from ..layout import apply_standard_layout
from ..utils.color_schemes import HISTOGRAM_COLOR
from ..utils.transforms import bins_to_series


def add_distribution_traces(
    fig: go.Figure,
    bins: List[HistogramBin],
    row: Optional[int] = None,
    col: Optional[int] = None,
):
    series = bins_to_series(bins)
    loc = dict(row=row, col=col) if row is not None else {}
    fig.add_trace(
        go.Bar(
            x=series["label"],
            y=series["count"],
            name="Final values",
            marker=dict(color=HISTOGRAM_COLOR),
            opacity=0.8,
            legendgroup="distribution",
        ),
        **loc,
    )


def make_distribution_panel(bins: List[HistogramBin]) -> go.Figure:
    fig = go.Figure()
    if not bins:
        fig.add_annotation(
            text="No final values", showarrow=False, font=dict(color="red")
        )
    else:
        add_distribution_traces(fig, bins)
    fig.update_xaxes(title_text="Final value")
    fig.update_yaxes(title_text="Simulations")
    apply_standard_layout(fig, "Distribution of Final Values", hovermode="closest")
    return fig
