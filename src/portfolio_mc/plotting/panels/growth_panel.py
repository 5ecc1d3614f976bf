from typing import List, Optional

import plotly.graph_objects as go

from ...data_structures import YearBand
from ..layout import apply_standard_layout, format_currency_axis
from ..utils.color_schemes import BAND_COLORS, BAND_NAMES, INITIAL_AMOUNT_COLOR
from ..utils.transforms import bands_to_series


def add_growth_traces(
    fig: go.Figure,
    bands: List[YearBand],
    initial_amount: Optional[float] = None,
    row: Optional[int] = None,
    col: Optional[int] = None,
):
    """
    Percentile lines per year (P90 down to P10), median drawn thicker.
    """
    series = bands_to_series(bands)
    loc = dict(row=row, col=col) if row is not None else {}

    for key in ["q90", "q75", "median", "q25", "q10"]:
        fig.add_trace(
            go.Scatter(
                x=series["year"],
                y=series[key],
                mode="lines",
                name=BAND_NAMES[key],
                line=dict(color=BAND_COLORS[key], width=3 if key == "median" else 2),
                legendgroup="growth",
            ),
            **loc,
        )

    if initial_amount is not None and series["year"]:
        fig.add_trace(
            go.Scatter(
                x=[series["year"][0], series["year"][-1]],
                y=[initial_amount, initial_amount],
                mode="lines",
                name="Initial amount",
                line=dict(color=INITIAL_AMOUNT_COLOR, width=1, dash="dash"),
                legendgroup="growth",
            ),
            **loc,
        )


def make_growth_panel(
    bands: List[YearBand], initial_amount: Optional[float] = None
) -> go.Figure:
    fig = go.Figure()
    if not bands:
        fig.add_annotation(text="No growth data", showarrow=False, font=dict(color="red"))
    else:
        add_growth_traces(fig, bands, initial_amount)
    fig.update_xaxes(title_text="Year")
    format_currency_axis(fig)
    apply_standard_layout(fig, "Growth Projection")
    return fig
