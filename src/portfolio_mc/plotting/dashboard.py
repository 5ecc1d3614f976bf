import plotly.graph_objects as go

from ..analysis import histogram, year_bands
from ..data_structures import SimulationParameters, SimulationRun
from .layout import apply_standard_layout, format_currency_axis, make_stacked_subplots
from .panels.distribution_panel import add_distribution_traces
from .panels.growth_panel import add_growth_traces


def make_dashboard(
    params: SimulationParameters,
    run: SimulationRun,
    bin_count: int = 30,
) -> go.Figure:
    """
    Two stacked views of one run:
      - Growth Projection: percentile lines per year
      - Distribution: histogram of final values
    """
    fig = make_stacked_subplots(["Growth Projection", "Distribution of Final Values"])

    if run.num_simulations == 0:
        fig.add_annotation(
            text="No simulations were run",
            showarrow=False,
            font=dict(color="red"),
            row=1,
            col=1,
        )
    else:
        add_growth_traces(fig, year_bands(run), params.initial_amount, row=1, col=1)
        add_distribution_traces(fig, histogram(run.final_values, bin_count), row=2, col=1)

    fig.update_xaxes(title_text="Year", row=1, col=1)
    format_currency_axis(fig, row=1, col=1)
    fig.update_xaxes(title_text="Final value", row=2, col=1)
    fig.update_yaxes(title_text="Simulations", row=2, col=1)

    apply_standard_layout(
        fig,
        f"Monte Carlo Projection: {params.num_simulations:,} simulations, "
        f"{params.years} years, seed {params.seed}",
    )
    return fig
