import os

from ..data_structures import SimulationParameters, SimulationRun
from .dashboard import make_dashboard


def generate_dashboard(
    params: SimulationParameters,
    run: SimulationRun,
    out_dir: str,
    bin_count: int = 30,
) -> str:
    """
    Generates an interactive Plotly dashboard for one run.
    Saves:
        - dashboard.html
    Returns:
        Path to dashboard.html
    """
    fig = make_dashboard(params, run, bin_count=bin_count)

    dashboard_path = os.path.join(out_dir, "dashboard.html")
    fig.write_html(dashboard_path, include_plotlyjs="cdn")

    return dashboard_path
