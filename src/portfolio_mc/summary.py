import math
import os
from dataclasses import asdict
from typing import List, Optional

import pandas as pd

from .analysis import histogram, summarize, year_bands
from .data_structures import DistributionSummary, SimulationParameters, SimulationRun

REPORT_HISTOGRAM_BINS = 30


# ------------------------------------------------------------
# Formatting helpers
# ------------------------------------------------------------


def _format_currency(val: float) -> str:
    if math.isnan(val):
        return "n/a"
    if math.isinf(val):
        return "-inf" if val < 0 else "inf"
    sign = "-" if val < 0 else ""
    return f"{sign}${abs(val):,.0f}"


def _format_pct(val: float) -> str:
    if math.isnan(val):
        return "n/a"
    return f"{val * 100:.1f}%"


def expected_gain(summary: DistributionSummary, params: SimulationParameters) -> float:
    """(mean - initial) / initial; NaN when there is nothing to compare against."""
    if params.initial_amount == 0 or math.isnan(summary.mean):
        return float("nan")
    return (summary.mean - params.initial_amount) / params.initial_amount


# ------------------------------------------------------------
# Tables
# ------------------------------------------------------------


def markdown_table(df: pd.DataFrame) -> List[str]:
    lines = ["| " + " | ".join(str(c) for c in df.columns) + " |"]
    lines.append("| " + " | ".join([":---"] * len(df.columns)) + " |")
    for row in df.itertuples(index=False):
        lines.append("| " + " | ".join(str(v) for v in row) + " |")
    return lines


def outcome_table(
    summary: DistributionSummary, params: SimulationParameters
) -> pd.DataFrame:
    rows = [
        ("Mean", _format_currency(summary.mean)),
        ("Expected Gain", _format_pct(expected_gain(summary, params))),
        ("Median", _format_currency(summary.median)),
        ("P10", _format_currency(summary.q10)),
        ("P25", _format_currency(summary.q25)),
        ("P75", _format_currency(summary.q75)),
        ("P90", _format_currency(summary.q90)),
        ("Min", _format_currency(summary.min)),
        ("Max", _format_currency(summary.max)),
        ("Probability of Loss", _format_pct(summary.prob_loss)),
    ]
    return pd.DataFrame(rows, columns=["Statistic", "Value"])


def parameter_table(params: SimulationParameters) -> pd.DataFrame:
    rows = [
        ("Initial Amount", _format_currency(params.initial_amount)),
        ("Annual Return", _format_pct(params.annual_return)),
        ("Volatility", _format_pct(params.volatility)),
        ("Years", str(params.years)),
        ("Simulations", f"{params.num_simulations:,}"),
        ("Seed", str(params.seed)),
    ]
    return pd.DataFrame(rows, columns=["Parameter", "Value"])


def year_band_table(run: SimulationRun) -> pd.DataFrame:
    df = pd.DataFrame([asdict(b) for b in year_bands(run)])
    if df.empty:
        return pd.DataFrame(columns=["Year", "P10", "P25", "Median", "P75", "P90"])
    df = df[["year", "q10", "q25", "median", "q75", "q90"]].copy()
    for col in ["q10", "q25", "median", "q75", "q90"]:
        df[col] = df[col].map(_format_currency)
    return df.rename(
        columns={"year": "Year", "q10": "P10", "q25": "P25", "median": "Median",
                 "q75": "P75", "q90": "P90"}
    )


# ------------------------------------------------------------
# Main summary generation
# ------------------------------------------------------------


def build_summary_lines(
    params: SimulationParameters,
    run: SimulationRun,
    bin_count: int = REPORT_HISTOGRAM_BINS,
    title: Optional[str] = None,
) -> List[str]:
    stats = summarize(run, params)
    lines = []

    lines.append(f"# Portfolio Projection Report: {title or 'simulation'}\n")
    lines.append(f"**Timestamp:** {pd.Timestamp.now()}\n")
    lines.append(f"**Mode:** {run.metadata.get('mode', 'sequential')} "
                 f"({run.metadata.get('backend', 'python')} backend)\n")

    lines.append("## 1. Simulation Parameters\n")
    lines.extend(markdown_table(parameter_table(params)))
    lines.append("\n")

    lines.append("## 2. Final Value Distribution\n")
    if run.num_simulations == 0:
        lines.append("_No simulations were run; statistics are undefined._\n")
    lines.extend(markdown_table(outcome_table(stats, params)))
    lines.append("\n")

    lines.append("## 3. Growth Projection\n")
    lines.extend(markdown_table(year_band_table(run)))
    lines.append("\n")

    lines.append("## 4. Histogram of Final Values\n")
    bins = histogram(run.final_values, bin_count)
    hist_df = pd.DataFrame(
        [(b.range_label, f"{b.count:,}") for b in bins], columns=["Range", "Count"]
    )
    lines.extend(markdown_table(hist_df))

    return lines


def generate_summary(
    params: SimulationParameters,
    run: SimulationRun,
    out_dir: str,
    bin_count: int = REPORT_HISTOGRAM_BINS,
) -> str:
    """
    Writes a purely quantitative markdown report to out_dir/summary.md.
    Returns the report path.
    """
    title = os.path.basename(os.path.normpath(out_dir))
    lines = build_summary_lines(params, run, bin_count=bin_count, title=title)

    full_path = os.path.join(out_dir, "summary.md")
    with open(full_path, "w") as f:
        f.write("\n".join(lines))

    return full_path
