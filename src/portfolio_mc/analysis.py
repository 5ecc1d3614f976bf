import math
import warnings
from typing import List, Optional, Sequence

import numpy as np

from .data_structures import (
    DistributionSummary,
    HistogramBin,
    SimulationParameters,
    SimulationRun,
    YearBand,
)

DEFAULT_HISTOGRAM_BINS = 40

BAND_QUANTILES = {
    "q10": 0.10,
    "q25": 0.25,
    "median": 0.50,
    "q75": 0.75,
    "q90": 0.90,
}


# ------------------------------------------------------------
# Quantiles
# ------------------------------------------------------------


def quantile(values: Sequence[float], q: float) -> float:
    """
    R-7 quantile: linear interpolation at rank (n - 1) * q.

    Sorts a fresh copy every call. Empty input returns NaN. NaN sorts last,
    so it only surfaces at the top quantiles.
    """
    if not 0.0 <= q <= 1.0:
        raise ValueError(f"q must be in [0, 1], got {q}")

    ordered = np.sort(np.asarray(values, dtype=np.float64), kind="stable")
    n = ordered.size
    if n == 0:
        return float("nan")

    pos = (n - 1) * q
    base = math.floor(pos)
    rest = pos - base
    if base + 1 < n:
        lo = float(ordered[base])
        hi = float(ordered[base + 1])
        if rest == 0.0:
            return lo
        return lo + rest * (hi - lo)
    return float(ordered[base])


# ------------------------------------------------------------
# Final-value distribution
# ------------------------------------------------------------


def _nan_summary() -> DistributionSummary:
    nan = float("nan")
    return DistributionSummary(
        mean=nan,
        median=nan,
        q10=nan,
        q25=nan,
        q75=nan,
        q90=nan,
        min=nan,
        max=nan,
        prob_loss=nan,
    )


def summarize(run: SimulationRun, params: SimulationParameters) -> DistributionSummary:
    """Scalar statistics of one run's final values."""
    values = run.final_values
    if values.size == 0:
        return _nan_summary()

    with warnings.catch_warnings():
        # inf - inf inside the mean is a legitimate NaN result here
        warnings.simplefilter("ignore", category=RuntimeWarning)
        mean = float(np.mean(values))

    return DistributionSummary(
        mean=mean,
        median=quantile(values, 0.5),
        q10=quantile(values, 0.1),
        q25=quantile(values, 0.25),
        q75=quantile(values, 0.75),
        q90=quantile(values, 0.9),
        min=float(np.min(values)),
        max=float(np.max(values)),
        prob_loss=float(np.count_nonzero(values < params.initial_amount) / values.size),
    )


def year_bands(run: SimulationRun, years: Optional[int] = None) -> List[YearBand]:
    """
    One YearBand per year index 0..years, in year order, each computed over
    the cross-section of every path at that index.
    """
    if years is None:
        years = run.years
    if years < 0 or years > run.years:
        raise ValueError(f"years must be in [0, {run.years}], got {years}")

    bands = []
    for year in range(years + 1):
        cross_section = run.paths[:, year]
        stats = {name: quantile(cross_section, q) for name, q in BAND_QUANTILES.items()}
        bands.append(YearBand(year=year, **stats))
    return bands


# ------------------------------------------------------------
# Histogram
# ------------------------------------------------------------


def _format_thousands(val: float) -> str:
    if math.isnan(val):
        return "n/a"
    if math.isinf(val):
        return "-inf" if val < 0 else "inf"
    # half-up, not banker's rounding
    k = math.floor(abs(val) / 1000.0 + 0.5)
    sign = "-" if val < 0 and k > 0 else ""
    return f"{sign}${k:,}K"


def _bin_label(lower: float, upper: float) -> str:
    return f"{_format_thousands(lower)} to {_format_thousands(upper)}"


def histogram(
    final_values: Sequence[float],
    bin_count: int = DEFAULT_HISTOGRAM_BINS,
) -> List[HistogramBin]:
    """
    Equal-width histogram over [min, max] of the final values.

    The maximum lands in the last bin. A zero-width range collapses to one
    bin. Every value is counted: +/-inf are clamped into the edge bins and
    NaN, which sorts last, lands in the last bin. The range is taken over the
    finite values only.
    """
    if bin_count < 1:
        raise ValueError(f"bin_count must be >= 1, got {bin_count}")

    values = np.asarray(final_values, dtype=np.float64)
    if values.size == 0:
        return []

    nan_count = int(np.count_nonzero(np.isnan(values)))
    ordered = values[~np.isnan(values)]
    finite = ordered[np.isfinite(ordered)]

    if finite.size == 0:
        if ordered.size == 0:
            lo = hi = float("nan")
        else:
            lo, hi = float(np.min(ordered)), float(np.max(ordered))
        return [HistogramBin(_bin_label(lo, hi), int(values.size), lo, hi)]

    lo = float(np.min(finite))
    hi = float(np.max(finite))
    if lo == hi:
        return [HistogramBin(_bin_label(lo, hi), int(values.size), lo, hi)]

    # (hi - lo) can overflow for ranges wider than the float max.
    width = hi / bin_count - lo / bin_count
    positions = np.clip(ordered, lo, hi) / width - lo / width
    indices = np.floor(positions).astype(np.int64)
    indices = np.clip(indices, 0, bin_count - 1)
    counts = np.bincount(indices, minlength=bin_count)
    counts[-1] += nan_count

    bins = []
    for i, count in enumerate(counts):
        lower = lo + i * width
        upper = hi if i == bin_count - 1 else lo + (i + 1) * width
        bins.append(HistogramBin(_bin_label(lower, upper), int(count), lower, upper))
    return bins
