import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Tuple

import numpy as np


# ----------------------------------------------------------------------
# Inputs
# ----------------------------------------------------------------------


def _require_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _require_finite(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


@dataclass(frozen=True)
class SimulationParameters:
    """
    One simulation request.

    Invalid input is rejected, never clamped: negative amounts, volatility,
    horizons or trial counts raise ValueError. The seed accepts any integer
    and is reduced modulo 2^32.
    """

    initial_amount: float = 100_000.0
    annual_return: float = 0.07
    volatility: float = 0.15
    years: int = 30
    num_simulations: int = 1000
    seed: int = 42

    def __post_init__(self):
        initial_amount = _require_finite("initial_amount", self.initial_amount)
        if initial_amount < 0:
            raise ValueError(f"initial_amount must be >= 0, got {initial_amount}")
        annual_return = _require_finite("annual_return", self.annual_return)
        volatility = _require_finite("volatility", self.volatility)
        if volatility < 0:
            raise ValueError(f"volatility must be >= 0, got {volatility}")
        years = _require_int("years", self.years)
        num_simulations = _require_int("num_simulations", self.num_simulations)
        if isinstance(self.seed, bool) or not isinstance(self.seed, numbers.Integral):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")

        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "initial_amount", initial_amount)
        object.__setattr__(self, "annual_return", annual_return)
        object.__setattr__(self, "volatility", volatility)
        object.__setattr__(self, "years", years)
        object.__setattr__(self, "num_simulations", num_simulations)
        object.__setattr__(self, "seed", int(self.seed) & 0xFFFFFFFF)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_amount": self.initial_amount,
            "annual_return": self.annual_return,
            "volatility": self.volatility,
            "years": self.years,
            "num_simulations": self.num_simulations,
            "seed": self.seed,
        }


# ----------------------------------------------------------------------
# Path simulator output
# ----------------------------------------------------------------------


class YearValue(NamedTuple):
    year: int
    value: float


Trajectory = Tuple[YearValue, ...]


@dataclass(frozen=True)
class SimulationRun:
    """
    Full path-level output of one simulation invocation.

    Arrays are read-only:
        paths         [num_simulations, years + 1]
        final_values  [num_simulations]

    Row order is generation order.
    """

    paths: np.ndarray
    final_values: np.ndarray
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.paths.ndim != 2:
            raise ValueError(f"paths must be 2-D, got shape {self.paths.shape}")
        if self.final_values.shape != (self.paths.shape[0],):
            raise ValueError(
                f"final_values shape {self.final_values.shape} does not match "
                f"{self.paths.shape[0]} paths"
            )
        self.paths.setflags(write=False)
        self.final_values.setflags(write=False)

    @property
    def num_simulations(self) -> int:
        return self.paths.shape[0]

    @property
    def years(self) -> int:
        return self.paths.shape[1] - 1

    def trajectory(self, index: int) -> Trajectory:
        """(year, value) view of one path."""
        return tuple(
            YearValue(year, float(value)) for year, value in enumerate(self.paths[index])
        )

    @property
    def trajectories(self) -> List[Trajectory]:
        return [self.trajectory(i) for i in range(self.num_simulations)]


# ----------------------------------------------------------------------
# Aggregates
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class DistributionSummary:
    mean: float
    median: float
    q10: float
    q25: float
    q75: float
    q90: float
    min: float
    max: float
    prob_loss: float


@dataclass(frozen=True)
class YearBand:
    """Cross-sectional quantiles of all paths at one year index."""

    year: int
    median: float
    q10: float
    q25: float
    q75: float
    q90: float


@dataclass(frozen=True)
class HistogramBin:
    range_label: str
    count: int
    lower: float
    upper: float
