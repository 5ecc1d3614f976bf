from .data_structures import (
    SimulationParameters,
    SimulationRun,
    YearValue,
    DistributionSummary,
    YearBand,
    HistogramBin,
)
from .mc_generator import (
    GeneratorState,
    seed_generator,
    next_uniform,
    standard_normal,
    derive_stream_seed,
)
from .engine import run_simulation, run_simulation_streams
from .analysis import quantile, summarize, year_bands, histogram
