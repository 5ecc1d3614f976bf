# ============================================================
#  engine.py: path simulator for portfolio-mc
# ============================================================

import os
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Tuple

import numpy as np

from .data_structures import SimulationParameters, SimulationRun
from .mc_generator import derive_stream_seed, seed_generator, standard_normal

BACKENDS = ("python", "numba")


def _compound_path(
    out: np.ndarray,
    initial_amount: float,
    annual_return: float,
    volatility: float,
    state,
):
    """
    Fill one row of `out` (length years + 1) and return the advanced state.
    Values may go negative when a drawn return is below -100%.
    """
    value = initial_amount
    out[0] = value
    for year in range(1, out.shape[0]):
        z, state = standard_normal(state)
        random_return = z * volatility + annual_return
        value = value * (1 + random_return)
        out[year] = value
    return state


def _simulate_paths_python(params: SimulationParameters) -> np.ndarray:
    paths = np.empty((params.num_simulations, params.years + 1), dtype=np.float64)

    # One generator threaded through every simulation, then every year.
    state = seed_generator(params.seed)
    for sim in range(params.num_simulations):
        state = _compound_path(
            paths[sim],
            params.initial_amount,
            params.annual_return,
            params.volatility,
            state,
        )
    return paths


def _simulate_paths_numba(params: SimulationParameters) -> np.ndarray:
    # numba is only imported for this backend.
    from .engine_numba import simulate_paths_numba

    return simulate_paths_numba(
        params.initial_amount,
        params.annual_return,
        params.volatility,
        params.years,
        params.num_simulations,
        params.seed,
    )


def _pack_run(paths: np.ndarray, metadata: dict) -> SimulationRun:
    final_values = paths[:, -1].copy()
    return SimulationRun(paths=paths, final_values=final_values, metadata=metadata)


# ============================================================
#  MAIN ENTRY: run_simulation()
# ============================================================


def run_simulation(
    params: SimulationParameters,
    backend: str = "python",
) -> SimulationRun:
    """
    Strictly sequential reference simulation.

    Simulation 0 draws its year 1..N normals before simulation 1 starts, so
    re-running with the same parameters reproduces every path bit for bit.
    """
    if backend == "python":
        paths = _simulate_paths_python(params)
    elif backend == "numba":
        paths = _simulate_paths_numba(params)
    else:
        raise ValueError(f"Unknown backend: {backend} (expected one of {BACKENDS})")

    return _pack_run(paths, {"mode": "sequential", "backend": backend})


# ============================================================
#  Independent-stream variant
# ============================================================


def _simulate_stream_chunk(
    params: SimulationParameters, start: int, stop: int
) -> Tuple[int, np.ndarray]:
    chunk = np.empty((stop - start, params.years + 1), dtype=np.float64)
    for offset, sim in enumerate(range(start, stop)):
        state = seed_generator(derive_stream_seed(params.seed, sim))
        _compound_path(
            chunk[offset],
            params.initial_amount,
            params.annual_return,
            params.volatility,
            state,
        )
    return start, chunk


def _chunk_bounds(total: int, parts: int) -> List[Tuple[int, int]]:
    if total == 0:
        return []
    parts = max(1, min(parts, total))
    step, extra = divmod(total, parts)
    bounds = []
    start = 0
    for i in range(parts):
        stop = start + step + (1 if i < extra else 0)
        bounds.append((start, stop))
        start = stop
    return bounds


def run_simulation_streams(
    params: SimulationParameters,
    max_workers: Optional[int] = 1,
) -> SimulationRun:
    """
    Parallel-safe variant: simulation i gets its own generator seeded with
    derive_stream_seed(params.seed, i).

    Output does not depend on max_workers, but it is NOT bit-compatible with
    run_simulation(): the draw sequence per path is different.
    """
    if max_workers is not None and max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    workers = max_workers if max_workers is not None else (os.cpu_count() or 1)
    paths = np.empty((params.num_simulations, params.years + 1), dtype=np.float64)
    bounds = _chunk_bounds(params.num_simulations, workers)

    if len(bounds) <= 1:
        results = [_simulate_stream_chunk(params, start, stop) for start, stop in bounds]
    else:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(_simulate_stream_chunk, params, start, stop)
                for start, stop in bounds
            ]
            results = [f.result() for f in futures]

    for start, chunk in results:
        paths[start : start + chunk.shape[0]] = chunk

    return _pack_run(paths, {"mode": "streams", "backend": "python"})
