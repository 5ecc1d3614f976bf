import math

import numpy as np
from numba import njit


@njit
def _mulberry32_next(word):
    """
    One Mulberry32 step on an int64 holding a 32-bit word.
    Products may wrap int64; only the low 32 bits are kept.
    """
    word = (word + 0x6D2B79F5) & 0xFFFFFFFF
    t = word
    t = ((t ^ (t >> 15)) * (t | 1)) & 0xFFFFFFFF
    t = (t ^ ((t + ((t ^ (t >> 7)) * (t | 61))) & 0xFFFFFFFF)) & 0xFFFFFFFF
    out = (t ^ (t >> 14)) & 0xFFFFFFFF
    return word, out / 4294967296.0


@njit
def _simulate_kernel(
    initial_amount: float,
    annual_return: float,
    volatility: float,
    years: int,
    num_simulations: int,
    word: int,
):
    """
    Sequential kernel: same draw order as the python backend
    (all years of simulation 0, then simulation 1, ...).
    """
    paths = np.empty((num_simulations, years + 1), dtype=np.float64)

    for sim in range(num_simulations):
        value = initial_amount
        paths[sim, 0] = value

        for year in range(1, years + 1):
            u = 0.0
            while u == 0.0:
                word, u = _mulberry32_next(word)
            v = 0.0
            while v == 0.0:
                word, v = _mulberry32_next(word)

            z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
            random_return = z * volatility + annual_return
            value = value * (1.0 + random_return)
            paths[sim, year] = value

    return paths


def simulate_paths_numba(
    initial_amount: float,
    annual_return: float,
    volatility: float,
    years: int,
    num_simulations: int,
    seed: int,
) -> np.ndarray:
    return _simulate_kernel(
        float(initial_amount),
        float(annual_return),
        float(volatility),
        int(years),
        int(num_simulations),
        np.int64(int(seed) & 0xFFFFFFFF),
    )
