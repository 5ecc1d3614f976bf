# portfolio_mc/mc_generator.py
import math
from typing import NamedTuple, Tuple

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_GOLDEN = 0x9E3779B9
_TWO_POW_32 = 4294967296.0


class GeneratorState(NamedTuple):
    """
    Mulberry32 generator state: one unsigned 32-bit word.

    Immutable. Every draw returns a new state, so two states built from the
    same seed and advanced the same number of times always agree.
    """

    word: int


def seed_generator(seed: int) -> GeneratorState:
    """Build a generator state from any integer seed (reduced mod 2^32)."""
    return GeneratorState(int(seed) & _MASK32)


def _mulberry32(word: int) -> Tuple[int, int]:
    """
    Advance a raw 32-bit word once.
    Returns (new_word, 32-bit output).
    """
    word = (word + _INCREMENT) & _MASK32
    t = word
    t = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
    t = (t ^ ((t + ((t ^ (t >> 7)) * (t | 61))) & _MASK32)) & _MASK32
    return word, (t ^ (t >> 14)) & _MASK32


def next_uniform(state: GeneratorState) -> Tuple[float, GeneratorState]:
    """Draw one uniform value in [0, 1)."""
    word, out = _mulberry32(state.word)
    return out / _TWO_POW_32, GeneratorState(word)


def standard_normal(state: GeneratorState) -> Tuple[float, GeneratorState]:
    """
    Box-Muller (trig form) standard normal.

    Consumes exactly two uniforms, plus one more for every exact zero drawn.
    The sine companion is never cached.
    """
    u = 0.0
    while u == 0.0:
        u, state = next_uniform(state)
    v = 0.0
    while v == 0.0:
        v, state = next_uniform(state)
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v), state


def derive_stream_seed(seed: int, stream: int) -> int:
    """
    Seed for an independent per-simulation stream.

    Mixes (seed, stream) through one Mulberry32 round so neighbouring stream
    indices land far apart in the sequence.
    """
    word = (int(seed) ^ ((int(stream) + 1) * _GOLDEN)) & _MASK32
    _, out = _mulberry32(word)
    return out
