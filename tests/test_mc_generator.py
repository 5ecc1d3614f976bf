import math

import pytest

from portfolio_mc import mc_generator
from portfolio_mc.mc_generator import (
    GeneratorState,
    derive_stream_seed,
    next_uniform,
    seed_generator,
    standard_normal,
)


def _draw(state, n):
    out = []
    for _ in range(n):
        u, state = next_uniform(state)
        out.append(u)
    return out, state


def test_reference_values():
    # Mulberry32 outputs for seeds 42 and 0, as 32-bit integers
    values, _ = _draw(seed_generator(42), 3)
    assert values == [
        2581720956 / 2**32,
        1925393290 / 2**32,
        3661312704 / 2**32,
    ]

    values, _ = _draw(seed_generator(0), 3)
    assert values == [
        1144304738 / 2**32,
        1416247 / 2**32,
        958946056 / 2**32,
    ]


def test_state_advances_by_increment_with_wraparound():
    state = seed_generator(0)
    _, state = next_uniform(state)
    assert state.word == 0x6D2B79F5
    _, state = next_uniform(state)
    assert state.word == 3663131626
    _, state = next_uniform(state)
    # 3 * 0x6D2B79F5 overflows 32 bits
    assert state.word == 1199730143


def test_same_seed_same_sequence():
    a, end_a = _draw(seed_generator(1234), 1000)
    b, end_b = _draw(seed_generator(1234), 1000)
    assert a == b
    assert end_a == end_b


def test_state_is_never_mutated():
    state = seed_generator(7)
    u1, _ = next_uniform(state)
    u2, _ = next_uniform(state)
    assert u1 == u2
    assert state == GeneratorState(7)


def test_uniform_range_and_mean():
    values, _ = _draw(seed_generator(123), 20_000)
    assert all(0.0 <= v < 1.0 for v in values)
    assert sum(values) / len(values) == pytest.approx(0.5, abs=0.01)


def test_seed_is_reduced_mod_2_32():
    assert seed_generator(-1) == seed_generator(2**32 - 1)
    assert seed_generator(2**32 + 5) == seed_generator(5)


def test_state_word_stays_32_bit():
    state = seed_generator(0xFFFFFFFF)
    for _ in range(500):
        _, state = next_uniform(state)
        assert 0 <= state.word <= 0xFFFFFFFF


def test_standard_normal_consumes_two_draws():
    state = seed_generator(42)
    _, after = standard_normal(state)

    _, s1 = next_uniform(state)
    _, s2 = next_uniform(s1)
    assert after == s2


def test_standard_normal_matches_box_muller():
    state = seed_generator(42)
    z, _ = standard_normal(state)

    u, s1 = next_uniform(state)
    v, _ = next_uniform(s1)
    assert z == math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


def test_zero_draws_are_redrawn(monkeypatch):
    scripted = iter([0.0, math.exp(-0.5), 0.0, 0.5])
    calls = []

    def fake_next_uniform(state):
        calls.append(state)
        return next(scripted), GeneratorState(state.word + 1)

    monkeypatch.setattr(mc_generator, "next_uniform", fake_next_uniform)

    z, state = standard_normal(GeneratorState(0))
    assert len(calls) == 4
    assert state == GeneratorState(4)
    # sqrt(-2 ln e^-0.5) * cos(pi) = -1
    assert z == pytest.approx(-1.0)


def test_standard_normal_moments():
    state = seed_generator(2024)
    draws = []
    for _ in range(20_000):
        z, state = standard_normal(state)
        draws.append(z)

    mean = sum(draws) / len(draws)
    var = sum((d - mean) ** 2 for d in draws) / len(draws)
    assert mean == pytest.approx(0.0, abs=0.03)
    assert var == pytest.approx(1.0, abs=0.05)


def test_derive_stream_seed():
    seeds = [derive_stream_seed(42, i) for i in range(1000)]
    assert seeds == [derive_stream_seed(42, i) for i in range(1000)]
    assert all(0 <= s <= 0xFFFFFFFF for s in seeds)
    assert len(set(seeds)) == len(seeds)
    assert derive_stream_seed(42, 0) != derive_stream_seed(43, 0)
