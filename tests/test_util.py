import math

import pytest

from iadcore import util


@pytest.mark.parametrize("a", [0.01, 0.2, 0.5, 0.73, 0.99])
def test_albedo_round_trip(a):
    assert util.acalc2a(util.a2acalc(a)) == pytest.approx(a, rel=1e-9)


def test_albedo_limits():
    assert util.a2acalc(0) == -util.BIG_A_VALUE
    assert util.a2acalc(1) == util.BIG_A_VALUE
    assert util.acalc2a(util.BIG_A_VALUE) == 1.0
    assert util.acalc2a(-util.BIG_A_VALUE) == 0.0
    assert util.acalc2a(0.0) == 0.5


def test_albedo_map_is_monotonic():
    values = [util.a2acalc(a) for a in (0.1, 0.3, 0.5, 0.7, 0.9)]
    assert values == sorted(values)


@pytest.mark.parametrize("g", [-0.9, -0.3, 0.0, 0.4, 0.95])
def test_anisotropy_round_trip(g):
    assert util.gcalc2g(util.g2gcalc(g)) == pytest.approx(g, abs=1e-12)


def test_anisotropy_limits():
    assert util.g2gcalc(1) == math.inf
    assert util.g2gcalc(-1) == -math.inf
    assert util.gcalc2g(math.inf) == 1.0
    assert util.gcalc2g(-math.inf) == -1.0


@pytest.mark.parametrize("b", [0.01, 1.0, 12.5, 300.0])
def test_thickness_round_trip(b):
    assert util.bcalc2b(util.b2bcalc(b)) == pytest.approx(b, rel=1e-12)


def test_thickness_limits():
    assert util.b2bcalc(math.inf) == math.inf
    assert util.b2bcalc(0) == 0.0
    assert util.b2bcalc(-2) == 0.0
    assert util.bcalc2b(math.inf) == math.inf
    assert util.bcalc2b(1000) == math.inf


@pytest.mark.parametrize("a,b,g", [(0.9, 2.0, 0.8), (0.3, 0.5, -0.4), (0.5, 1.0, 0.0)])
def test_twoprime_round_trip(a, b, g):
    ap, bp = util.twoprime(a, b, g)
    a2, b2 = util.twounprime(ap, bp, g)
    assert a2 == pytest.approx(a)
    assert b2 == pytest.approx(b)


def test_twoprime_special_cases():
    ap, bp = util.twoprime(1, 3.0, 1)
    assert ap == 0.0
    _, bp_inf = util.twoprime(0.5, math.inf, 0.3)
    assert bp_inf == math.inf
    _, b_inf = util.twounprime(0.5, math.inf, 0.3)
    assert b_inf == math.inf


def test_twoprime_isotropic_is_identity():
    assert util.twoprime(0.42, 1.7, 0.0) == pytest.approx((0.42, 1.7))


def test_abgg2ab_same_g_is_identity():
    assert util.abgg2ab(0.6, 2.0, 0.5, 0.5) == pytest.approx((0.6, 2.0))


def test_abgg2ab_preserves_reduced_values():
    a2, b2 = util.abgg2ab(0.9, 3.0, 0.7, 0.2)
    assert util.twoprime(a2, b2, 0.2) == pytest.approx(util.twoprime(0.9, 3.0, 0.7))


def test_abgb2ag_conserves_absorption_and_reduced_scattering():
    a1, b1, b2 = 0.8, 2.0, 5.0
    a2, g2 = util.abgb2ag(a1, b1, b2)
    assert (1 - a2) * b2 == pytest.approx((1 - a1) * b1)
    assert a2 * b2 * (1 - g2) == pytest.approx(a1 * b1)


def test_abgb2ag_edge_cases():
    assert util.abgb2ag(0.0, 1.0, 2.0) == (0.0, 0.5)
    a2, _ = util.abgb2ag(1.0, 1.0, 2.0)
    assert a2 == 1.0
    assert util.abgb2ag(0.4, 1.0, math.inf) == (0.4, 0.5)
    a2, g2 = util.abgb2ag(0.4, 2.0, 1.0)
    assert a2 == pytest.approx(0.4)
    assert g2 == 0.0


@pytest.fixture
def debugging():
    yield util.set_debugging
    util.set_debugging(0)


def test_debug_mask(debugging):
    debugging(8 | 128)
    assert util.debug(8) is True
    assert util.debug(128) is True
    assert util.debug(4) is False
    debugging(0)
    assert util.debug(0xFFFFFFFF) is False