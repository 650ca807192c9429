import math

import pytest

from iadcore.mc_lost import (
    KISS_RAND_MAX,
    LostLight,
    PhotonRandom,
    cos_critical_angle,
    fresnel,
    mc_lost,
    mc_rt,
    refract,
    scatter,
)
from iadcore.types import Measurement, Result, Slab, SphereMethod


def _measurement(method=SphereMethod.UNKNOWN):
    return Measurement(
        slab_index=1.4,
        slab_thickness=1.0,
        slab_top_slide_index=1.5,
        slab_top_slide_thickness=1.0,
        slab_top_slide_b=0.2,
        as_r=0.01,
        d_beam=5.0,
        num_spheres=1,
        method=method,
    )


def test_random_sequence_is_reproducible():
    a = PhotonRandom(42)
    b = PhotonRandom(42)
    assert [a.next_int() for _ in range(20)] == [b.next_int() for _ in range(20)]


def test_next_int_is_64_bit():
    rng = PhotonRandom()
    values = [rng.next_int() for _ in range(200)]
    assert all(0 <= v <= KISS_RAND_MAX for v in values)
    assert len(set(values)) == len(values)


def test_seed_restarts_sequence():
    rng = PhotonRandom()
    rng.seed(99)
    first = [rng.next_int() for _ in range(5)]
    rng.seed(99)
    assert [rng.next_int() for _ in range(5)] == first


def test_next_photon_follows_photon_seed():
    a = PhotonRandom(12345)
    b = PhotonRandom(12345)
    a.next_photon()
    b.next_int()
    b.next_photon()
    assert a.photon_seed == b.photon_seed
    assert a.next_int() == b.next_int()


def test_next_photon_keeps_seed_in_32_bits():
    rng = PhotonRandom(12345)
    for _ in range(50):
        rng.next_photon()
        assert 0 <= rng.photon_seed <= 0xFFFFFFFF


def test_uniform_ranges():
    rng = PhotonRandom(7)
    for _ in range(500):
        x = rng.zero_one()
        y = rng.one_one()
        assert 0.0 < x <= 1.0
        assert -1.0 < y <= 1.0


def test_fresnel_matched_index_is_zero():
    assert fresnel(1.5, 1.5, 0.3) == 0.0


def test_fresnel_normal_incidence():
    assert fresnel(1.0, 1.5, 1.0) == pytest.approx(0.04)


def test_fresnel_total_internal_reflection():
    assert fresnel(1.5, 1.0, 0.1) == 1.0


def test_fresnel_ignores_direction_sign():
    assert fresnel(1.0, 1.5, -0.5) == fresnel(1.0, 1.5, 0.5)


@pytest.mark.parametrize("nu", [0.05, 0.3, 0.6, 0.9])
def test_fresnel_is_a_fraction(nu):
    assert 0.0 <= fresnel(1.0, 1.33, nu) <= 1.0


def test_cos_critical_angle_none_going_denser():
    assert cos_critical_angle(1.0, 1.5) == 0.0


def test_cos_critical_angle_matches_snell():
    c = cos_critical_angle(1.5, 1.0)
    sin_c = math.sqrt(1 - c * c)
    assert 1.5 * sin_c == pytest.approx(1.0)


def test_refract_same_index_unchanged():
    assert refract(1.3, 1.3, 0.6, 0.0, 0.8) == (0.6, 0.0, 0.8)


@pytest.mark.parametrize("w", [0.2, 0.5, 0.9, -0.7])
def test_refract_obeys_snell_and_keeps_unit_length(w):
    u = math.sqrt(1 - w * w)
    nu, nv, nw = refract(1.0, 1.5, u, 0.0, w)
    assert nu * nu + nv * nv + nw * nw == pytest.approx(1.0)
    assert 1.0 * math.sqrt(1 - w * w) == pytest.approx(1.5 * math.sqrt(1 - nw * nw))
    assert nw * w > 0


@pytest.mark.parametrize("g", [0.0, 0.5, -0.7, 0.9])
@pytest.mark.parametrize("direction", [(0.0, 0.0, 1.0), (0.6, 0.0, 0.8), (1.0, 0.0, 0.0)])
def test_scatter_gives_unit_vectors(g, direction):
    rng = PhotonRandom(3)
    rng.seed(11)
    u, v, w = direction
    for _ in range(30):
        u, v, w = scatter(g, u, v, w, rng)
        assert u * u + v * v + w * w == pytest.approx(1.0, abs=1e-9)


def test_mc_rt_is_deterministic_and_bounded():
    slab = Slab(a=0.9, b=1.0, g=0.0, n_slab=1.5, n_top_slide=1.5)
    first = mc_rt(slab, 400)
    second = mc_rt(slab, 400)
    assert first == second
    assert all(0.0 <= value <= 1.0 for value in first)


def test_mc_rt_without_photons_is_undefined():
    slab = Slab()
    values = mc_rt(slab, 0)
    assert [math.isnan(value) for value in values] == [True, True, True, True]


def test_mc_rt_time_budget_finishes():
    slab = Slab(a=0.5, b=1.0, n_slab=1.4, n_top_slide=1.4)
    result = mc_rt(slab, -20)
    assert all(0.0 <= value <= 1.0 for value in result)


def test_mc_lost_is_deterministic():
    m = _measurement()
    r = Result(a=0.9, b=2.0, g=0.0)
    first = mc_lost(m, r, 200)
    second = mc_lost(m, r, 200)
    assert first.ur1 == second.ur1
    assert first.ut1 == second.ut1
    assert first.ur1_lost == second.ur1_lost
    assert first.ut1_lost == second.ut1_lost
    assert 0.0 < first.ur1 + first.ut1 <= 1.0


def test_mc_lost_bounds():
    m = _measurement(SphereMethod.SUBSTITUTION)
    r = Result(a=0.9, b=2.0, g=0.5)
    lost = mc_lost(m, r, 200)
    assert isinstance(lost, LostLight)
    for value in (lost.ur1_lost, lost.ut1_lost, lost.uru_lost, lost.utu_lost):
        assert 0.0 <= value <= 1.0
    assert lost.ur1_lost <= lost.ur1 + 1e-12
    assert lost.ut1_lost <= lost.ut1 + 1e-12


def test_mc_lost_diffuse_only_for_substitution():
    r = Result(a=0.9, b=2.0, g=0.0)
    comparison = mc_lost(_measurement(SphereMethod.COMPARISON), r, 200)
    substitution = mc_lost(_measurement(SphereMethod.SUBSTITUTION), r, 200)
    assert comparison.uru == 0.0
    assert comparison.utu == 0.0
    assert comparison.uru_lost == 0.0
    assert comparison.utu_lost == 0.0
    assert comparison.ur1 == substitution.ur1
    assert comparison.ut1 == substitution.ut1
    assert comparison.ur1_lost == substitution.ur1_lost