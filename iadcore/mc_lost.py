"""Monte Carlo estimate of light lost out the sides of a sample in a sphere port."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass

from iadcore.types import Measurement, Result, Slab, SphereMethod

MIN_WEIGHT = 0.001

_MASK64 = 0xFFFFFFFFFFFFFFFF
_MASK32 = 0xFFFFFFFF
_KNUTH = 1812433253
_KISS_MULTIPLIER = 698769069

KISS_RAND_MAX = _MASK64

_PHOTON_SEED = 12345


def _div(a: float, b: float) -> float:
    """Divide with IEEE semantics: x/0 is a signed infinity and 0/0 is NaN."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _sqrt(x: float) -> float:
    """Square root that yields NaN rather than raising for negative input."""
    if x >= 0:
        return math.sqrt(x)
    return math.nan


def _half(n: int) -> int:
    """Integer half, truncated toward zero."""
    return n // 2 if n >= 0 else -((-n) // 2)


class PhotonRandom:
    """KISS random numbers, restarted for every photon from a seed sequence.

    Each photon reseeds the generator from the next value of a simple
    multiplicative sequence, so successive runs with slightly different
    parameters follow the same random paths.
    """

    def __init__(self, seed: int = 12345678) -> None:
        self.photon_seed = seed & _MASK64
        self.x = 123456789
        self.y = 362436000
        self.z = 521288629
        self.c = 7654321

    def seed(self, seed: int) -> None:
        """Set the generator state from ``seed``."""
        seed &= _MASK64
        self.c = (_KNUTH * (seed ^ (seed >> 30)) + 1) & _MASK64
        self.x = (_KNUTH * (self.c ^ (self.c >> 30)) + 2) & _MASK64
        self.y = (_KNUTH * (self.x ^ (self.x >> 30)) + 3) & _MASK64
        self.z = (_KNUTH * (self.y ^ (self.y >> 30)) + 5) & _MASK64

    def next_int(self) -> int:
        """Return the next 64-bit unsigned random integer."""
        self.x = (69069 * self.x + 12345) & _MASK64
        y = self.y
        y ^= (y << 13) & _MASK64
        y ^= y >> 17
        y ^= (y << 5) & _MASK64
        self.y = y
        t = (_KISS_MULTIPLIER * self.z + self.c) & _MASK64
        self.c = t >> 32
        self.z = t
        return (self.x + self.y + self.z) & _MASK64

    def next_photon(self) -> None:
        """Advance to the next photon's seed and restart the generator from it."""
        self.photon_seed = (_KNUTH * self.photon_seed) & _MASK32
        self.seed(self.photon_seed)
        for _ in range(3):
            self.next_int()

    def zero_one(self) -> float:
        """Return a random number in (0, 1]."""
        x = self.next_int()
        while x == 0:
            x = self.next_int()
        return float(x) / float(KISS_RAND_MAX)

    def one_one(self) -> float:
        """Return a random number in (-1, 1]."""
        return 2.0 * self.zero_one() - 1.0


@dataclass
class LostLight:
    """Total and lost reflection and transmission for collimated and diffuse light."""

    ur1: float = 0.0
    ut1: float = 0.0
    uru: float = 0.0
    utu: float = 0.0
    ur1_lost: float = 0.0
    ut1_lost: float = 0.0
    uru_lost: float = 0.0
    utu_lost: float = 0.0


def fresnel(n_i: float, n_t: float, nu_i: float) -> float:
    """Unpolarised Fresnel reflectance for incidence cosine ``nu_i``."""
    if n_i == n_t:
        return 0.0
    nu_i = abs(nu_i)
    if nu_i == 1.0:
        return ((n_i - n_t) / (n_i + n_t)) ** 2
    ratio = n_i / n_t
    temp = 1.0 - ratio * ratio * (1.0 - nu_i * nu_i)
    if temp < 0:
        return 1.0
    nu_t = math.sqrt(temp)
    temp = ratio * nu_t
    temp1 = (nu_i - temp) / (nu_i + temp)
    temp = ratio * nu_i
    temp = (nu_t - temp) / (nu_t + temp)
    return (temp1 * temp1 + temp * temp) / 2.0


def cos_critical_angle(n_i: float, n_t: float) -> float:
    """Cosine of the critical angle going from index ``n_i`` into ``n_t``."""
    if n_t >= n_i:
        return 0.0
    return math.sqrt(1.0 - (n_t / n_i) ** 2)


def refract(
    n_i: float, n_t: float, u: float, v: float, w: float
) -> tuple[float, float, float]:
    """Return the direction after crossing a z-plane from ``n_i`` into ``n_t``."""
    if n_i == n_t:
        return u, v, w
    c = n_i / n_t
    nu = w * c
    new_w = _sqrt(1.0 - c * c + nu * nu)
    if w < 0:
        new_w = -new_w
    return u * c, v * c, new_w


def scatter(
    g: float, u: float, v: float, w: float, rng: PhotonRandom
) -> tuple[float, float, float]:
    """Return a new direction after Henyey-Greenstein scattering with anisotropy g."""
    while True:
        t1 = rng.one_one()
        t2 = rng.one_one()
        t3 = t1 * t1 + t2 * t2
        if t3 <= 1:
            break

    if g == 0:
        if t3 == 0:
            return 1.0, 0.0, 0.0
        new_u = 2.0 * t3 - 1.0
        t3 = _sqrt(_div(1.0 - new_u * new_u, t3))
        return new_u, t1 * t3, t2 * t3

    mu = (1 - g * g) / (1 - g + 2.0 * g * rng.zero_one())
    mu = (1 + g * g - mu * mu) / 2.0 / g
    sin2 = 1 - mu * mu

    if abs(w) < 0.9:
        s = _sqrt(_div(_div(sin2, 1 - w * w), t3))
        return (
            mu * u + s * (t1 * u * w - t2 * v),
            mu * v + s * (t1 * v * w + t2 * u),
            mu * w - _sqrt(_div(sin2 * (1 - w * w), t3)) * t1,
        )
    s = _sqrt(_div(_div(sin2, 1 - v * v), t3))
    return (
        mu * u + s * (t1 * u * v + t2 * w),
        mu * v - _sqrt(_div(sin2 * (1 - v * v), t3)) * t1,
        mu * w + s * (t1 * v * w - t2 * u),
    )


def _launch_point(rng: PhotonRandom, beam_radius: float) -> tuple[float, float, float]:
    if beam_radius > 0:
        while True:
            a = rng.one_one()
            b = rng.one_one()
            if a * a + b * b <= 1:
                break
        return a * beam_radius, b * beam_radius, 0.0
    return 0.0, 0.0, 0.0


def _launch_direction(
    rng: PhotonRandom, collimated: bool, mu: float
) -> tuple[float, float, float]:
    if collimated:
        return _sqrt(1 - mu * mu), 0.0, mu
    while True:
        u, v, w = scatter(0.0, 0.0, 0.0, 0.0, rng)
        if w != 0:
            return u, v, abs(w)


def _roulette(
    rng: PhotonRandom, weight: float, residual: float
) -> tuple[float, float]:
    if weight > MIN_WEIGHT or weight == 0.0:
        return weight, residual
    residual += weight
    if rng.zero_one() < 0.1:
        weight *= 10
    else:
        weight = 0.0
    residual -= weight
    return weight, residual


def _move_in_sample(
    rng: PhotonRandom, mu_t: float, x: float, y: float, z: float,
    u: float, v: float, w: float,
) -> tuple[float, float, float]:
    step = _div(-math.log(rng.zero_one()), mu_t)
    return x + step * u, y + step * v, z + step * w


def _move_in_slide(
    rng: PhotonRandom, x: float, y: float, u: float, v: float, w: float,
    weight: float, d_slide: float, mua_slide: float,
    n1: float, n2: float, n3: float,
) -> tuple[float, float, float, float]:
    """Carry a photon through a slide; returns (x, y, w, weight).

    A negative change in the sign of ``w`` means the photon was sent back
    the way it came.
    """
    r1 = fresnel(n1, n2, w)
    if rng.zero_one() <= r1:
        return x, y, -w, weight

    i_x, i_y, i_z = refract(n1, n2, u, v, w)
    r2 = fresnel(n2, n3, i_z)
    d_bounce = abs(_div(d_slide, i_z))
    passed = math.exp(-mua_slide * d_bounce)

    while True:
        x += d_bounce * i_x
        y += d_bounce * i_y
        weight *= 1 - passed
        if rng.zero_one() > r2:
            return x, y, w, weight

        x += d_bounce * i_x
        y += d_bounce * i_y
        weight *= 1 - passed
        if rng.zero_one() > r1:
            return x, y, -w, weight


def _milliseconds(start: float) -> float:
    return 1000.0 * (time.process_time() - start)


def _mc_radial(
    rng: PhotonRandom, photons: int, a: float, b: float, g: float,
    n_sample: float, n_slide: float, collimated: bool, cos_incidence: float,
    d_sample: float, d_slide: float, mua_slide: float,
    d_port: float, d_beam: float,
) -> tuple[float, float, float, float]:
    """Return (r_total, t_total, r_lost, t_lost) for one illumination."""
    mu_t = _div(b, d_sample)
    r_port_squared = d_port * d_port / 4.0
    r_beam = d_beam / 2.0 if collimated else d_port / 2.0

    if photons >= 0:
        total_photons = photons
        total_time = 0
    else:
        total_photons = 1_000_000
        total_time = abs(photons)

    start = time.process_time()
    r_total = t_total = r_lost = t_lost = 0.0
    total_weight = 0.0
    residual = 0.0

    for _ in range(total_photons):
        rng.next_photon()
        x, y, z = _launch_point(rng, r_beam)
        u, v, w = _launch_direction(rng, collimated, cos_incidence)
        weight = w
        total_weight += weight

        x, y, w, weight = _move_in_slide(
            rng, x, y, u, v, w, weight, d_slide, mua_slide, 1.0, n_slide, n_sample
        )
        if w < 0:
            r_total += weight
            if x * x + y * y > r_port_squared:
                r_lost += weight
            continue

        u, v, w = refract(1.0, n_sample, u, v, w)

        while weight > 0:
            x, y, z = _move_in_sample(rng, mu_t, x, y, z, u, v, w)

            while z < 0 or z > d_sample:
                if z < 0:
                    extra = _div(z, w)
                    z = 0.0
                else:
                    extra = _div(z - d_sample, w)
                    z = d_sample
                x -= u * extra
                y -= v * extra

                x, y, w, weight = _move_in_slide(
                    rng, x, y, u, v, w, weight,
                    d_slide, mua_slide, n_sample, n_slide, 1.0,
                )

                if z == 0:
                    if w < 0:
                        r_total += weight
                        if x * x + y * y > r_port_squared:
                            r_lost += weight
                        weight = 0.0
                        break
                elif w > 0:
                    t_total += weight
                    if x * x + y * y > r_port_squared:
                        t_lost += weight
                    weight = 0.0
                    break

                x += u * extra
                y += v * extra
                z += w * extra

            weight *= a
            weight, residual = _roulette(rng, weight, residual)
            u, v, w = scatter(g, u, v, w, rng)

        if total_time and total_time < _milliseconds(start):
            break

    norm = total_weight + residual
    return (
        _div(r_total, norm),
        _div(t_total, norm),
        _div(r_lost, norm),
        _div(t_lost, norm),
    )


def _not_negative(x: float) -> float:
    return 0.0 if x < 0 else x


def mc_lost(m: Measurement, r: Result, n_photons: int) -> LostLight:
    """Estimate reflected, transmitted and lost light for the sample in ``m``.

    Half of the photons are collimated; the other half are diffuse and are
    only run for substitution measurements. A negative ``n_photons`` is a
    time budget in milliseconds.
    """
    n_sample = m.slab_index
    n_slide = m.slab_top_slide_index
    d_sample = m.slab_thickness
    d_slide = m.slab_top_slide_thickness
    mua_slide = _div(m.slab_top_slide_b, d_slide)
    d_port = _sqrt(m.as_r) * 2 * m.d_sphere_r
    d_beam = m.d_beam
    mu = m.slab_cos_angle

    if d_slide == 0.0:
        n_slide = 1.0
    if n_slide == 1.0:
        d_slide = 0.0

    rng = PhotonRandom(_PHOTON_SEED)
    half = _half(n_photons)
    ur1, ut1, ur1_lost, ut1_lost = _mc_radial(
        rng, half, r.a, r.b, r.g, n_sample, n_slide, True, mu,
        d_sample, d_slide, mua_slide, d_port, d_beam,
    )

    uru = utu = uru_lost = utu_lost = 0.0
    if m.method == SphereMethod.SUBSTITUTION:
        uru, utu, uru_lost, utu_lost = _mc_radial(
            rng, half, r.a, r.b, r.g, n_sample, n_slide, False, mu,
            d_sample, d_slide, mua_slide, d_port, d_beam,
        )

    return LostLight(
        ur1=ur1,
        ut1=ut1,
        uru=uru,
        utu=utu,
        ur1_lost=_not_negative(ur1_lost),
        ut1_lost=_not_negative(ut1_lost),
        uru_lost=_not_negative(uru_lost),
        utu_lost=_not_negative(utu_lost),
    )


def mc_rt(slab: Slab, n_photons: int) -> tuple[float, float, float, float]:
    """Return (UR1, UT1, URU, UTU) for a unit-thickness slab with a wide port."""
    rng = PhotonRandom(_PHOTON_SEED)
    half = _half(n_photons)
    ur1, ut1, _, _ = _mc_radial(
        rng, half, slab.a, slab.b, slab.g, slab.n_slab, slab.n_top_slide,
        True, slab.cos_angle, 1.0, 0.0, 0.0, 1000.0, 0.0,
    )
    uru, utu, _, _ = _mc_radial(
        rng, half, slab.a, slab.b, slab.g, slab.n_slab, slab.n_top_slide,
        False, slab.cos_angle, 1.0, 0.0, 0.0, 1000.0, 0.0,
    )
    return ur1, ut1, uru, utu