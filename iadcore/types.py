"""Measurement and inversion state for inverse adding-doubling."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag

MAX_ITERATIONS = 500

RELATIVE = 0
ABSOLUTE = 1

COLLIMATED = 0
DIFFUSE = 1

HENYEY_GREENSTEIN = "henyey-greenstein"

_DEFAULT_SPHERE_D = 8.0 * 25.4
_DEFAULT_SAMPLE_D = 0.0 * 25.4
_DEFAULT_DETECTOR_D = 0.1 * 25.4
_DEFAULT_ENTRANCE_D = 0.5 * 25.4
_SPHERE_AREA = _DEFAULT_SPHERE_D * _DEFAULT_SPHERE_D
_DEFAULT_AS = _DEFAULT_SAMPLE_D * _DEFAULT_SAMPLE_D / _SPHERE_AREA
_DEFAULT_AD = _DEFAULT_DETECTOR_D * _DEFAULT_DETECTOR_D / _SPHERE_AREA
_DEFAULT_AE = _DEFAULT_ENTRANCE_D * _DEFAULT_ENTRANCE_D / _SPHERE_AREA
_DEFAULT_AW = 1.0 - _DEFAULT_AS - _DEFAULT_AD - _DEFAULT_AE


class Search(IntEnum):
    """Which optical properties the inversion searches for."""

    A = 0
    B = 1
    AB = 2
    AG = 3
    AUTO = 4
    BG = 5
    BaG = 6
    BsG = 7
    Ba = 8
    Bs = 9
    G = 10
    B_WITH_NO_ABSORPTION = 11
    B_WITH_NO_SCATTERING = 12


class ErrorCode(IntEnum):
    """Outcome of an inversion."""

    NO_ERROR = 0
    TOO_MANY_ITERATIONS = 1
    AS_NOT_VALID = 16
    AE_NOT_VALID = 17
    AD_NOT_VALID = 18
    RW_NOT_VALID = 19
    RD_NOT_VALID = 20
    RSTD_NOT_VALID = 21
    GAMMA_NOT_VALID = 22
    F_NOT_VALID = 23
    BAD_PHASE_FUNCTION = 24
    QUAD_PTS_NOT_VALID = 25
    BAD_G_VALUE = 26
    TOO_MANY_LAYERS = 27
    MEMORY_ERROR = 28
    FILE_ERROR = 29
    EXCESSIVE_LIGHT_LOSS = 30
    RT_LT_MINIMUM = 31
    MR_TOO_SMALL = 32
    MR_TOO_BIG = 33
    MT_TOO_SMALL = 34
    MT_TOO_BIG = 35
    MU_TOO_SMALL = 36
    MU_TOO_BIG = 37
    TOO_MUCH_LIGHT = 38
    TSTD_NOT_VALID = 39


class SphereMethod(IntEnum):
    """How the integrating sphere measurement was made."""

    UNKNOWN = 0
    COMPARISON = 1
    SUBSTITUTION = 2


class DebugFlag(IntFlag):
    """Categories of diagnostic output."""

    A_LITTLE = 1
    GRID = 2
    ITERATIONS = 4
    LOST_LIGHT = 8
    SPHERE_EFFECTS = 16
    BEST_GUESS = 32
    EVERY_CALC = 64
    SEARCH = 128
    RD_ONLY = 256
    GRID_CALC = 512
    ANY = 0xFFFFFFFF


@dataclass
class Slab:
    """Optical properties and boundaries of a sample between slides."""

    a: float = 0.5
    b: float = 1.0
    g: float = 0.0
    phase_function: str = HENYEY_GREENSTEIN
    n_slab: float = 1.0
    n_top_slide: float = 1.0
    n_bottom_slide: float = 1.0
    b_top_slide: float = 0.0
    b_bottom_slide: float = 0.0
    cos_angle: float = 1.0


@dataclass
class CalcMethod:
    """Numerical settings for the forward calculation."""

    a_calc: float = 0.5
    b_calc: float = 1.0
    g_calc: float = 0.5
    quad_pts: int = 8
    b_thinnest: float = 1.0 / 32.0


def _fmt(value: float | None, width: int = 10, digits: int = 5) -> str:
    if value is None:
        return f"{'unset':>{width}}"
    return f"{value:{width}.{digits}f}"


@dataclass
class Measurement:
    """A sample, its slides, the sphere geometry and the measured values."""

    slab_index: float = 1.0
    slab_thickness: float = 1.0

    slab_top_slide_index: float = 1.0
    slab_top_slide_b: float = 0.0
    slab_top_slide_thickness: float = 0.0

    slab_bottom_slide_index: float = 1.0
    slab_bottom_slide_b: float = 0.0
    slab_bottom_slide_thickness: float = 0.0
    slab_cos_angle: float = 1.0

    num_spheres: int = 0
    num_measures: int = 1
    method: SphereMethod = SphereMethod.UNKNOWN
    flip_sample: bool = False

    d_beam: float = 0.0
    fraction_of_rc_in_mr: float = 1.0
    fraction_of_tc_in_mt: float = 1.0

    m_r: float = 0.0
    m_t: float = 0.0
    m_u: float = 0.0

    wavelength: float = 0.0

    as_r: float = _DEFAULT_AS
    ad_r: float = _DEFAULT_AD
    ae_r: float = _DEFAULT_AE
    aw_r: float = _DEFAULT_AW
    rd_r: float = 0.0
    rw_r: float = 1.0
    rstd_r: float = 1.0
    f_r: float = 0.0

    as_t: float = _DEFAULT_AS
    ad_t: float = _DEFAULT_AD
    ae_t: float = _DEFAULT_AE
    aw_t: float = _DEFAULT_AW
    rd_t: float = 0.0
    rw_t: float = 1.0
    rstd_t: float = 1.0
    f_t: float = 0.0

    ur1_lost: float = 0.0
    uru_lost: float = 0.0
    ut1_lost: float = 0.0
    utu_lost: float = 0.0

    d_sphere_r: float = _DEFAULT_SPHERE_D
    d_sphere_t: float = _DEFAULT_SPHERE_D

    def describe(self) -> str:
        """Return a human-readable summary of the measurement setup."""
        port = 2 * self.d_sphere_r
        lines = [
            "",
            f"#                        Beam diameter = {self.d_beam:7.1f} mm",
            f"#                     Sample thickness = {self.slab_thickness:7.1f} mm",
            f"#                  Top slide thickness = {self.slab_top_slide_thickness:7.1f} mm",
            f"#               Bottom slide thickness = {self.slab_bottom_slide_thickness:7.1f} mm",
            f"#           Sample index of refraction = {self.slab_index:7.3f}",
            f"#        Top slide index of refraction = {self.slab_top_slide_index:7.3f}",
            f"#     Bottom slide index of refraction = {self.slab_bottom_slide_index:7.3f}",
            f"#    Fraction unscattered light in M_R = {self.fraction_of_rc_in_mr * 100:7.1f} %",
            f"#    Fraction unscattered light in M_T = {self.fraction_of_tc_in_mt * 100:7.1f} %",
            "# ",
            "# Reflection sphere",
            f"#                      sphere diameter = {self.d_sphere_r:7.1f} mm",
            f"#                 sample port diameter = {port * math.sqrt(self.as_r):7.1f} mm",
            f"#               entrance port diameter = {port * math.sqrt(self.ae_r):7.1f} mm",
            f"#               detector port diameter = {port * math.sqrt(self.ad_r):7.1f} mm",
            f"#                     wall reflectance = {self.rw_r * 100:7.1f} %",
            f"#                 standard reflectance = {self.rstd_r * 100:7.1f} %",
            f"#                 detector reflectance = {self.rd_r * 100:7.1f} %",
            f"#                              spheres = {self.num_spheres:7d}",
            f"#                             measures = {self.num_measures:7d}",
            f"#                               method = {int(self.method):7d}",
            f"area_r as={_fmt(self.as_r)}  ad={_fmt(self.ad_r)}    "
            f"ae={_fmt(self.ae_r)}  aw={_fmt(self.aw_r)}",
            f"refls  rd={_fmt(self.rd_r)}  rw={_fmt(self.rw_r)}  "
            f"rstd={_fmt(self.rstd_r)}   f={_fmt(self.f_r)}",
            f"area_t as={_fmt(self.as_t)}  ad={_fmt(self.ad_t)}    "
            f"ae={_fmt(self.ae_t)}  aw={_fmt(self.aw_t)}",
            f"refls  rd={_fmt(self.rd_t)}  rw={_fmt(self.rw_t)}  "
            f"rstd={_fmt(self.rstd_t)}   f={_fmt(self.f_t)}",
            f"lost  ur1={_fmt(self.ur1_lost)} ut1={_fmt(self.ut1_lost)}   "
            f"uru={_fmt(self.uru_lost)}  utu={_fmt(self.utu_lost)}",
        ]
        return "\n".join(lines) + "\n"


@dataclass
class Result:
    """State and outcome of an inversion; ``None`` defaults are unconstrained."""

    a: float = 0.0
    b: float = 0.0
    g: float = 0.0

    found: bool = False
    search: Search = Search.AUTO
    metric: int = RELATIVE
    tolerance: float = 0.0001
    mc_tolerance: float = 0.01
    final_distance: float = 10.0
    iterations: int = 0
    error: ErrorCode = ErrorCode.NO_ERROR

    slab: Slab = field(default_factory=Slab)
    method: CalcMethod = field(default_factory=CalcMethod)

    default_a: float | None = None
    default_b: float | None = None
    default_g: float | None = None
    default_ba: float | None = None
    default_bs: float | None = None
    default_mua: float | None = None
    default_mus: float | None = None

    @classmethod
    def from_measurement(cls, m: Measurement) -> "Result":
        """Return a fresh result whose slab boundaries match ``m``."""
        slab = Slab(
            a=0.5,
            b=1.0,
            g=0.0,
            phase_function=HENYEY_GREENSTEIN,
            n_slab=m.slab_index,
            n_top_slide=m.slab_top_slide_index,
            n_bottom_slide=m.slab_bottom_slide_index,
            b_top_slide=m.slab_top_slide_b,
            b_bottom_slide=m.slab_bottom_slide_b,
            cos_angle=m.slab_cos_angle,
        )
        return cls(slab=slab, method=CalcMethod())

    def describe(self) -> str:
        """Return a human-readable summary of the inversion settings."""
        s = self.slab
        lines = [
            "",
            f"default  a={_fmt(self.default_a)}   b={_fmt(self.default_b)}    "
            f"g={_fmt(self.default_g)}",
            f"slab     a={_fmt(s.a)}   b={_fmt(s.b)}    g={_fmt(s.g)}",
            f"n      top={_fmt(s.n_top_slide)} mid={_fmt(s.n_slab)}  "
            f"bot={_fmt(s.n_bottom_slide)}",
            f"thick  top={_fmt(s.b_top_slide)} cos={_fmt(s.cos_angle)}  "
            f"bot={_fmt(s.b_bottom_slide)}",
            f"search = {int(self.search)} quadrature points = {self.method.quad_pts}",
        ]
        return "\n".join(lines) + "\n"