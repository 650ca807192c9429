"""Parameter transforms used by the inverse search, plus debug flags."""

from __future__ import annotations

import math

BIG_A_VALUE = 999999.0
SMALL_A_VALUE = 0.000001

# Largest argument for which exp() stays finite (2.3 * DBL_MAX_10_EXP).
_MAX_BCALC = 2.3 * 308

_debug_level = 0


def a2acalc(a: float) -> float:
    """Map an albedo in (0, 1) onto the whole real line."""
    if a <= 0:
        return -BIG_A_VALUE
    if a >= 1:
        return BIG_A_VALUE
    return (2 * a - 1) / a / (1 - a)


def acalc2a(acalc: float) -> float:
    """Inverse of :func:`a2acalc`."""
    if acalc == BIG_A_VALUE:
        return 1.0
    if acalc == -BIG_A_VALUE:
        return 0.0
    if abs(acalc) < SMALL_A_VALUE:
        return 0.5
    return (-2 + acalc + math.sqrt(acalc * acalc + 4)) / (2 * acalc)


def g2gcalc(g: float) -> float:
    """Map an anisotropy in (-1, 1) onto the whole real line."""
    if g <= -1:
        return -math.inf
    if g >= 1:
        return math.inf
    return g / (1 - abs(g))


def gcalc2g(gcalc: float) -> float:
    """Inverse of :func:`g2gcalc`."""
    if gcalc == -math.inf:
        return -1.0
    if gcalc == math.inf:
        return 1.0
    return gcalc / (1 + abs(gcalc))


def b2bcalc(b: float) -> float:
    """Map an optical thickness onto a logarithmic search variable."""
    if b == math.inf:
        return math.inf
    if b <= 0:
        return 0.0
    return math.log(b)


def bcalc2b(bcalc: float) -> float:
    """Inverse of :func:`b2bcalc`; overflows to infinity."""
    if bcalc == math.inf:
        return math.inf
    if bcalc > _MAX_BCALC:
        return math.inf
    return math.exp(bcalc)


def twoprime(a: float, b: float, g: float) -> tuple[float, float]:
    """Return the similarity-reduced albedo and optical thickness (a', b')."""
    if a == 1 and g == 1:
        ap = 0.0
    else:
        ap = (1 - g) * a / (1 - a * g)
    bp = math.inf if b == math.inf else (1 - a * g) * b
    return ap, bp


def twounprime(ap: float, bp: float, g: float) -> tuple[float, float]:
    """Recover (a, b) from reduced values (a', b') for anisotropy g."""
    a = ap / (1 - g + ap * g)
    b = math.inf if bp == math.inf else (1 + ap * g / (1 - g)) * bp
    return a, b


def abgg2ab(a1: float, b1: float, g1: float, g2: float) -> tuple[float, float]:
    """Return (a2, b2) with anisotropy g2 equivalent to (a1, b1, g1)."""
    ap, bp = twoprime(a1, b1, g1)
    return twounprime(ap, bp, g2)


def abgb2ag(a1: float, b1: float, b2: float) -> tuple[float, float]:
    """Return (a2, g2) for thickness b2 equivalent to isotropic (a1, b1)."""
    if b2 < b1:
        b2 = b1

    if a1 == 0:
        a2 = 0.0
    elif a1 == 1:
        a2 = 1.0
    elif b1 == 0 or b2 == math.inf:
        a2 = a1
    else:
        a2 = 1 + b1 / b2 * (a1 - 1)

    if a2 == 0 or b2 == 0 or b2 == math.inf:
        g2 = 0.5
    else:
        g2 = (1 - b1 / b2) / a2
    return a2, g2


def set_debugging(level: int) -> None:
    """Set the bit mask of active debugging categories."""
    global _debug_level
    _debug_level = int(level)


def debug(mask: int) -> bool:
    """Return True if any bit of ``mask`` is enabled."""
    return bool(_debug_level & mask)