"""Derivative-free minimisers: Nelder-Mead, Hooke-Jeeves and Brent's method."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from iadcore.types import MAX_ITERATIONS

_HOOKE_RHO = 0.6
_HOOKE_MAX_EVALS = 5000

_BRENT_ITMAX = 100
_CGOLD = 0.3819660
_ZEPS = 1.0e-10

_GOLD = 1.618034
_GLIMIT = 100.0
_TINY = 1.0e-20

PointFunction = Callable[[list[float]], float]


def _sign(a: float, b: float) -> float:
    return abs(a) if b >= 0.0 else -abs(a)


@dataclass
class Bracket:
    """Three abscissas with ``fb`` no larger than ``fa`` or ``fc``."""

    ax: float
    bx: float
    cx: float
    fa: float
    fb: float
    fc: float


def _check_simplex(simplex: Sequence[Sequence[float]], values: Sequence[float]) -> int:
    if len(simplex) < 2:
        raise ValueError("a simplex needs at least two points")
    if len(values) != len(simplex):
        raise ValueError("one function value is needed for each simplex point")
    ndim = len(simplex) - 1
    if any(len(point) != ndim for point in simplex):
        raise ValueError("every simplex point must have len(simplex) - 1 coordinates")
    return ndim


def _column_sums(p: list[list[float]], ndim: int) -> list[float]:
    return [sum(point[j] for point in p) for j in range(ndim)]


def _amotry(
    p: list[list[float]],
    y: list[float],
    psum: list[float],
    ndim: int,
    func: PointFunction,
    ihi: int,
    fac: float,
) -> float:
    """Extrapolate the worst point through the opposite face by ``fac``."""
    fac1 = (1.0 - fac) / ndim
    fac2 = fac1 - fac
    ptry = [psum[j] * fac1 - p[ihi][j] * fac2 for j in range(ndim)]
    ytry = func(list(ptry))
    if ytry < y[ihi]:
        y[ihi] = ytry
        for j in range(ndim):
            psum[j] += ptry[j] - p[ihi][j]
        p[ihi] = ptry
    return ytry


def amoeba(
    simplex: Sequence[Sequence[float]],
    values: Sequence[float],
    ftol: float,
    func: PointFunction,
) -> tuple[list[list[float]], list[float], int]:
    """Minimise ``func`` by the downhill simplex method.

    ``simplex`` holds ``ndim + 1`` points and ``values`` the function at each.
    The search stops once the best value falls below ``ftol``, in which case
    the best point is moved to the front, or after about ``MAX_ITERATIONS``
    evaluations. Returns the final simplex, its values and the evaluation count.
    """
    ndim = _check_simplex(simplex, values)
    p = [list(point) for point in simplex]
    y = list(values)
    mpts = ndim + 1
    nfunk = 0
    psum = _column_sums(p, ndim)

    while True:
        ilo = 0
        if y[0] > y[1]:
            ihi, inhi = 0, 1
        else:
            ihi, inhi = 1, 0

        for i in range(mpts):
            if y[i] <= y[ilo]:
                ilo = i
            if y[i] > y[ihi]:
                inhi = ihi
                ihi = i
            elif y[i] > y[inhi] and i != ihi:
                inhi = i

        if y[ilo] < ftol:
            y[0], y[ilo] = y[ilo], y[0]
            p[0], p[ilo] = p[ilo], p[0]
            break

        if nfunk >= MAX_ITERATIONS:
            break

        nfunk += 2
        ytry = _amotry(p, y, psum, ndim, func, ihi, -1.0)
        if ytry <= y[ilo]:
            _amotry(p, y, psum, ndim, func, ihi, 2.0)
        elif ytry >= y[inhi]:
            ysave = y[ihi]
            ytry = _amotry(p, y, psum, ndim, func, ihi, 0.5)
            if ytry >= ysave:
                best = p[ilo]
                for i in range(mpts):
                    if i != ilo:
                        p[i] = [0.5 * (p[i][j] + best[j]) for j in range(ndim)]
                        y[i] = func(list(p[i]))
                nfunk += ndim
                psum = _column_sums(p, ndim)
        else:
            nfunk -= 1

    return p, y, nfunk


def _best_nearby(
    func: PointFunction,
    delta: list[float],
    point: list[float],
    prevbest: float,
) -> tuple[list[float], float, int]:
    """Probe one coordinate at a time for a better point; flips ``delta`` signs."""
    evals = 0
    minf = prevbest
    z = list(point)
    for i, base in enumerate(point):
        z[i] = base + delta[i]
        ftmp = func(list(z))
        evals += 1
        if ftmp < minf:
            minf = ftmp
            continue
        delta[i] = -delta[i]
        z[i] = base + delta[i]
        ftmp = func(list(z))
        evals += 1
        if ftmp < minf:
            minf = ftmp
        else:
            z[i] = base
    return z, minf, evals


def hooke(
    simplex: Sequence[Sequence[float]],
    values: Sequence[float],
    epsilon: float,
    func: PointFunction,
) -> tuple[list[list[float]], list[float], int]:
    """Minimise ``func`` by the Hooke-Jeeves pattern search.

    Takes the same simplex layout as :func:`amoeba`: the first point is the
    start and the offsets of the others along each axis give the initial
    step sizes. The best point and value are returned in the first position.
    """
    nvars = _check_simplex(simplex, values)
    p = [list(point) for point in simplex]
    y = list(values)

    xbefore = list(p[0])
    delta = [p[1 + i][i] - p[0][i] for i in range(nvars)]
    fbefore = y[0]
    newf = fbefore
    nfunk = 0
    steplength = _HOOKE_RHO

    while nfunk < _HOOKE_MAX_EVALS and steplength > epsilon:
        newx, newf, evals = _best_nearby(func, delta, list(xbefore), fbefore)
        nfunk += evals

        keep = True
        while newf < fbefore and keep:
            for i in range(nvars):
                delta[i] = -abs(delta[i]) if newx[i] <= xbefore[i] else abs(delta[i])
                previous = xbefore[i]
                xbefore[i] = newx[i]
                newx[i] = newx[i] + newx[i] - previous
            fbefore = newf
            newx, newf, evals = _best_nearby(func, delta, newx, fbefore)
            nfunk += evals

            if newf >= fbefore:
                break

            keep = any(
                abs(newx[i] - xbefore[i]) > 0.5 * abs(delta[i]) for i in range(nvars)
            )

        if steplength >= epsilon and newf >= fbefore:
            steplength *= _HOOKE_RHO
            delta = [d * _HOOKE_RHO for d in delta]

    p[0] = xbefore
    y[0] = fbefore
    return p, y, nfunk


def brent(
    ax: float, bx: float, cx: float, f: Callable[[float], float], tol: float
) -> tuple[float, float]:
    """Minimise ``f`` given a bracketing triplet; returns ``(xmin, f(xmin))``.

    After the iteration limit the best point found so far is returned.
    """
    a = min(ax, cx)
    b = max(ax, cx)
    d = 1.0
    e = 0.0
    x = w = v = bx
    fx = fw = fv = f(x)

    for _ in range(_BRENT_ITMAX):
        xm = 0.5 * (a + b)
        tol1 = tol * abs(x) + _ZEPS
        tol2 = 2.0 * tol1
        if abs(x - xm) <= tol2 - 0.5 * (b - a):
            return x, fx
        if abs(e) > tol1:
            r = (x - w) * (fx - fv)
            q = (x - v) * (fx - fw)
            p = (x - v) * q - (x - w) * r
            q = 2.0 * (q - r)
            if q > 0.0:
                p = -p
            q = abs(q)
            etemp = e
            e = d
            if abs(p) >= abs(0.5 * q * etemp) or p <= q * (a - x) or p >= q * (b - x):
                e = a - x if x >= xm else b - x
                d = _CGOLD * e
            else:
                d = p / q
                u = x + d
                if u - a < tol2 or b - u < tol2:
                    d = _sign(tol1, xm - x)
        else:
            e = a - x if x >= xm else b - x
            d = _CGOLD * e

        u = x + d if abs(d) >= tol1 else x + _sign(tol1, d)
        fu = f(u)
        if fu <= fx:
            if u >= x:
                a = x
            else:
                b = x
            v, w, x = w, x, u
            fv, fw, fx = fw, fx, fu
        else:
            if u < x:
                a = u
            else:
                b = u
            if fu <= fw or w == x:
                v, w = w, u
                fv, fw = fw, fu
            elif fu <= fv or v == x or v == w:
                v = u
                fv = fu
    return x, fx


def mnbrak(ax: float, bx: float, func: Callable[[float], float]) -> Bracket:
    """Search downhill from ``ax`` and ``bx`` for a triplet bracketing a minimum."""
    fa = func(ax)
    fb = func(bx)
    if fb > fa:
        ax, bx = bx, ax
        fa, fb = fb, fa
    cx = bx + _GOLD * (bx - ax)
    fc = func(cx)

    while fb > fc:
        r = (bx - ax) * (fb - fc)
        q = (bx - cx) * (fb - fa)
        u = bx - ((bx - cx) * q - (bx - ax) * r) / (
            2.0 * _sign(max(abs(q - r), _TINY), q - r)
        )
        ulim = bx + _GLIMIT * (cx - bx)
        if (bx - u) * (u - cx) > 0.0:
            fu = func(u)
            if fu < fc:
                return Bracket(bx, u, cx, fb, fu, fc)
            if fu > fb:
                return Bracket(ax, bx, u, fa, fb, fu)
            u = cx + _GOLD * (cx - bx)
            fu = func(u)
        elif (cx - u) * (u - ulim) > 0.0:
            fu = func(u)
            if fu < fc:
                bx, cx = cx, u
                u = cx + _GOLD * (cx - bx)
                fb, fc = fc, fu
                fu = func(u)
        elif (u - ulim) * (ulim - cx) >= 0.0:
            u = ulim
            fu = func(u)
        else:
            u = cx + _GOLD * (cx - bx)
            fu = func(u)
        ax, bx, cx = bx, cx, u
        fa, fb, fc = fb, fc, fu

    return Bracket(ax, bx, cx, fa, fb, fc)