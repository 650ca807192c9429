"""One-dimensional root bracketing and root finding."""

from __future__ import annotations

from collections.abc import Callable

_RTSAFE_MAXIT = 100
_ZBRENT_ITMAX = 100
_ZBRENT_EPS = 3.0e-8


class RootError(ArithmeticError):
    """Raised when a root is not bracketed or the search does not converge."""


def _sign(a: float, b: float) -> float:
    return abs(a) if b >= 0.0 else -abs(a)


def rtsafe(
    funcd: Callable[[float], tuple[float, float]], x1: float, x2: float, xacc: float
) -> float:
    """Find a root in [x1, x2] by safeguarded Newton-Raphson.

    ``funcd(x)`` returns the pair ``(f(x), f'(x))``.
    """
    fl, _ = funcd(x1)
    fh, _ = funcd(x2)
    if (fl > 0.0 and fh > 0.0) or (fl < 0.0 and fh < 0.0):
        raise RootError("Root must be bracketed in rtsafe")
    if fl == 0.0:
        return x1
    if fh == 0.0:
        return x2

    xl, xh = (x1, x2) if fl < 0.0 else (x2, x1)
    rts = 0.5 * (x1 + x2)
    dxold = abs(x2 - x1)
    dx = dxold
    f, df = funcd(rts)

    for _ in range(_RTSAFE_MAXIT):
        out_of_range = ((rts - xh) * df - f) * ((rts - xl) * df - f) >= 0.0
        if out_of_range or abs(2.0 * f) > abs(dxold * df):
            dxold = dx
            dx = 0.5 * (xh - xl)
            rts = xl + dx
            if xl == rts:
                return rts
        else:
            dxold = dx
            dx = f / df
            previous = rts
            rts -= dx
            if previous == rts:
                return rts
        if abs(dx) < xacc:
            return rts
        f, df = funcd(rts)
        if f < 0.0:
            xl = rts
        else:
            xh = rts
    raise RootError("Maximum number of iterations exceeded in rtsafe")


def zbrak(
    fx: Callable[[float], float], x1: float, x2: float, n: int, nb: int
) -> list[tuple[float, float]]:
    """Split [x1, x2] into ``n`` steps and return up to ``nb`` sign-change brackets.

    A non-positive ``nb`` collects every bracket found.
    """
    if n < 1:
        raise ValueError("number of subintervals must be positive")
    brackets: list[tuple[float, float]] = []
    dx = (x2 - x1) / n
    x = x1
    fp = fx(x)
    for _ in range(n):
        x += dx
        fc = fx(x)
        if fc * fp < 0.0:
            brackets.append((x - dx, x))
            if len(brackets) == nb:
                break
        fp = fc
    return brackets


def zbrent(func: Callable[[float], float], x1: float, x2: float, tol: float) -> float:
    """Find a root of ``func`` bracketed by [x1, x2] using Brent's method."""
    a = x1
    b = x2
    c = x2
    fa = func(a)
    fb = func(b)
    d = 0.0
    e = 0.0
    if (fa > 0.0 and fb > 0.0) or (fa < 0.0 and fb < 0.0):
        raise RootError("Root must be bracketed in zbrent")
    fc = fb
    for _ in range(_ZBRENT_ITMAX):
        if (fb > 0.0 and fc > 0.0) or (fb < 0.0 and fc < 0.0):
            c = a
            fc = fa
            d = b - a
            e = d
        if abs(fc) < abs(fb):
            a, b, c = b, c, b
            fa, fb, fc = fb, fc, fb
        tol1 = 2.0 * _ZBRENT_EPS * abs(b) + 0.5 * tol
        xm = 0.5 * (c - b)
        if abs(xm) <= tol1 or fb == 0.0:
            return b
        if abs(e) >= tol1 and abs(fa) > abs(fb):
            s = fb / fa
            if a == c:
                p = 2.0 * xm * s
                q = 1.0 - s
            else:
                q = fa / fc
                r = fb / fc
                p = s * (2.0 * xm * q * (q - r) - (b - a) * (r - 1.0))
                q = (q - 1.0) * (r - 1.0) * (s - 1.0)
            if p > 0.0:
                q = -q
            p = abs(p)
            min1 = 3.0 * xm * q - abs(tol1 * q)
            min2 = abs(e * q)
            if 2.0 * p < min(min1, min2):
                e = d
                d = p / q
            else:
                d = xm
                e = d
        else:
            d = xm
            e = d
        a = b
        fa = fb
        if abs(d) > tol1:
            b += d
        else:
            b += _sign(tol1, xm)
        fb = func(b)
    raise RootError("Maximum number of iterations exceeded in zbrent")