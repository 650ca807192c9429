"""Gauss-Legendre quadrature nodes and weights."""

from __future__ import annotations

import math

_EPS = 3.0e-11


def gauleg(x1: float, x2: float, n: int) -> tuple[list[float], list[float]]:
    """Return ``n`` Gauss-Legendre abscissas (ascending) and weights on [x1, x2]."""
    if n < 0:
        raise ValueError("number of quadrature points must not be negative")
    x = [0.0] * n
    w = [0.0] * n
    xm = 0.5 * (x2 + x1)
    xl = 0.5 * (x2 - x1)
    for i in range(1, (n + 1) // 2 + 1):
        z = math.cos(math.pi * (i - 0.25) / (n + 0.5))
        while True:
            p1, p2 = 1.0, 0.0
            for j in range(1, n + 1):
                p1, p2 = ((2.0 * j - 1.0) * z * p1 - (j - 1.0) * p2) / j, p1
            pp = n * (z * p1 - p2) / (z * z - 1.0)
            z1 = z
            z = z1 - p1 / pp
            if abs(z - z1) <= _EPS:
                break
        x[i - 1] = xm - xl * z
        x[n - i] = xm + xl * z
        w[i - 1] = 2.0 * xl / ((1.0 - z * z) * pp * pp)
        w[n - i] = w[i - 1]
    return x, w