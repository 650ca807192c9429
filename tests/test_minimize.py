import math

import pytest

from iadcore.minimize import Bracket, amoeba, brent, hooke, mnbrak


def bowl(point):
    x, y = point
    return (x - 1.0) ** 2 + (y + 2.0) ** 2


def start_simplex():
    simplex = [[0.0, 0.0], [0.5, 0.0], [0.0, 0.5]]
    return simplex, [bowl(p) for p in simplex]


def test_amoeba_converges_below_tolerance():
    simplex, values = start_simplex()
    p, y, nfunk = amoeba(simplex, values, 1e-8, bowl)
    assert y[0] < 1e-8
    assert bowl(p[0]) == pytest.approx(y[0])
    assert p[0][0] == pytest.approx(1.0, abs=1e-3)
    assert p[0][1] == pytest.approx(-2.0, abs=1e-3)
    assert 0 < nfunk < 500


def test_amoeba_best_point_is_first():
    simplex, values = start_simplex()
    _, y, _ = amoeba(simplex, values, 1e-6, bowl)
    assert y[0] == min(y)


def test_amoeba_does_not_mutate_inputs():
    simplex, values = start_simplex()
    saved_simplex = [list(p) for p in simplex]
    saved_values = list(values)
    amoeba(simplex, values, 1e-8, bowl)
    assert simplex == saved_simplex
    assert values == saved_values


def test_amoeba_stops_at_iteration_limit():
    simplex, values = start_simplex()
    p, y, nfunk = amoeba(simplex, values, -1.0, bowl)
    assert nfunk >= 500
    assert all(bowl(point) == pytest.approx(v) for point, v in zip(p, y))


def test_amoeba_rejects_mismatched_values():
    simplex, _ = start_simplex()
    with pytest.raises(ValueError):
        amoeba(simplex, [0.0, 1.0], 1e-8, bowl)


def test_hooke_finds_minimum():
    simplex, values = start_simplex()
    p, y, nfunk = hooke(simplex, values, 1e-7, bowl)
    assert p[0][0] == pytest.approx(1.0, abs=1e-4)
    assert p[0][1] == pytest.approx(-2.0, abs=1e-4)
    assert bowl(p[0]) == pytest.approx(y[0])
    assert y[0] <= values[0]
    assert nfunk > 0


def test_hooke_leaves_other_rows_unchanged():
    simplex, values = start_simplex()
    p, y, _ = hooke(simplex, values, 1e-5, bowl)
    assert p[1:] == simplex[1:]
    assert y[1:] == values[1:]


def test_hooke_with_loose_epsilon_does_no_work():
    simplex, values = start_simplex()
    p, y, nfunk = hooke(simplex, values, 1.0, bowl)
    assert nfunk == 0
    assert p[0] == simplex[0]
    assert y[0] == values[0]


def test_brent_parabola():
    xmin, fmin = brent(0.0, 1.0, 5.0, lambda x: (x - 2.0) ** 2, 1e-8)
    assert xmin == pytest.approx(2.0, abs=1e-6)
    assert fmin == pytest.approx((xmin - 2.0) ** 2)


def test_brent_cosine_minimum_is_pi():
    xmin, fmin = brent(3.0, 3.2, 4.0, math.cos, 1e-8)
    assert xmin == pytest.approx(math.pi, abs=1e-6)
    assert fmin == pytest.approx(-1.0)


def test_mnbrak_brackets_minimum():
    func = lambda x: (x - 5.0) ** 2
    b = mnbrak(0.0, 1.0, func)
    assert isinstance(b, Bracket)
    assert min(b.ax, b.cx) <= 5.0 <= max(b.ax, b.cx)
    assert b.fb <= b.fa
    assert b.fb <= b.fc
    assert b.fa == func(b.ax)
    assert b.fb == func(b.bx)
    assert b.fc == func(b.cx)


def test_mnbrak_swaps_to_go_downhill():
    func = lambda x: (x + 3.0) ** 2
    b = mnbrak(0.0, 1.0, func)
    assert min(b.ax, b.bx, b.cx) <= -3.0 <= max(b.ax, b.bx, b.cx)
    assert (b.ax - b.bx) * (b.bx - b.cx) > 0
    assert b.fb <= min(b.fa, b.fc)


def test_mnbrak_then_brent():
    func = lambda x: (x - 5.0) ** 2 + 1.0
    b = mnbrak(0.0, 1.0, func)
    xmin, fmin = brent(b.ax, b.bx, b.cx, func, 1e-8)
    assert xmin == pytest.approx(5.0, abs=1e-6)
    assert fmin == pytest.approx(func(xmin))
    assert fmin <= b.fb