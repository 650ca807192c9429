# iadcore

Building blocks for recovering the optical properties of a turbid slab
(albedo `a`, optical thickness `b`, anisotropy `g`) from integrating-sphere
measurements of reflection and transmission.

The package is pure Python and has no runtime dependencies.

## Modules

### `iadcore.types`

The data model.

- `Measurement` is a dataclass. It describes the following:
  - the sample: its index, its thickness and the cosine of the angle of incidence;
  - the top and bottom slides;
  - the reflection and transmission spheres: port areas, wall and standard
    reflectances, and diameters;
  - the measured values `m_r`, `m_t` and `m_u`;
  - the light lost from the sample port.

  `Measurement.describe()` returns a readable summary as a string.
- `Result` is a dataclass. It holds what an inversion found (`a`, `b`, `g`,
  `found`, `error`, `iterations`, `final_distance`) and the search settings
  (`search`, `tolerance`, `mc_tolerance`, a `Slab` and a `CalcMethod`).
  - The `default_*` fields hold values fixed by the user. `None` means the
    value is not constrained.
  - `Result.from_measurement(m)` builds a fresh result whose slab boundaries
    match the measurement.
  - `Result.describe()` returns a readable summary.
- `Slab` holds the layer properties and its boundaries. `CalcMethod` holds
  the quadrature points and the related calculation settings.
- The enumerations are `Search`, `ErrorCode`, `SphereMethod` and the
  `DebugFlag` bit flags. The module also defines the constant
  `MAX_ITERATIONS` (500).

### `iadcore.util`

Transforms between the physical variables and the unbounded variables used
by a search.

- Search variables: `a2acalc`/`acalc2a`, `g2gcalc`/`gcalc2g` and
  `b2bcalc`/`bcalc2b`.
- Reduced quantities: `twoprime(a, b, g)` returns `(a', b')`.
  `twounprime(ap, bp, g)` goes the other way.
- Equivalent property sets:
  - `abgg2ab(a1, b1, g1, g2)` returns the `(a2, b2)` that goes with a new
    anisotropy.
  - `abgb2ag(a1, b1, b2)` returns the `(a2, g2)` that goes with a new
    thickness.
- Debugging: `set_debugging(level)` sets a module-wide bit mask.
  `debug(mask)` tells whether any bit of `mask` is set.

### `iadcore.mc_lost`

A Monte Carlo estimate of the light that a sample reflects and transmits,
and of how much of it leaves outside the sample port.

- `mc_lost(m, r, n_photons)` uses the sample and sphere in the `Measurement`
  and the `a`, `b`, `g` of the `Result`. It returns a `LostLight`.
  - Half of the photons are collimated.
  - The other half are diffuse. They are run only when `m.method` is
    `SphereMethod.SUBSTITUTION`.
  - A negative `n_photons` is a time budget in milliseconds instead of a
    photon count.
- `mc_rt(slab, n_photons)` returns `(UR1, UT1, URU, UTU)` for a
  unit-thickness slab seen through a very wide port.
- `PhotonRandom` is a KISS generator that restarts for every photon from a
  fixed seed sequence, so results can be repeated.
- Photon helpers:
  - `fresnel(n_i, n_t, nu_i)`
  - `cos_critical_angle(n_i, n_t)`
  - `refract(n_i, n_t, u, v, w)`
  - `scatter(g, u, v, w, rng)`, which uses Henyey-Greenstein scattering.

### `iadcore.minimize`

- `amoeba(simplex, values, ftol, func)` is a downhill simplex method.
  - It stops when the best value drops below `ftol`, and then moves the best
    point to the front.
  - Otherwise it stops after about `MAX_ITERATIONS` evaluations.
  - It returns the simplex, the values and the evaluation count.
- `hooke(simplex, values, epsilon, func)` is a Hooke-Jeeves pattern search.
  - It takes the same simplex layout: the first point is the start, and the
    other points set the initial step sizes.
  - It returns the best point and value in the first position.
- `brent(ax, bx, cx, f, tol)` is a one-dimensional minimizer. It returns
  `(xmin, f(xmin))`.
- `mnbrak(ax, bx, func)` searches downhill for a bracketing triplet and
  returns a `Bracket`.

`amoeba` and `hooke` raise `ValueError` for a malformed simplex.

### `iadcore.roots`

- `rtsafe(funcd, x1, x2, xacc)` is a safeguarded Newton-Raphson method.
  `funcd(x)` returns `(f, f')`.
- `zbrent(func, x1, x2, tol)` is Brent's root finder.
- `zbrak(fx, x1, x2, n, nb)` returns up to `nb` sign-change brackets
  `(lo, hi)`. A non-positive `nb` collects every bracket.

`rtsafe` and `zbrent` raise `RootError` when the root is not bracketed or
the iteration limit is reached. `zbrak` raises `ValueError` when `n < 1`.

### `iadcore.quadrature`

`gauleg(x1, x2, n)` returns `n` Gauss-Legendre abscissas, in ascending
order, and their weights on `[x1, x2]`.

### `iadcore.getopt`

`getopt(argv, optstring)` scans short options in the classic style.

- It returns a list of `(option, argument)` pairs and the remaining operands.
- `-help`/`--help` become `h`, and `-version`/`--version` become `v`.
- A lone `-` stops the scan and is kept as an operand. `--` stops the scan
  and is removed.
- An unknown option, or an option that lacks its argument, raises
  `GetoptError`.

## Examples

```python
from iadcore.util import twoprime, twounprime

ap, bp = twoprime(0.9, 2.0, 0.8)
a, b = twounprime(ap, bp, 0.8)   # approximately (0.9, 2.0)
```

```python
from iadcore.quadrature import gauleg

x, w = gauleg(0.0, 1.0, 8)
sum(w)   # approximately 1.0
```

```python
from iadcore.roots import zbrent

zbrent(lambda x: x * x - 2.0, 0.0, 2.0, 1e-12)   # 1.41421356...
```

```python
from iadcore.types import Measurement, Result
from iadcore.mc_lost import mc_lost

m = Measurement()
r = Result.from_measurement(m)
r.a, r.b, r.g = 0.9, 1.0, 0.0
lost = mc_lost(m, r, 2000)
lost.ur1, lost.ur1_lost
```

## What this package does not do

The package has no adding-doubling forward calculation and no driver that
inverts measurements into `a`, `b` and `g`. The pieces here are the data
types, transforms, Monte Carlo lost-light estimate and numerical routines
that such an inversion uses. The package also has no command-line program
and no reader or writer for measurement files.

## Running the tests

```
pip install -e .[test]
pytest
```