"""Data types, parameter transforms, Monte Carlo lost-light estimates and
numerical routines (minimizers, root finders, quadrature, option scanning)
for inverse adding-doubling."""

__version__ = "3.12.0"

__all__ = ["getopt", "mc_lost", "minimize", "quadrature", "roots", "types", "util"]