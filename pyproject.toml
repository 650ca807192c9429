[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "iadcore"
version = "3.12.0"
description = "Building blocks for inverse adding-doubling: measurement and result types, Monte Carlo lost-light estimates, minimizers, root finders and quadrature"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "optics",
    "tissue optics",
    "adding-doubling",
    "integrating sphere",
    "monte carlo",
    "optical properties",
    "minimization",
    "root finding",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["iadcore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
