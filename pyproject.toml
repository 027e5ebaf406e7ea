[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "eddyio"
version = "0.1.0"
description = "Parameter files, field registries and binary field output for large-eddy simulation runs"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "large-eddy simulation",
    "atmospheric modelling",
    "parameters",
    "field output",
    "binary format",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Atmospheric Science",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["eddyio"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
