[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "leggedtraj"
version = "0.1.0"
description = "Building blocks for trajectory optimization of legged robots: splines, node variables, gaits, terrain, dynamics, costs and constraints."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "legged robots",
    "trajectory optimization",
    "splines",
    "gait",
    "terrain",
    "robotics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["leggedtraj"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
