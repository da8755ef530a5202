[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "swedomain"
version = "0.1.0"
description = "Domain decomposition, ghost-layer exchange and wave propagation solver base classes for shallow water simulations"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "shallow water equations",
    "domain decomposition",
    "ghost layers",
    "finite volume",
    "wave propagation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["swedomain"]

[tool.pytest.ini_options]
addopts = "-ra"
