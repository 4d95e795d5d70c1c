[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "leggedctl"
version = "0.1.0"
description = "Whole-body control building blocks for legged robots: task stacking, hierarchical QP, contact constraints and swing scheduling"
requires-python = ">=3.10"
keywords = ["robotics", "legged", "whole-body-control", "quadratic-programming", "locomotion"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["leggedctl*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
