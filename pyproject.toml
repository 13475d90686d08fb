[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pdroute"
version = "0.4.2"
description = "Travel-time matrices and validated input rows for pickup-and-delivery vehicle routing"
requires-python = ">=3.10"
dependencies = []
keywords = ["vehicle routing", "pickup and delivery", "matrix", "time windows", "vroom"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pdroute"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
