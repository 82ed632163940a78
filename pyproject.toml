[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "openflowsim"
version = "0.1.0"
description = "Discrete-event model of OpenFlow switches, controllers and hierarchical Kandoo control planes"
requires-python = ">=3.10"
dependencies = []
keywords = ["openflow", "sdn", "simulation", "kandoo", "network", "discrete-event"]
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
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["openflowsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
