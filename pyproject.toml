[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tacir"
version = "0.1.0"
description = "A three-address-code intermediate representation with SSA construction, simple optimisation passes and a validator"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "intermediate representation", "ssa", "three-address code", "optimisation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tacir"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
