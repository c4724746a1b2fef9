[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "compkit"
version = "0.1.0"
description = "Reusable building blocks for services: sets, field validation, clocks, retries, IDs and file, string, JSON and network helpers."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "validation",
    "clock",
    "retry",
    "sets",
    "json",
    "utilities",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["compkit"]

[tool.hatch.build.targets.sdist]
include = ["compkit", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
