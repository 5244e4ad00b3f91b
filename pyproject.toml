[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gommits"
version = "0.1.0"
description = "Terminal tool for finding a Git author's commits and exporting them to Excel or CSV"
requires-python = ">=3.10"
keywords = ["git", "commits", "excel", "xlsx", "csv", "terminal", "tui", "report"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
    "Topic :: Utilities",
]
dependencies = [
    "blessed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gommits = "gommits.app:main"

[tool.hatch.build.targets.wheel]
packages = ["gommits"]

[tool.hatch.build.targets.sdist]
include = ["gommits", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
