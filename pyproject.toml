[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "whyarch"
version = "0.1.0"
description = "Query-target parsing, report rendering, health dashboards, PR templates and managed git hooks for git code archaeology"
requires-python = ">=3.10"
dependencies = []
keywords = ["git", "history", "archaeology", "hooks", "code-review"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["whyarch"]

[tool.hatch.build.targets.sdist]
include = ["whyarch", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
