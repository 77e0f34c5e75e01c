[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "progressor"
version = "0.1.0"
description = "Async-first progress tracking for long-running asyncio tasks"
requires-python = ">=3.10"
dependencies = []
keywords = ["async", "asyncio", "progress", "tracking", "stream"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
progressor-demo = "progressor.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["progressor"]

[tool.pytest.ini_options]
addopts = "-ra"
