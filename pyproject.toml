[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pollrt"
version = "0.1.0"
description = "A small poll-based runtime: hand-written futures, an executor, a reactor and non-blocking HTTP GET"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "futures",
    "executor",
    "reactor",
    "coroutines",
    "event-loop",
    "waker",
    "non-blocking",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pollrt-delayserver = "pollrt.delayserver:main"
pollrt-pinning = "pollrt.pinning:main"
pollrt-aio = "pollrt.aio_main:main"
pollrt-coroutines = "pollrt.coroutines:main"

[tool.hatch.build.targets.wheel]
packages = ["pollrt"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
