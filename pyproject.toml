[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "statusdeck"
version = "0.5.0"
description = "Host-link protocol, status model and page rendering for a small touch-screen coding status display"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ndjson",
    "status-display",
    "embedded",
    "protocol",
    "rgb565",
    "ble",
    "serial",
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["statusdeck"]

[tool.hatch.build.targets.sdist]
include = ["statusdeck", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
