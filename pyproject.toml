[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "openpilot"
version = "0.1.0"
description = "Hook file loading, slash-command autocompletion and transcript text helpers for a terminal coding-agent front end"
requires-python = ">=3.10"
keywords = ["hooks", "autocomplete", "terminal", "transcript", "slash-commands"]
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
    "Topic :: Software Development",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["openpilot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
