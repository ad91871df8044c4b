[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diagspan"
version = "0.1.0"
description = "Diagnostics with labelled source spans: severities, spans, span reading with context lines, and runtime-built diagnostics."
requires-python = ">=3.10"
dependencies = []
keywords = ["diagnostics", "errors", "source spans", "compiler", "error reporting"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["diagspan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
