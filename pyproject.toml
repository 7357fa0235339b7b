[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "compactbson"
version = "0.1.0"
description = "A compact, typed binary document format with explicit integer widths, floats, dates, strings, bytes, arrays and objects"
requires-python = ">=3.10"
dependencies = []
keywords = ["bson", "binary", "serialization", "encoding", "document"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
compactbson-demo = "compactbson.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["compactbson"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
