[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bladeplot"
version = "1.2.0"
description = "Pure-Python BLAKE3 hashing, byte-wise radix sorting and line point encoding for proof-of-space plotting"
requires-python = ">=3.10"
dependencies = []
keywords = ["blake3", "proof-of-space", "radix-sort", "hashing", "line-point"]
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
    "Topic :: Security :: Cryptography",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["bladeplot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
