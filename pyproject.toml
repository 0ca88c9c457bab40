[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gcwiikit"
version = "2.0.0a3"
description = "Utilities for GameCube and Wii disc images: junk data generation, sector crypto, stream helpers, DAT verification and disc layout rebuilding."
requires-python = ">=3.10"
keywords = ["gamecube", "wii", "iso", "junk-data", "redump", "dat"]
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
    "Topic :: System :: Archiving",
]
dependencies = [
    "cryptography",
    "zstandard",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gcwiikit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
