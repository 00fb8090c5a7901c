[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nbtkit"
version = "0.1.0"
description = "Read, write and build NBT data, and render top-down map colours from block models."
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["nbt", "minecraft", "serialization", "map", "render", "block models"]
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
    "Topic :: File Formats",
    "Topic :: Games/Entertainment",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
nbtkit = "nbtkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["nbtkit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
