[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "raydungeon"
version = "0.1.0"
description = "A first-person raycasting dungeon shooter driven by .cub scene files"
requires-python = ">=3.10"
keywords = ["raycasting", "game", "dungeon", "first-person", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "numpy",
    "pillow",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
raydungeon = "raydungeon.app:main"

[tool.hatch.build.targets.wheel]
packages = ["raydungeon"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
