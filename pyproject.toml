[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tetrix"
version = "0.1.0"
description = "A falling-block puzzle game for the desktop or for GPIO-button kiosks"
requires-python = ">=3.10"
keywords = ["tetris", "puzzle", "game", "pygame", "gpio"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tetrix = "tetrix.window:main"

[tool.hatch.build.targets.wheel]
packages = ["tetrix"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
