[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "muxic"
version = "0.1.0"
description = "A terminal music player for MP3 folders with playlists, a play queue and library search"
requires-python = ">=3.10"
keywords = ["music", "mp3", "player", "terminal", "tui", "playlist", "id3"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players :: MP3",
]
dependencies = [
    "blessed",
    "numpy",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
muxic = "muxic.player:main"

[tool.hatch.build.targets.wheel]
packages = ["muxic"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
