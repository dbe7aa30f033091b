[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "localstorage"
version = "0.1.0"
description = "Local storage management helpers: partition parsing, mergerfs control, signing, a hooked SQLite store and disk listings."
requires-python = ">=3.10"
keywords = ["storage", "mergerfs", "partition", "lsblk", "disks", "mount"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: System :: Systems Administration",
    "Typing :: Typed",
]
dependencies = [
    "cachetools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["localstorage"]

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
