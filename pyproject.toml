[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kernlib"
version = "0.1.0"
description = "Kernel support library and image tools: printf-style formatting, C string helpers, skew heaps, ELF headers and a simple file system image builder"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "kernel",
    "filesystem",
    "sfs",
    "disk-image",
    "elf",
    "printf",
    "skew-heap",
    "boot-sector",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: System :: Operating System Kernels",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kernlib-mksfs = "kernlib.mksfs:main"
kernlib-sign = "kernlib.sign:main"
kernlib-vector = "kernlib.vector:main"

[tool.hatch.build.targets.wheel]
packages = ["kernlib"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
