[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "blockfs"
version = "0.4.0"
description = "Read FAT16 volumes and MBR partition tables from block devices"
requires-python = ">=3.10"
dependencies = []
keywords = ["fat16", "mbr", "filesystem", "block-device", "partition"]
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
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["blockfs"]

[tool.pytest.ini_options]
addopts = "-ra"
