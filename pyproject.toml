[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chipdrivers"
version = "0.1.0"
description = "Transport-agnostic drivers for common sensors and ADCs, plus small embedded helpers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "embedded",
    "drivers",
    "i2c",
    "sensor",
    "adc",
    "crc16",
    "ring-buffer",
    "debounce",
    "bmp280",
    "aht10",
    "ads1115",
    "cs1237",
    "dht22",
]
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
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chipdrivers"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
