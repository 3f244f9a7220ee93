[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sensorboard"
version = "0.1.0"
description = "Driver logic for an SHT3x temperature/humidity sensor and a line-based UART link to an ESP Wi-Fi module"
requires-python = ">=3.10"
dependencies = []
keywords = ["sht3x", "i2c", "uart", "esp32", "sensor", "crc8", "embedded"]
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
    "Topic :: System :: Hardware :: Hardware Drivers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sensorboard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
