[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trdatalogger"
version = "1.0.5"
description = "Desktop client for a serial-port temperature datalogger: live readings, stored-log download and console logging."
requires-python = ">=3.10"
keywords = ["datalogger", "serial", "temperature", "tkinter", "pyserial"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: Terminals :: Serial",
]
dependencies = [
    "pyserial>=3.5",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.gui-scripts]
trdatalogger = "trdatalogger.gui:main"

[tool.hatch.build.targets.wheel]
packages = ["trdatalogger"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
