[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gt7shaker"
version = "0.1.0"
description = "Gran Turismo 7 telemetry receiver and Salsa20 stream cipher"
requires-python = ">=3.10"
dependencies = []
keywords = ["gran turismo", "gt7", "telemetry", "udp", "salsa20", "bass shaker", "sim racing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
salsa20 = "gt7shaker.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gt7shaker"]

[tool.pytest.ini_options]
addopts = "-ra"
