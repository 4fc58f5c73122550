[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lorhammer"
version = "0.1.0"
description = "Building blocks for orchestrating LoRaWAN load tests: scenario files, deployers, provisioners, Prometheus queries and reports"
requires-python = ">=3.10"
keywords = [
    "lorawan",
    "lora",
    "load-testing",
    "stress-testing",
    "mqtt",
    "orchestrator",
    "prometheus",
    "iot",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing :: Traffic Generation",
    "Topic :: System :: Networking",
]
dependencies = [
    "paho-mqtt>=2.0",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["lorhammer"]

[tool.hatch.build.targets.sdist]
include = [
    "lorhammer",
    "tests",
]

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

[tool.coverage.run]
source = ["lorhammer"]
branch = true

[tool.coverage.report]
show_missing = true
