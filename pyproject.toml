[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lpakit"
version = "2.3.0"
description = "Local profile assistant building blocks for eUICC chips: ES10x APDU framing, ES9+/ES11 server client, notification records and JSON output."
requires-python = ">=3.10"
dependencies = []
keywords = ["euicc", "esim", "lpa", "apdu", "sgp22", "smdp", "smds", "es9p", "es10x"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Telephony",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lpakit = "lpakit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lpakit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
