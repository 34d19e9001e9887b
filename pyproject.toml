[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ucankit"
version = "0.1.0"
description = "did:key identifiers, UCAN commands, arguments, metadata, CIDs, CAR files and token containers"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
    "cbor2",
]
keywords = [
    "ucan",
    "did",
    "did:key",
    "capabilities",
    "authorization",
    "ipld",
    "cid",
    "car",
    "cbor",
]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ucankit"]

[tool.hatch.build.targets.sdist]
include = [
    "ucankit",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
