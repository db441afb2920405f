[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ordinals"
version = "0.1.0"
description = "Ordinal theory for satoshis: sat notation, rarity, inscription ids and inscription envelopes"
requires-python = ">=3.10"
dependencies = []
keywords = ["bitcoin", "ordinals", "satoshi", "inscriptions", "rarity"]
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
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ordinals = "ordinals.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ordinals"]

[tool.pytest.ini_options]
addopts = "-ra"
