[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "web3types"
version = "0.1.0"
description = "Typed Ethereum JSON-RPC data structures with hex-quantity JSON encoding and decoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["ethereum", "json-rpc", "web3", "blocks", "transactions", "traces"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["web3types"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
