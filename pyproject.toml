[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cmdbservice"
version = "0.1.0"
description = "HTTP API layer for a configuration management database: models, attributes, resources and their relations"
requires-python = ">=3.10"
dependencies = [
    "flask",
]
keywords = ["cmdb", "configuration management", "inventory", "http api", "flask"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cmdbservice"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
