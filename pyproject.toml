[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "manifesto"
version = "0.1.0"
description = "Building blocks for multi-tenant services: identifiers, auth context, pagination, structured logging and tenant/user domain models."
requires-python = ">=3.10"
dependencies = []
keywords = ["multi-tenant", "iam", "logging", "pagination", "scopes", "tenants"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["manifesto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
