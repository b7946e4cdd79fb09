[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ecoinfra"
version = "0.1.0"
description = "Fluent builders for defining, pulling, creating and cleaning cluster resources such as roles, bindings, secrets, services and SR-IOV objects"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "openshift", "rbac", "sriov", "builder", "infrastructure", "testing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ecoinfra"]

[tool.hatch.build.targets.sdist]
include = ["ecoinfra", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
