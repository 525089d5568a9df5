[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ingate"
version = "0.1.0"
description = "Gateway controller core: reconcilers that accept GatewayClass and Gateway resources, run by a small manager over an in-memory object store"
requires-python = ">=3.10"
dependencies = []
keywords = ["gateway", "ingress", "controller", "reconciler", "gateway-api"]
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
    "Topic :: System :: Clustering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ingate = "ingate.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ingate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
