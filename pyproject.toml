[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slimclient"
version = "0.1.0"
description = "A library for building Slim protocol clients for media servers"
requires-python = ">=3.10"
dependencies = []
keywords = ["slimproto", "squeezebox", "lms", "media server", "audio", "client"]
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
    "Topic :: Multimedia :: Sound/Audio :: Players",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
slimclient = "slimclient.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["slimclient"]

[tool.pytest.ini_options]
addopts = "-ra"
