[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fsgate"
version = "0.1.0"
description = "Filesystem tools for Model Context Protocol style tool calls, confined to allowed directories"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "mcp",
    "model-context-protocol",
    "filesystem",
    "tools",
    "sandbox",
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
    "Topic :: System :: Filesystems",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fsgate"]

[tool.pytest.ini_options]
addopts = "-ra"
