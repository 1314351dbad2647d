[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcpcore"
version = "0.1.0"
description = "Protocol types, JSON-RPC messages, and prompt and resource managers for the Model Context Protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["mcp", "model-context-protocol", "json-rpc", "tools", "prompts", "resources"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mcpcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
