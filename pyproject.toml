[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oaikit"
version = "4.0.1"
description = "Conversation tracking, function schemas and request builders for chat-completion style HTTP APIs"
requires-python = ">=3.10"
dependencies = []
keywords = ["chat", "completions", "conversation", "function-calling", "streaming", "api"]
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
    "Typing :: Typed",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["oaikit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
