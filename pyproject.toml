[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zhv"
version = "0.1.0"
description = "Suggest English variable names for Chinese terms using an OpenAI-compatible chat API"
requires-python = ">=3.10"
keywords = ["naming", "variable names", "chinese", "llm", "openai", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
zhv = "zhv.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["zhv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
