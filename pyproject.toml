[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smartcommit"
version = "0.1.0"
description = "AI-powered Git assistant library backed by a local Ollama server"
requires-python = ">=3.10"
keywords = ["git", "commit", "ollama", "llm", "code-review"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
]
dependencies = [
    "requests",
    "jinja2",
    "rich",
    "pyyaml",
    "tqdm",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["smartcommit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
