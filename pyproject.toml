[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "botplugins"
version = "0.1.0"
description = "Framework-independent logic and SQLite storage for group-chat bot features: fortune slips, tarot, sign-in levels, sleep tracking and more."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["chatbot", "plugins", "tarot", "omikuji", "sign-in", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Communications :: Chat",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["botplugins"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
