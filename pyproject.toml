[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scrubd"
version = "0.1.0"
description = "Detect leaked container runtime resources on Linux hosts and plan their cleanup"
requires-python = ">=3.10"
dependencies = []
keywords = ["containers", "docker", "containerd", "podman", "cleanup", "leaks", "cgroups", "network"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["scrubd"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
