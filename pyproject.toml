[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ringtag"
version = "0.1.0"
description = "Building blocks for detecting and identifying concentric-ring fiducial markers"
requires-python = ">=3.10"
keywords = [
    "fiducial",
    "marker",
    "concentric circles",
    "ellipse fitting",
    "computer vision",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
]
dependencies = [
    "numpy",
    "scipy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ringtag-simulate = "ringtag.simulation:main"

[tool.hatch.build.targets.wheel]
packages = ["ringtag"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
