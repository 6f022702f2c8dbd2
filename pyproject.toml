[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "examtt_tools"
version = "0.1.0"
description = "Helpers for exam timetabling: index selection, bin-packing room choice, and a small XML node tree with a printer"
requires-python = ">=3.10"
dependencies = []
keywords = ["timetabling", "exam scheduling", "bin packing", "room assignment", "xml"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
    "Topic :: Text Processing :: Markup :: XML",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["examtt_tools"]

[tool.pytest.ini_options]
addopts = "-ra"
