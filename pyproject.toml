[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "freeroom"
version = "2.0.0"
description = "Free classroom data: imports a course handbook spreadsheet into MongoDB and runs a health-checked HTTP service"
requires-python = ">=3.10"
keywords = ["classroom", "timetable", "mongodb", "flask", "xlsx"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: Flask",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Education",
]
dependencies = [
    "flask",
    "pymongo",
    "psutil",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
freeroom = "freeroom.app:main"

[tool.setuptools]
packages = ["freeroom"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
