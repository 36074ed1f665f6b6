[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "goster"
version = "0.1.0"
description = "Small HTTP service for user registration and login with JWT-based authentication"
requires-python = ">=3.10"
keywords = ["http", "flask", "jwt", "authentication", "users", "rest", "sqlalchemy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.0",
    "sqlalchemy>=2.0",
    "bcrypt",
    "pyjwt>=2.0",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
goster = "goster.web:main"

[tool.hatch.build.targets.wheel]
packages = ["goster"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
