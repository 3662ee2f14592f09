[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "keyword-impact"
version = "0.1.0"
description = "Measure how introducing new reserved keywords would affect popular PHP packages"
requires-python = ">=3.10"
keywords = ["php", "keywords", "rfc", "static-analysis", "packagist", "impact"]
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
    "Programming Language :: PHP",
    "Topic :: Software Development :: Quality Assurance",
]
dependencies = [
    "httpx",
    "rich",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[project.scripts]
keyword-impact = "keyword_impact.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["keyword_impact"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
