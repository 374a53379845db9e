#!/usr/bin/env python3
"""Setup script for usergraph."""

import pathlib
from setuptools import setup, find_packages

# Read version from VERSION file
version_file = pathlib.Path(__file__).parent / "VERSION"
with open(version_file, 'r', encoding='utf-8') as f:
    version = f.read().strip()

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Read requirements
with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [
        line.strip()
        for line in fh
        if line.strip() and not line.startswith("#") and not line.startswith("-")
    ]

setup(
    name="usergraph",
    version=version,
    description="usergraph - GraphQL API over users, profiles, posts and member types",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["usergraph", "usergraph.*"]),
    py_modules=["ugapi"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Framework :: FastAPI",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "usergraph-api=ugapi:main",
        ],
    },
    include_package_data=True,
)
