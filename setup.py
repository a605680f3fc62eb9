#!/usr/bin/env python3
"""
File-Cache Setup Script
=======================
Allows installation of the file-cache package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # Development install with test tools
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="file-cache",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "file-cache=filecache.cli:main",
        ],
    },
)
