#!/usr/bin/env python3
"""
Rediska Setup Script
====================
Allows installation of the rediska package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # With test dependencies
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="rediska",
    version="0.2.2",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "rediska-cli=rediska.client:main",
        ],
    },
)
