#!/usr/bin/env python3
"""
Disk-Cache Setup Script
=======================
Allows installation of the disk-cache package.

Usage:
    pip install -e .           # Development install
    pip install -e ".[test]"   # With test dependencies
"""

from setuptools import setup, find_packages

setup(
    name="disk-cache",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
)
