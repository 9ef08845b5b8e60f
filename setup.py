#!/usr/bin/env python3
"""
Setup configuration for Pocket Cleaner
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="pocket-cleaner",
    version="1.0.0",
    description="Normalizes and deduplicates Pocket CSV bookmark exports into a cleaned CSV and an optional SQLite table",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
            "pandas>=1.5",
        ],
    },
    entry_points={
        "console_scripts": [
            "pocket-cleaner=pocket_cleaner.main:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
