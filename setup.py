#!/usr/bin/env python3
"""
Setup script for gnome-randr
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text() if readme_path.exists() else ""

setup(
    name="gnome-randr",
    version="0.2.0",
    author="gnome-randr contributors",
    description="Query and change monitor layouts and brightness on GNOME through Mutter's DisplayConfig D-Bus API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=6.0",
        "numpy>=1.20.0",
    ],
    extras_require={
        "dbus": [
            "dbus-python>=1.3.2",
        ],
        "full": [
            "dbus-python>=1.3.2",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gnome-randr=main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Desktop Environment :: Gnome",
        "Topic :: System :: Hardware",
    ],
)
