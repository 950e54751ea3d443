#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
LinkWeaver: Barcode-Based Scaffold Linkage Graphs

Infers scaffold adjacency from linked-read barcodes that co-occur at scaffold
ends and writes a weighted, oriented linkage graph for downstream scaffolding.

Version: 0.1
License: Dual Academic/Commercial (see LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md)
"""

from setuptools import setup, find_packages
import os

# Read version from package
version = {}
with open(os.path.join(os.path.dirname(__file__), "linkweaver", "version.py")) as f:
    exec(f.read(), version)

# Read long description from README
with open(os.path.join(os.path.dirname(__file__), "README.md"), "r", encoding="utf-8") as f:
    long_description = f.read()

# Read requirements from requirements.txt
def read_requirements(filename):
    """Read requirements from file."""
    filepath = os.path.join(os.path.dirname(__file__), filename)
    if not os.path.exists(filepath):
        return []
    with open(filepath, "r") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]

# Basic requirements (always installed)
install_requires = read_requirements("requirements.txt")

# Optional dependencies
extras_require = {
    "dev": read_requirements("requirements-dev.txt"),
}
extras_require["test"] = extras_require["dev"]

setup(
    name="linkweaver",
    version=version["__version__"],
    author="LinkWeaver Development Team",
    description="Barcode-based scaffold linkage graphs from linked-read alignments",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: Other/Proprietary License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "linkweaver=linkweaver.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
    keywords="scaffolding linked-reads barcodes genome assembly bioinformatics graph",
)
