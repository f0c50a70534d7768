#!/usr/bin/env python3
"""
Setup script for pyhlacontact
"""

from setuptools import setup, find_packages

setup(
    name="pyhlacontact",
    version="0.1.0",
    description="Contact-position weighting and allele divergence for HLA class I",
    packages=find_packages(include=["hlacontact", "hlacontact.*"]),
    install_requires=[
        "pyyaml>=6.0",
        "numpy>=1.22.0",
        "pandas>=1.4.0",
        "requests>=2.27.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'hlacontact=hlacontact.cli.main:main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
)
