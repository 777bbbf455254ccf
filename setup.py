#!/usr/bin/env python
"""Setup script for the jsonshape library."""
from pathlib import Path
from setuptools import setup, find_packages

# project root
here = Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

version = "0.1.0"

setup(
    name="jsonshape",
    version=version,
    author="YC Math",
    author_email="your-email@example.com",
    description="Reflection-driven JSON <-> typed structure interchange (dataclasses, sequences, scalars)",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/ycmath/jsonshape",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="json serialization dataclasses decoding encoding",
    packages=find_packages(exclude=["tests", "tests.*", "docs", "examples"]),
    python_requires=">=3.10",

    install_requires=[
        "numpy>=1.21.0",
        "orjson>=3.9.0",   # orjson.Fragment
    ],

    extras_require={
        "test": [
            "pytest>=7.0.0",
            "hypothesis>=6.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=3.0.0",
            "hypothesis>=6.0.0",
            "black>=22.0.0",
            "isort>=5.10.0",
            "flake8>=4.0.0",
            "mypy>=0.950",
        ],
    },

    entry_points={
        "console_scripts": [
            "jsonshape=jsonshape.cli:main",
        ],
    },

    package_data={
        "jsonshape": ["py.typed"],
    },
    include_package_data=True,
    zip_safe=False,
)
