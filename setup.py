"""
Setup script for PDF Merger CLI.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="pdf-merger-cli",
    version="1.0.0",
    description="Merge PDF files or selected pages while preserving URI and internal page links",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="PDF Merger CLI Contributors",
    author_email="",
    packages=find_packages(include=["pdf_merger", "pdf_merger.*"]),
    install_requires=[
        "pypdf>=5.0.0",
        "click>=8.0.0",
        "rich>=13.0.0",
        "fastapi>=0.100.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdf-merger=pdf_merger.cli:cli",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: End Users/Desktop",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf merge merger cli pages ranges links annotations hyperlinks",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
