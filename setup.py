"""
Setup script for pdfconverter.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="pdfconverter",
    version="1.0.0",
    description="HTTP API and CLI for merging, splitting, extracting, watermarking and compressing PDFs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="PDF Converter Contributors",
    author_email="",
    packages=find_packages(include=["pdfconverter", "pdfconverter.*"]),
    install_requires=[
        "pypdf>=4.3.0",
        "reportlab>=4.0.0",
        "Pillow>=10.0.0",
        "fastapi>=0.110.0",
        "pydantic>=2.0.0",
        "python-multipart>=0.0.9",
        "uvicorn>=0.29.0",
        "click>=8.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "httpx>=0.27.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdfconverter=pdfconverter.cli:cli",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Utilities",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Framework :: FastAPI",
        "Environment :: Console",
    ],
    keywords="pdf merge split extract watermark compress api cli",
    include_package_data=True,
    zip_safe=False,
)
