"""
Setup script for pdfcraft.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="pdfcraft",
    version="1.0.0",
    description="Split, merge and compress PDF files in memory, from Python, the command line or HTTP",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="pdfcraft Contributors",
    author_email="",
    packages=find_packages(include=["pdfcraft", "pdfcraft.*"]),
    install_requires=[
        "pypdf>=4.0.0",
        "pypdfium2>=4.20.0",
        "Pillow>=10.0.0",
        "click>=8.0.0",
        "rich>=13.0.0",
        "httpx>=0.25.0",
    ],
    extras_require={
        "server": [
            "fastapi>=0.110.0",
            "python-multipart>=0.0.9",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "fastapi>=0.110.0",
            "python-multipart>=0.0.9",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdfcraft=pdfcraft.cli:cli",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf split merge compress rasterize jpeg cli ranges",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
