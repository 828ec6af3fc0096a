#!/usr/bin/env python3
"""
Setup script for the Rice Mill Admin bag-rates console
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="ricemill-admin",
    version="1.0.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Back-office console and CLI for rice-mill season bag-rate pricing",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/ricemill-admin",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["bag_rates_cli"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Manufacturing",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Office/Business",
    ],
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=8.0.0",
        ],
        "dev": [
            "pytest>=8.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
        "ui": [
            "streamlit>=1.29.0",
            "pandas>=2.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ricemill-bag-rates=bag_rates_cli:main",
        ],
    },
    include_package_data=True,
    package_data={
        "": ["*.yaml", "*.yml"],
    },
)
