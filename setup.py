#!/usr/bin/env python
"""
ShotSolve - screenshot to solution
Capture coding problems and get solutions from a vision model
"""

from setuptools import setup, find_namespace_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setup(
    name="shotsolve",
    version="0.1.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Capture coding problems and get solutions from a vision model",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/shotsolve",
    packages=find_namespace_packages(include=["core*", "modules*", "shotsolve*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Multimedia :: Graphics :: Capture :: Screen Capture",
        "Topic :: Software Development",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Operating System :: Microsoft :: Windows",
    ],
    python_requires=">=3.10",
    install_requires=[
        "mss>=9.0.1",
        "Pillow>=10.0.0",
        "requests>=2.31.0",
        "pydantic>=2.0.0",
        "keyring>=24.0.0",
        "pyyaml>=6.0.1",
        "coloredlogs>=15.0.1",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "pytest-asyncio>=0.21.0",
            "pytest-mock>=3.12.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.5.0",
            "isort>=5.12.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "shotsolve=shotsolve.cli:main",
        ],
    },
    include_package_data=True,
    package_data={
        "": ["config/*.yaml"],
    },
    keywords="screenshot coding-interview vision-model solution capture shotsolve",
    project_urls={
        "Bug Reports": "https://github.com/yourusername/shotsolve/issues",
        "Source": "https://github.com/yourusername/shotsolve",
    },
)
