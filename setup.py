"""
Setup script for the periselene package.

The library is pure Python: the mission control core plus in-memory
and SQLite reference adapters. Tests need the ``test`` extra.
"""

from setuptools import setup, find_packages

setup(
    name="periselene-mission-control",
    version="1.0.0",
    description="Periselene mission control core - synchronized mission clock, launches and scoring",
    author="Periselene Team",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
