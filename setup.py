# setup.py
"""Setup script for Lockable Resources."""

from setuptools import setup, find_packages

setup(
    name="lockable-resources",
    version="0.1.0",
    packages=find_packages(include=["lockable", "lockable.*", "cli", "cli.*"]),
    include_package_data=True,
    install_requires=[
        "click>=8.0",
        "pyyaml>=6.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "structlog>=23.1",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
            "flake8>=6.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "lockable=cli.main:cli",
        ],
    },
    python_requires=">=3.8",
)
