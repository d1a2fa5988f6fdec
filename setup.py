"""Setup configuration for bulb-discovery tool."""

from setuptools import setup, find_packages

setup(
    name="bulb-discovery",
    version="0.1.0",
    description="Multicast discovery of smart bulbs on the local network",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "bulb-discovery=bulb_discovery.cli:main",
        ],
    },
)
