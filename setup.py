#!/usr/bin/env python

from setuptools import setup, find_namespace_packages

setup(
    name="simpdiscovery",
    version="1.0.0",
    description="Simple UDP broadcast beacons for discovering services on a LAN",
    packages=find_namespace_packages("src", include=["simpdiscovery", "simpdiscovery.*"]),
    package_dir={"": "src"},
    package_data={"": ["py.typed"]},
    python_requires=">=3.9",
    install_requires=("psutil",),
    extras_require={
        "test": ("pytest", "pytest-timeout"),
    },
    entry_points={
        "console_scripts": [
            "simpdiscovery-announce=simpdiscovery.cli:announce",
            "simpdiscovery-listen=simpdiscovery.cli:listen",
            "simpdiscovery-announce-and-wait=simpdiscovery.cli:announce_and_wait",
        ],
    },
)
