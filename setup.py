"""
Taskboard setup.py — Package configuration and CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="taskboard",
    version="1.0.0",
    description="Taskboard — configurable task manager UI over a REST backend",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "taskboard=taskboard.cli:main",
        ],
    },
    install_requires=[
        "reflex>=0.6.0,<0.9",
        "pydantic>=2.5",
        "pyyaml>=6.0",
        "httpx>=0.27",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
