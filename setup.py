#!/usr/bin/env python3
# setup.py: install the proposal test consolidation tool
#
# Install:
#   pip install -e .            (tests: pip install -e .[test])
#
# Run:
#   proposal-tests-sync   (or: python main.py)

from setuptools import setup, find_packages

# Use README.md as the long description when present
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "Consolidate proposal repositories' conformance tests into one tree"

setup(
    name="proposal-tests-sync",
    version="1.0.0",
    description="Consolidate proposal repositories' conformance tests into one tree",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages("src"),
    package_dir={"": "src"},
    entry_points={
        "console_scripts": [
            "proposal-tests-sync=proposal_sync.cli:main",
        ],
    },
    python_requires=">=3.11",
    install_requires=[
        "colorama>=0.4.6",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Version Control :: Git",
        "Topic :: Software Development :: Testing",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
