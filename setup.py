"""
Setup file.
"""

import os

from setuptools import find_packages, setup

KEYWORDS = "solidity foundry forge zksync compiler dependency-graph build"
HERE = os.path.dirname(os.path.abspath(__file__))


def _read_version() -> str:
    with open(os.path.join(HERE, "src", "zkbuild", "__init__.py"), encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=", 1)[1].strip().strip('"')
    raise RuntimeError("Unable to find __version__")


if __name__ == "__main__":
    setup(
        name="zkbuild",
        version=_read_version(),
        description="Compile Solidity sources one file at a time in dependency order",
        maintainer="Zachary Vorhies",
        keywords=KEYWORDS,
        python_requires=">=3.11",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=[
            "psutil>=5.9",
        ],
        extras_require={
            "test": [
                "pytest>=7.0",
            ],
        },
        entry_points={
            "console_scripts": [
                "zkbuild=zkbuild.cli:main",
            ],
        },
        include_package_data=True)
