"""
Setup file.
"""

import os
import re

from setuptools import find_packages, setup

URL = "https://github.com/sasswatch/sasswatch"
KEYWORDS = "sass scss css compiler watch incremental build dependency-tracking"
HERE = os.path.dirname(os.path.abspath(__file__))


def read_version() -> str:
    with open(os.path.join(HERE, "src", "sasswatch", "__init__.py"), encoding="utf-8") as f:
        match = re.search(r"^__version__ = [\"']([^\"']+)[\"']", f.read(), re.MULTILINE)
    if match is None:
        raise RuntimeError("__version__ not found in src/sasswatch/__init__.py")
    return match.group(1)


if __name__ == "__main__":
    setup(
        name="sasswatch",
        version=read_version(),
        description="Incremental Sass builds with dependency-aware watch mode",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        include_package_data=True,
        install_requires=[
            "libsass>=0.22",
            "watchdog>=3.0",
        ],
        extras_require={
            "test": ["pytest>=7.0"],
        },
        entry_points={
            "console_scripts": [
                "sasswatch=sasswatch.cli:main",
            ],
        },
    )
