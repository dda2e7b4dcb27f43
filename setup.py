#!/usr/bin/env python3
import setuptools

setuptools.setup(
    name="goimporter",
    version="0.1.0",
    packages=["goimporter"],
    python_requires=">=3.11",
    install_requires=[
        "click",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "goimporter = goimporter.cli:main",
        ],
    },
    author="",
    description="Command-line tool to group and sort the import blocks of Go source files",
    license="MIT",
)
