# SPDX-License-Identifier: LGPL-3.0-or-later
from setuptools import setup, find_packages

setup(
    name="hiveswarm",
    version="0.1.0",
    packages=find_packages(include=["hiveswarm", "hiveswarm.*"]),
    install_requires=[l.strip() for l in open("requirements.txt", encoding="utf-8") if l.strip() and not l.startswith("#")],
    extras_require={
        "hive": ["hivex"],
        "test": ["pytest"],
    },
    entry_points={"console_scripts": ["hiveswarm=hiveswarm.__main__:main"]},
)
