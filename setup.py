#!/usr/bin/env python
# -*- encoding: utf-8 -*-
import io
import re
from os.path import dirname, join

from setuptools import find_packages, setup


def read(*names, **kwargs):
    return io.open(
        join(dirname(__file__), *names), encoding=kwargs.get("encoding", "utf8")
    ).read()


def find_version(*file_paths):
    contents = read(*file_paths)
    match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", contents, re.M)
    if match:
        return match.group(1)
    raise RuntimeError("Unable to find version string.")


setup(
    name="vnetreport",
    python_requires=">=3.8",
    version=find_version("src", "vnetreport", "__init__.py"),
    license="MIT",
    description="CLI to report the VNETs and subnets across Azure subscriptions",
    long_description="""`vnetreport` enumerates the enabled Azure subscriptions, lists
the Virtual Networks (VNETs) in each and the subnets of each VNET, and prints a
consolidated table with one row per subnet.""",
    long_description_content_type="text/markdown",
    author="FMR LLC",
    author_email="opensource@fidelity.com",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: Unix",
        "Operating System :: POSIX",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Utilities",
    ],
    keywords=["vnetreport", "azure", "vnet", "subnet", "cli"],
    install_requires=[
        "azure-identity",
        "azure-mgmt-network",
        "azure-mgmt-subscription",
        "colorama",
        "PyYAML>=3.10",
    ],
    tests_require=["pytest", "pytest-mock"],
    extras_require={"test": ["pytest", "pytest-mock"]},
    entry_points={
        "console_scripts": [
            "vnetreport = vnetreport.cli:main",
        ]
    },
)
