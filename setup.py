#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""pyBulkMicro is the NDSL version of a two-moment bulk warm rain microphysics."""

from setuptools import find_namespace_packages, setup


with open("README.md", encoding="utf-8") as readme_file:
    readme = readme_file.read()

requirements = ["numpy"]

test_requirements = ["pytest", "pytest-subtests", "coverage"]
ndsl_requirements = ["ndsl @ git+https://github.com/NOAA-GFDL/NDSL.git@2024.04.00"]
develop_requirements = test_requirements + ndsl_requirements + ["pre-commit"]

extras_requires = {
    "test": test_requirements,
    "ndsl": ndsl_requirements,
    "develop": develop_requirements,
}

setup(
    author="NASA",
    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache 2 License",
        "Natural Language :: English",
        "Programming Language :: Python :: 3.11",
    ],
    description="pyBulkMicro is the NDSL version of a two-moment bulk warm rain microphysics.",
    install_requires=requirements,
    extras_require=extras_requires,
    license="BSD license",
    long_description=readme,
    include_package_data=True,
    name="pyBulkMicro",
    packages=find_namespace_packages(include=["pyBulkMicro", "pyBulkMicro.*"]),
    setup_requires=[],
    test_suite="tests",
    version="0.0.0",
    zip_safe=False,
)
