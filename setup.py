# Copyright ClusterHQ Inc.  See LICENSE file for details.

"""
Package hellod, an HTTP server which answers every request with
``Hello world``.
"""

import os

from setuptools import setup, find_packages

with open("README.rst") as readme:
    description = readme.read()

_version = {}
with open(os.path.join("hellod", "_version.py")) as f:
    exec(f.read(), _version)


def parse_requirements(requirements_file):
    """
    Parse a requirements file.

    Comments and blank lines are skipped and ``-r`` lines are followed,
    relative to the file that contains them.
    """
    requirements = []
    with open(requirements_file) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            elif line.startswith('-r'):
                included = line.split(None, 1)[1]
                requirements.extend(parse_requirements(
                    os.path.join(os.path.dirname(requirements_file), included)
                ))
            else:
                requirements.append(line)
    return requirements

# Parse the ``.in`` files so that dependencies float when hellod is
# installed using ``pip install .``.
install_requires = parse_requirements("requirements/hellod.txt.in")
dev_requires = [
    requirement
    for requirement in parse_requirements("requirements/hellod-dev.txt.in")
    if requirement not in install_requires
]

setup(
    name="hellod",
    version=_version["__version__"],
    author="hellod developers",
    license="Apache License, Version 2.0",
    long_description=description,
    python_requires=">=3.8",

    packages=find_packages(),

    entry_points={
        'console_scripts': [
            'hellod = hellod.script:hellod_main',
        ],
    },

    install_requires=install_requires,

    extras_require={
        # This extra is for developers who need to work on hellod itself.
        "dev": dev_requires,
    },

    classifiers=[
        "License :: OSI Approved :: Apache Software License",
        "Framework :: Twisted",
        "Programming Language :: Python :: 3",
        ],
    )
