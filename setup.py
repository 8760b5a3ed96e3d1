#!/usr/bin/env python

from setuptools import setup
import glob

from srfmon_utilities.utilities import get_srfmon_version

with open("README.md", "r") as fh:
    long_description = fh.read()

scripts = glob.glob("srfmon*.py")

version = get_srfmon_version()[1:]

setup(
    name='SRFmon',
    version=version,
    author='The SRFmon developers',
    description='Project tandem repeat monomers onto satellite repeat alignments',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=['srfmon_utilities'],
    package_dir={'srfmon_utilities': 'srfmon_utilities/'},
    license="MIT",
    classifiers=[
            "Programming Language :: Python :: 3",
            "License :: OSI Approved :: MIT License",
    ],
    install_requires=[
              'intervaltree',
              'numpy',
          ],
    extras_require={
              'test': ['pytest'],
          },
    python_requires='>=3.6',
    scripts=scripts,
    zip_safe=True
)
