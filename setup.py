#!/usr/bin/env python3

import os

from setuptools import find_packages, setup

TOPDIR = os.path.dirname(os.path.abspath(__file__))


def get_version():
    """Pull the version out of the package without importing it."""
    with open(os.path.join(TOPDIR, 'src', 'rpmfetch', '__init__.py')) as f:
        for line in f:
            if line.startswith('__version__'):
                return line.split('=', 1)[1].strip().strip("'\"")
    raise RuntimeError('unable to determine version')


def readme():
    path = os.path.join(TOPDIR, 'README.rst')
    if not os.path.exists(path):
        return None
    with open(path) as f:
        return f.read()


setup(**dict(
    name='rpmfetch',
    version=get_version(),
    description='resolve and cache the unresolved RPMs of a build dependency graph',
    long_description=readme(),
    license='BSD',
    python_requires='>=3.8',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    install_requires=[
        'snakeoil>=0.9.6',
        'networkx>=2.6',
        'pydot>=1.4',
    ],
    extras_require={
        'test': ['pytest>=6.0'],
    },
    entry_points={
        'console_scripts': ['rpmfetch = rpmfetch.scripts:main'],
    },
    classifiers=[
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
))
