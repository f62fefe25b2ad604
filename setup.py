#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import re
from pathlib import Path

from setuptools import find_packages, setup

# XXX: read without importing, the package needs its dependencies installed to be imported
_version_file = Path(__file__).parent / 'blobtree' / 'version.py'
__version__ = re.search(r"^BASE_VERSION = '([^']+)'", _version_file.read_text(), re.M).group(1)  # type: ignore

setup(
    name='blobtree',
    version=__version__,
    description='Store Python values as trees of content-addressed blobs',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache License 2.0',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    python_requires='>=3.11',
    packages=find_packages(exclude=('blobtree_tests', 'blobtree_tests.*')),
    package_data={'blobtree.conf': ['*.yml']},
    install_requires=[
        'pydantic>=2.0',
        'pyyaml>=6.0',
        'structlog>=22.3',
        'typing_extensions>=4.5',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
)
