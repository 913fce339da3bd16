#!/usr/bin/env python
# vim: set et sw=4 sts=4:

# Copyright 2012 Dave Hughes.
#
# This file is part of db2schema.
#
# db2schema is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free
# Software Foundation, either version 3 of the License, or (at your option)
# any later version.
#
# db2schema is distributed in the hope that it will be useful, but WITHOUT ANY
# WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR
# A PARTICULAR PURPOSE.  See the GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# db2schema.  If not, see <http://www.gnu.org/licenses/>.

import io
import os
import re
from setuptools import setup, find_packages

HERE = os.path.abspath(os.path.dirname(__file__))

REQUIRES = [
    ]

EXTRA_REQUIRES = {
    'db2': ['ibm-db'],
    'test': ['pytest'],
    }

CLASSIFIERS = [
    'Development Status :: 5 - Production/Stable',
    'Environment :: Console',
    'Intended Audience :: System Administrators',
    'Intended Audience :: Developers',
    'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
    'Operating System :: Microsoft :: Windows',
    'Operating System :: POSIX',
    'Operating System :: Unix',
    'Programming Language :: Python :: 3',
    'Programming Language :: SQL',
    'Topic :: Database',
    ]

ENTRY_POINTS = {
    'console_scripts': [
        'db2schema = db2schema.main.db2schema:main',
        ]
    }


def get_version(filename):
    """Returns the value of __version__ in the specified module"""
    with io.open(filename, encoding='utf-8') as source:
        match = re.search(r"^__version__ = '([^']*)'", source.read(), re.MULTILINE)
    if match is None:
        raise ValueError('Unable to find __version__ in %s' % filename)
    return match.group(1)


def description(filename):
    """Returns the first section of the specified reStructuredText file"""
    with io.open(filename, encoding='utf-8') as source:
        return source.read().split('\n\n\n')[0]


def main():
    setup(
        name                 = 'db2schema',
        version              = get_version(os.path.join(HERE, 'db2schema/__init__.py')),
        description          = 'Schema introspection and DDL synthesis for DB2 LUW and DB2 for i',
        long_description     = description(os.path.join(HERE, 'README.rst')),
        classifiers          = CLASSIFIERS,
        author               = 'Dave Hughes',
        author_email         = 'dave@waveform.org.uk',
        keywords             = 'database db2 iseries catalog ddl',
        packages             = find_packages(exclude=['tests']),
        include_package_data = True,
        platforms            = 'ALL',
        python_requires      = '>=3.6',
        install_requires     = REQUIRES,
        extras_require       = EXTRA_REQUIRES,
        zip_safe             = False,
        entry_points         = ENTRY_POINTS,
        )

if __name__ == '__main__':
    main()
