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

import re
import logging

from db2schema.db.util import quote_ident
from db2schema.types import (
    extract_simple_type, extract_fixed_length, extract_multibyte_support,
    typecast,
)


LENGTH_TYPES = re.compile(r'(char|clob|graphic|binary|blob|varbin|varg)', re.IGNORECASE)
SCALE_TYPES = re.compile(r'(decimal|numeric|double|real)', re.IGNORECASE)


def strip_default(value):
    """Converts a catalog default expression into a default value.

    Surrounding single quotes are stripped from string literals and the NULL
    keyword means "no default".
    """
    if isinstance(value, str):
        value = value.strip("'")
    if value == 'NULL':
        return None
    return value


class Column(object):
    """Class representing a column of a table or view in a DB2 database"""

    def __init__(self, row):
        """Initializes an instance of the class from a ColumnRow"""
        (
            self.name,
            self.position,
            self.db_type,
            default,
            self.allow_null,
            length,
            scale,
            self.auto_increment,
        ) = row
        logging.debug("Building column %s" % self.name)
        self.raw_name = quote_ident(self.name)
        self.size = self.precision = self.scale = None
        if LENGTH_TYPES.search(self.db_type):
            self.size = self.precision = length
        elif SCALE_TYPES.search(self.db_type):
            self.size = self.precision = length
            self.scale = scale
        self.fixed_length = extract_fixed_length(self.db_type)
        self.supports_multibyte = extract_multibyte_support(self.db_type)
        self.type = extract_simple_type(self.db_type, length, scale)
        self.default_value = typecast(self.type, strip_default(default))
        self.is_primary_key = False
        self.is_foreign_key = False
        self.ref_table = None
        self.ref_field = None

    def __repr__(self):
        return '<Column %s %s>' % (self.name, self.db_type)

    def _get_type_str(self):
        """Returns the native type of the column with its size and scale"""
        if self.size is None:
            return self.db_type
        elif self.scale is None:
            return '%s(%s)' % (self.db_type, self.size)
        else:
            return '%s(%s,%s)' % (self.db_type, self.size, self.scale)

    type_str = property(_get_type_str)
