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

import logging
from collections import namedtuple

from db2schema.db.param import Parameter
from db2schema.types import (
    extract_simple_type, TYPE_ROW, TYPE_TABLE, TYPE_COLUMN,
)


ReturnColumn = namedtuple('ReturnColumn', (
    'name',               # The name of the returned column
    'position',           # The ordinal of the column in the result
    'type',               # The abstract type of the column
    'db_type',            # The native type of the column
    'length',             # The length of character based types
    'precision',          # The precision of numeric types
    'scale',              # The scale of decimal types
))

FUNCTION_SHAPES = {
    'R': TYPE_ROW,
    'T': TYPE_TABLE,
    'C': TYPE_COLUMN,
}


class Routine(object):
    """Abstract base class for procedures and functions in a DB2 database"""

    type_name = 'Routine'

    def __init__(self, schema_name, specific_name, name, public_name,
            raw_name, return_type=None, func_type=None):
        super(Routine, self).__init__()
        logging.debug("Building %s %s" % (self.type_name.lower(), public_name))
        self.schema_name = schema_name
        self.specific_name = specific_name
        self.name = name
        self.public_name = public_name
        self.raw_name = raw_name
        self.func_type = func_type
        self.return_type = return_type
        self.parameters = []
        self.return_schema = []

    def __repr__(self):
        return '<%s %s>' % (self.type_name, self.public_name)

    def copy(self):
        """Returns a new instance with the same names and no parameters"""
        return type(self)(
            self.schema_name, self.specific_name, self.name,
            self.public_name, self.raw_name, self.return_type, self.func_type)

    def add_parameter(self, param):
        for existing in self.parameters:
            if existing.position == param.position:
                raise ValueError(
                    'Duplicate parameter position %d in %s' % (
                        param.position, self.public_name))
        self.parameters.append(param)
        self.parameters.sort(key=lambda p: p.position)

    def get_parameter(self, name):
        for param in self.parameters:
            if param.name.lower() == name.lower():
                return param
        return None

    def load_parameters(self, rows):
        """Builds the parameters and result shape from RoutineParam tuples.

        Rows with position 0, and the result row of a scalar function, give
        the return type (unless the catalog already declared one). Other
        result rows describe the columns of a row, table or column shaped
        result.
        """
        for row in rows:
            if row.direction == 'R':
                if row.position == 0 or self.func_type == 'S':
                    if not self.return_type:
                        self.return_type = extract_simple_type(row.type_name)
                else:
                    self.return_schema.append(ReturnColumn(
                        row.name,
                        row.position,
                        extract_simple_type(row.type_name, row.length, row.scale),
                        row.type_name,
                        row.length,
                        row.precision,
                        row.scale,
                    ))
            elif row.position == 0:
                if not self.return_type:
                    self.return_type = extract_simple_type(row.type_name)
            else:
                self.add_parameter(Parameter(row))


class Procedure(Routine):
    """Class representing a stored procedure in a DB2 database"""

    type_name = 'Procedure'


class Function(Routine):
    """Class representing a function in a DB2 database.

    The return_type of a function is either an abstract type name (for scalar
    functions), or one of the "row", "table" and "column" markers for
    functions returning a shaped result, in which case return_schema
    describes the columns of the result.
    """

    type_name = 'Function'

    def __init__(self, schema_name, specific_name, name, public_name,
            raw_name, return_type=None, func_type=None):
        if not return_type:
            return_type = FUNCTION_SHAPES.get(func_type)
        super(Function, self).__init__(
            schema_name, specific_name, name, public_name, raw_name,
            return_type, func_type)
